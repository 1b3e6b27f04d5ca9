"""HTTP API for the content feeds."""

from .app import create_app

__all__ = ["create_app"]
