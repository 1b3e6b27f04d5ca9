"""Daily Hope content feeds: RSS ingestion, caching and normalization."""

__version__ = "1.0.0"
