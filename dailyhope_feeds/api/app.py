"""HTTP entry point for the content feeds.

Run with: python scripts/serve.py
"""

import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
import structlog

from .models import ContentRequest, FailureResponse, success_response
from ..config.feeds import FeedRegistry
from ..config.logging import configure_logging
from ..config.settings import settings
from ..errors import UpstreamFetchError
from ..ingestion.cache import FeedCache
from ..ingestion.fetcher import FeedFetcher
from ..ingestion.service import FeedIngestionService

logger = structlog.get_logger()

ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
}


def _failure(message: str, status_code: int) -> JSONResponse:
    body = FailureResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=CORS_HEADERS)


async def _parse_request(request: Request) -> ContentRequest:
    """Read the JSON body. Missing or null fields take their defaults."""
    raw = await request.body()
    data = json.loads(raw) if raw.strip() else {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return ContentRequest.model_validate({k: v for k, v in data.items() if v is not None})


def create_app(service: FeedIngestionService = None) -> FastAPI:
    """Build the API. Without a service one is created on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.service is not None:
            yield
        else:
            configure_logging(settings.log_level, settings.log_format)
            registry = FeedRegistry.from_file(settings.feeds_config_path)
            cache = FeedCache(ttl_seconds=settings.cache_ttl_seconds)
            async with FeedFetcher() as fetcher:
                app.state.service = FeedIngestionService(
                    registry, fetcher, cache, max_items=settings.max_items_per_feed
                )
                logger.info("service_started", feeds=len(registry), ttl_seconds=cache.ttl_seconds)
                yield
            logger.info("service_stopped")

    app = FastAPI(
        title="Daily Hope Feeds",
        description="Normalized podcast, devotional and video feeds",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=ALLOWED_HEADERS,
    )

    @app.get("/health")
    async def health(request: Request):
        """Health check endpoint for load balancers."""
        current = request.app.state.service
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "cached_keys": len(current.cache) if current is not None else 0,
        }

    @app.options("/")
    @app.options("/content")
    async def preflight():
        return PlainTextResponse("ok", headers=CORS_HEADERS)

    @app.post("/")
    @app.post("/content")
    async def fetch_content(request: Request):
        try:
            content_request = await _parse_request(request)
        except ValueError as e:
            logger.warning("invalid_content_request", error=str(e))
            return _failure("Invalid request body", 400)

        current = request.app.state.service
        content_type = content_request.type
        logger.info("content_requested", content_type=content_type.value, language=content_request.language)

        try:
            items = await current.get_content(content_type, content_request.language)
        except UpstreamFetchError as e:
            logger.error("content_request_failed", content_type=content_type.value, error=str(e))
            return _failure(str(e), 502)
        except Exception as e:
            logger.exception("content_request_error", content_type=content_type.value)
            return _failure(str(e) or "Unknown error", 500)

        body = success_response(content_type, items)
        return JSONResponse(
            content=body.model_dump(),
            headers={
                **CORS_HEADERS,
                "Cache-Control": f"public, s-maxage={int(current.cache.ttl_seconds)}",
            },
        )

    return app


app = create_app()
