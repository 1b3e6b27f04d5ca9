#!/usr/bin/env python3
"""Serve the content feed API.

Usage:
    python scripts/serve.py [--port 8000]

Environment Variables:
    DH_CACHE_TTL_SECONDS: Cache lifetime per feed (default 300)
    DH_FEEDS_CONFIG_PATH: JSON feed registry replacing the packaged one
    DH_LOG_LEVEL / DH_LOG_FORMAT: Logging level and console|json output
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from dailyhope_feeds.config.settings import settings


def main():
    parser = argparse.ArgumentParser(description="Serve the content feed API")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "dailyhope_feeds.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
