"""Exception types for feed ingestion."""

from typing import Optional


class FeedIngestionError(Exception):
    """Base class for feed ingestion failures."""


class UpstreamFetchError(FeedIngestionError):
    """The upstream feed could not be fetched (network error or non-2xx)."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"Failed to fetch feed: {status}"
        else:
            message = f"Failed to fetch feed: {reason or 'network error'}"
        super().__init__(message)


# Name used by callers that think in terms of "fetching a feed".
FeedFetchError = UpstreamFetchError


class MalformedItemError(FeedIngestionError):
    """A single <item> block has nothing usable in it. Never fatal."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Malformed item {index}: {reason}")


class FeedNotConfiguredError(FeedIngestionError):
    """No feed URL is registered for a content type."""

    def __init__(self, content_type: str, language: str):
        self.content_type = content_type
        self.language = language
        super().__init__(f"No feed configured for {content_type} ({language})")
