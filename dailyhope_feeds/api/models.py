"""Request and response models for the content endpoint."""

from typing import Any, Dict, List, Literal, Sequence, Union

from pydantic import BaseModel, Field

from ..ingestion.interfaces import ContentType, NormalizedItem


class ContentRequest(BaseModel):
    """Body of a content request. Both fields are optional."""
    type: ContentType = Field(default=ContentType.PODCAST, description="Feed family")
    language: str = Field(default="en", description="Language code, e.g. en or es")


class PodcastsResponse(BaseModel):
    success: Literal[True] = True
    podcasts: List[Dict[str, Any]]


class ArticlesResponse(BaseModel):
    success: Literal[True] = True
    articles: List[Dict[str, Any]]


class VideosResponse(BaseModel):
    success: Literal[True] = True
    videos: List[Dict[str, Any]]


class FailureResponse(BaseModel):
    """Every array key is present so clients can destructure safely."""
    success: Literal[False] = False
    error: str
    podcasts: List[Dict[str, Any]] = Field(default_factory=list)
    articles: List[Dict[str, Any]] = Field(default_factory=list)
    videos: List[Dict[str, Any]] = Field(default_factory=list)


ContentResponse = Union[PodcastsResponse, ArticlesResponse, VideosResponse, FailureResponse]


def success_response(content_type: ContentType, items: Sequence[NormalizedItem]) -> ContentResponse:
    """Wrap items in the response variant for their content type."""
    payload = [item.to_dict() for item in items]
    if content_type is ContentType.PODCAST:
        return PodcastsResponse(podcasts=payload)
    if content_type is ContentType.DEVOTIONAL:
        return ArticlesResponse(articles=payload)
    return VideosResponse(videos=payload)
