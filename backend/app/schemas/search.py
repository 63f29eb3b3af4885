from typing import Any

from pydantic import BaseModel, ConfigDict


class SearchResult(BaseModel):
    id: str
    source_type: str  # "product" or "article"
    title: str
    description: str
    relevance_score: float = 0.0
    metadata: dict[str, Any] = {}


class GlobalSearchResponse(BaseModel):
    success: bool = True
    count: int
    query: str
    results: list[SearchResult]
    message: str | None = None
    failed_sources: list[str] | None = None


class SearchErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str | None = None
    error_type: str | None = None
    details: dict[str, Any] | None = None


class HighlightSpan(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    is_match: bool


class RenderedResult(BaseModel):
    result: SearchResult
    title: list[HighlightSpan]
    description: list[HighlightSpan]
