"""
Maps each source's native record onto the canonical SearchResult.

Field mapping is declared per source type in ``SOURCE_FIELD_MAPS``; nothing
is inferred from the record itself. Scores are copied as-is, so scores from
different sources are not directly comparable.
"""
import math
from typing import Any

from pydantic import BaseModel

from app.schemas.search import SearchResult

UNTITLED = "Untitled"


class FieldMapping(BaseModel):
    title: tuple[str, ...]
    description: tuple[str, ...]
    metadata: tuple[str, ...] = ()


SOURCE_FIELD_MAPS: dict[str, FieldMapping] = {
    "product": FieldMapping(
        title=("name", "title"),
        description=("description", "content"),
        metadata=("category", "price"),
    ),
    "article": FieldMapping(
        title=("title", "name"),
        description=("content", "description"),
        metadata=("author", "tags"),
    ),
}

DEFAULT_FIELD_MAP = FieldMapping(
    title=("title", "name"),
    description=("description", "content"),
)


def _first_text(record: dict[str, Any], fields: tuple[str, ...]) -> str | None:
    for field in fields:
        value = record.get(field)
        if value is None:
            continue
        value = str(value)
        if value:
            return value
    return None


def _coerce_score(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    # inf/nan have no JSON form.
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return 0.0


def normalize(record: dict[str, Any], source_type: str) -> SearchResult:
    mapping = SOURCE_FIELD_MAPS.get(source_type, DEFAULT_FIELD_MAP)
    metadata = {f: record[f] for f in mapping.metadata if record.get(f) is not None}
    record_id = record.get("id")

    return SearchResult(
        id="" if record_id is None else str(record_id),
        source_type=source_type,
        title=_first_text(record, mapping.title) or UNTITLED,
        description=_first_text(record, mapping.description) or "",
        relevance_score=_coerce_score(record.get("score")),
        metadata=metadata,
    )
