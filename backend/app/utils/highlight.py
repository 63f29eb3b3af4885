import re

from app.schemas.search import HighlightSpan
from app.utils.query import split_terms


def build_pattern(raw_query: str) -> re.Pattern | None:
    terms = split_terms(raw_query)
    if not terms:
        return None
    # Terms are user input: match them literally.
    alternation = "|".join(re.escape(t) for t in terms)
    return re.compile(f"({alternation})", re.IGNORECASE)


def highlight(text: str, raw_query: str) -> list[HighlightSpan]:
    """
    Split ``text`` into matching and non-matching spans for ``raw_query``.

    Matching is case-insensitive and substring based; spans keep the casing
    of ``text`` and always concatenate back to it exactly.
    """
    if not text:
        return [HighlightSpan(text="", is_match=False)]

    pattern = build_pattern(raw_query or "")
    if pattern is None:
        return [HighlightSpan(text=text, is_match=False)]

    # With a single capture group, re.split puts the matches at odd indexes.
    parts = pattern.split(text)
    return [
        HighlightSpan(text=part, is_match=i % 2 == 1)
        for i, part in enumerate(parts)
        if part
    ]
