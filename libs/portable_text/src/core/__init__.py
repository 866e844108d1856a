"""Core — temps de lecture + extraits."""
from .reading_time import (
    WORDS_PER_MINUTE,
    extract_text,
    count_words,
    estimate_reading_time,
    format_reading_time,
)
from .excerpt import (
    ELLIPSIS,
    EXCERPT_COMPACT,
    EXCERPT_GRID,
    EXCERPT_RELATED,
    EXCERPT_FEATURED,
    EXCERPT_LEAD,
    EXCERPT_HERO,
    truncate,
)

__all__ = [
    "WORDS_PER_MINUTE",
    "extract_text",
    "count_words",
    "estimate_reading_time",
    "format_reading_time",
    "ELLIPSIS",
    "EXCERPT_COMPACT",
    "EXCERPT_GRID",
    "EXCERPT_RELATED",
    "EXCERPT_FEATURED",
    "EXCERPT_LEAD",
    "EXCERPT_HERO",
    "truncate",
]
