"""
Portable Text v0.1 — rendu du contenu structuré d'un article + temps de lecture.

Usage :
    >>> from portable_text import render_content, estimate_reading_time, format_reading_time
    >>> html = render_content(post["content"], resolve_image_url=url_for_image)
    >>> label = format_reading_time(estimate_reading_time(post["content"]))   # "6 min read"

Les deux opérations sont pures et indépendantes : même document en entrée,
aucun état conservé entre deux appels.
"""

# ── Blocs ────────────────────────────────────────────────────────────────────
from .blocks import (
    CMSModel, BaseBlock, AssetRef, Crop, ImageSource,
    TextBlock, Span, LinkMark,
    InlineImage, ImageGallery, GalleryImage,
    PullQuote,
    BlockUnion,
)

# ── Parser ───────────────────────────────────────────────────────────────────
from .parser import parse_block, parse_document, block_kind_of

# ── Renderer ─────────────────────────────────────────────────────────────────
from .renderer import (
    ImageUrlResolver, LinkResolver, resolve_link,
    render_content, render_blocks, render_spans, render_list,
)

# ── Temps de lecture + extraits ──────────────────────────────────────────────
from .core import (
    WORDS_PER_MINUTE, extract_text, count_words,
    estimate_reading_time, format_reading_time,
    truncate,
)

__version__ = "0.1.0"

__all__ = [
    # blocs
    "CMSModel", "BaseBlock", "AssetRef", "Crop", "ImageSource",
    "TextBlock", "Span", "LinkMark",
    "InlineImage", "ImageGallery", "GalleryImage",
    "PullQuote", "BlockUnion",
    # parser
    "parse_block", "parse_document", "block_kind_of",
    # renderer
    "ImageUrlResolver", "LinkResolver", "resolve_link",
    "render_content", "render_blocks", "render_spans", "render_list",
    # core
    "WORDS_PER_MINUTE", "extract_text", "count_words",
    "estimate_reading_time", "format_reading_time", "truncate",
]
