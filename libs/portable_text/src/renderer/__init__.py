"""Renderer — HTML + protocols collaborateurs."""
from .base import ImageUrlResolver, LinkResolver, resolve_link
from .html import (
    render_content,
    render_blocks,
    render_spans,
    render_list,
    INLINE_IMAGE_WIDTHS,
    GALLERY_GRID_CROP,
    GALLERY_SCROLL_CROP,
)

__all__ = [
    "ImageUrlResolver", "LinkResolver", "resolve_link",
    "render_content", "render_blocks", "render_spans", "render_list",
    "INLINE_IMAGE_WIDTHS", "GALLERY_GRID_CROP", "GALLERY_SCROLL_CROP",
]
