"""
Blocs — exports publics + BlockUnion discriminé.
"""
from typing import Annotated, Union
from pydantic import Field

from .base import CMSModel, BaseBlock, AssetRef, Crop, ImageSource
from .text import TextBlock, Span, LinkMark, DECORATORS, STYLES
from .image import InlineImage
from .gallery import ImageGallery, GalleryImage, GALLERY_MIN, GALLERY_MAX
from .pull_quote import PullQuote

# Union discriminée par block_kind, utilisable dans Pydantic avec discriminator
BlockUnion = Annotated[
    Union[
        TextBlock,
        InlineImage,
        ImageGallery,
        PullQuote,
    ],
    Field(discriminator="block_kind"),
]

__all__ = [
    # Base
    "CMSModel", "BaseBlock", "AssetRef", "Crop", "ImageSource",
    # Texte
    "TextBlock", "Span", "LinkMark", "DECORATORS", "STYLES",
    # Images
    "InlineImage", "ImageGallery", "GalleryImage", "GALLERY_MIN", "GALLERY_MAX",
    # Citation
    "PullQuote",
    # Union
    "BlockUnion",
]
