"""Bloc Image inline — image seule, taille + alignement, légende optionnelle."""
from typing import Literal, Optional
from pydantic import Field

from .base import BaseBlock, ImageSource


class InlineImage(ImageSource, BaseBlock):
    block_kind: Literal["InlineImage"] = Field(default="InlineImage", alias="blockKind")
    size: Optional[str] = "large"         # small | medium | large | fullBleed
    alignment: Optional[str] = "center"   # left | center | right, ignoré si fullBleed

    @property
    def is_full_bleed(self) -> bool:
        return self.size == "fullBleed"
