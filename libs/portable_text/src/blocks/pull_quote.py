"""Bloc Pull Quote — citation mise en avant, centrée (large) ou en marge (sidebar)."""
from typing import Literal, Optional
from pydantic import Field

from .base import BaseBlock


class PullQuote(BaseBlock):
    block_kind: Literal["PullQuote"] = Field(default="PullQuote", alias="blockKind")
    quote: str = Field(..., min_length=1)
    attribution: Optional[str] = None
    style: Optional[str] = "large"    # large | sidebar (toute autre valeur → sidebar)
