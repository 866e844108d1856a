"""Bloc Texte — paragraphe, titres h1–h3, citation, éléments de liste ; spans + marks (décorateurs / liens)."""
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import Field, field_validator

from .base import BaseBlock, CMSModel

# Décorateurs simples (CMS) → balise HTML
DECORATORS: Dict[str, str] = {
    "strong":         "strong",
    "em":             "em",
    "code":           "code",
    "underline":      "u",
    "strike-through": "s",
}

# Styles rendus ; un style inconnu retombe sur "normal"
STYLES = ("normal", "h1", "h2", "h3", "blockquote")

# Noms longs acceptés en entrée
_STYLE_ALIASES = {"heading1": "h1", "heading2": "h2", "heading3": "h3"}


class LinkMark(CMSModel):
    """Annotation lien. La cible dépend de link_type : href | page | post (autre valeur : pas de lien)."""
    key: Optional[str] = Field(default=None, alias="_key")
    link_type: Optional[str] = Field(default=None, alias="linkType")
    href: Optional[str] = None
    # slug déréférencé (str) ou référence brute {"_ref": id}
    page: Optional[Union[str, Dict[str, Any]]] = None
    post: Optional[Union[str, Dict[str, Any]]] = None
    open_in_new_tab: bool = Field(default=False, alias="openInNewTab")


class Span(CMSModel):
    text: str = ""
    marks: List[str] = Field(default_factory=list)

    @field_validator("text", mode="before")
    @classmethod
    def _none_text(cls, v):
        return "" if v is None else v


class TextBlock(BaseBlock):
    block_kind: Literal["TextBlock"] = Field(default="TextBlock", alias="blockKind")
    style: str = "normal"
    children: List[Span]
    mark_defs: List[LinkMark] = Field(default_factory=list, alias="markDefs")
    # Élément de liste : bullet | number, imbriqué selon level (1 = racine)
    list_item: Optional[str] = Field(default=None, alias="listItem")
    level: Optional[int] = None

    @field_validator("style", mode="before")
    @classmethod
    def _normalize_style(cls, v):
        if v is None:
            return "normal"
        return _STYLE_ALIASES.get(v, v) if isinstance(v, str) else v

    def link_index(self) -> Dict[str, LinkMark]:
        return {m.key: m for m in self.mark_defs if m.key}

    def link_for(self, span: Span, defs: Optional[Dict[str, LinkMark]] = None) -> Optional[LinkMark]:
        """Premier mark du span qui référence une annotation lien du bloc."""
        if defs is None:
            defs = self.link_index()
        for mark in span.marks:
            if mark in defs:
                return defs[mark]
        return None

    def decorators_for(self, span: Span) -> List[str]:
        return [DECORATORS[m] for m in span.marks if m in DECORATORS]

    @property
    def plain_text(self) -> str:
        return " ".join(s.text for s in self.children if s.text)
