"""
Parser — JSON du CMS → blocs typés.

Le discriminant est `blockKind` (TextBlock, InlineImage…) ou le `_type` CMS
(block, inlineImage…). Un bloc inconnu ou invalide renvoie None : l'appelant
le saute, le reste du document continue.
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .blocks import BaseBlock, LinkMark, TextBlock, InlineImage, ImageGallery, PullQuote

log = logging.getLogger(__name__)

# ── Registry des blocs ───────────────────────────────────────────────────────

_BLOCK_REGISTRY: Dict[str, type] = {
    "TextBlock":    TextBlock,
    "InlineImage":  InlineImage,
    "ImageGallery": ImageGallery,
    "PullQuote":    PullQuote,
}

# `_type` CMS → block_kind
_KIND_ALIASES = {
    "block":        "TextBlock",
    "inlineImage":  "InlineImage",
    "imageGallery": "ImageGallery",
    "pullQuote":    "PullQuote",
}


def block_kind_of(raw: Any) -> Optional[str]:
    """Nom du bloc pour un dict CMS, None si absent ou non reconnu."""
    if isinstance(raw, BaseBlock):
        return raw.block_kind
    if not isinstance(raw, dict):
        return None
    kind = raw.get("blockKind") or raw.get("_type")
    if not isinstance(kind, str):
        return None
    kind = _KIND_ALIASES.get(kind, kind)
    return kind if kind in _BLOCK_REGISTRY else None


def _normalize_text(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Filtre les enfants non-span et remonte les marks inline dans markDefs."""
    data = dict(raw)
    children = data.get("children")
    if not isinstance(children, list):
        return data

    raw_defs = data.get("markDefs")
    mark_defs = [m for m in raw_defs if isinstance(m, dict)] if isinstance(raw_defs, list) else []
    spans = []
    for child in children:
        if not isinstance(child, dict) or child.get("_type", "span") != "span":
            continue
        raw_marks = child.get("marks")
        marks = []
        for mark in raw_marks if isinstance(raw_marks, list) else []:
            if isinstance(mark, str):
                marks.append(mark)
            elif isinstance(mark, dict):
                # Mark inline {"linkType": …} → annotation du bloc avec clé synthétique
                key = mark.get("_key")
                if not isinstance(key, str) or not key:
                    key = f"{data.get('_key') or 'block'}-link{len(mark_defs)}"
                mark_defs.append({**mark, "_key": key})
                marks.append(key)
        spans.append({**child, "marks": marks})

    data["children"] = spans
    data["markDefs"] = _valid_links(mark_defs, data.get("_key"))
    return data


def _valid_links(mark_defs: List[Dict[str, Any]], block_key: Any) -> List[Dict[str, Any]]:
    """Une annotation invalide est retirée seule : le texte reste, sans lien."""
    kept = []
    for m in mark_defs:
        try:
            LinkMark.model_validate(m)
        except ValidationError as e:
            log.warning("Annotation %r ignorée (bloc key=%s) : %s", m.get("_key"), block_key, e.errors()[0]["msg"])
            continue
        kept.append(m)
    return kept


def parse_block(raw: Any) -> Optional[BaseBlock]:
    """Instancie un bloc depuis sa forme CMS. None si inconnu ou invalide."""
    if isinstance(raw, BaseBlock):
        return raw

    kind = block_kind_of(raw)
    if kind is None:
        kind_label = raw.get("blockKind") or raw.get("_type") if isinstance(raw, dict) else type(raw).__name__
        log.warning("Bloc ignoré — type inconnu : %r", kind_label)
        return None

    block_cls = _BLOCK_REGISTRY[kind]
    data = _normalize_text(raw) if block_cls is TextBlock else dict(raw)
    data.pop("_type", None)
    data["blockKind"] = kind

    try:
        return block_cls.model_validate(data)
    except ValidationError as e:
        log.warning("Bloc %s ignoré (key=%s) — %d erreur(s) : %s",
                    kind, raw.get("_key"), e.error_count(), e.errors()[0]["msg"])
        return None


def parse_document(content: Any) -> List[BaseBlock]:
    """
    Parse un document complet. Les blocs invalides sont sautés individuellement.
    Un contenu qui n'est pas une liste donne un document vide.
    """
    if not isinstance(content, list):
        return []
    return [b for b in (parse_block(raw) for raw in content) if b is not None]
