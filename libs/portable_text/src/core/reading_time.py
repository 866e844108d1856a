"""
Temps de lecture estimé d'un document.

Seuls les blocs texte comptent (images, galeries, citations : 0 mot).
Total sur n'importe quelle entrée CMS : un bloc mal formé vaut 0 mot, jamais d'exception.
"""
import math
import re
from typing import Any, Iterable, List

from ..blocks import TextBlock

WORDS_PER_MINUTE = 225

_WS = re.compile(r"\s+")


def _is_text_block(block: Any) -> bool:
    if isinstance(block, TextBlock):
        return True
    if not isinstance(block, dict):
        return False
    return block.get("blockKind") == "TextBlock" or block.get("_type") == "block"


def _span_texts(block: Any) -> List[str]:
    """Textes des spans d'un bloc, marks ignorés."""
    if isinstance(block, TextBlock):
        return [s.text for s in block.children if s.text]

    children = block.get("children")
    if not isinstance(children, list):
        return []
    texts = []
    for child in children:
        if not isinstance(child, dict):
            continue
        if child.get("_type", "span") != "span":
            continue
        text = child.get("text")
        if isinstance(text, str) and text:
            texts.append(text)
    return texts


def extract_text(content: Any) -> str:
    """Texte brut du document : spans joints par un espace, blocs joints par un espace."""
    if not isinstance(content, Iterable) or isinstance(content, (str, bytes, dict)):
        return ""
    return " ".join(
        " ".join(_span_texts(block))
        for block in content
        if _is_text_block(block)
    )


def count_words(text: str) -> int:
    return len([w for w in _WS.split(text.strip()) if w])


def estimate_reading_time(content: Any, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """
    Minutes de lecture, minimum 1.

    >>> estimate_reading_time([{"blockKind": "TextBlock", "children": [{"text": "Hello world"}]}])
    1
    """
    if words_per_minute <= 0:
        raise ValueError(f"words_per_minute doit être > 0 (reçu {words_per_minute})")
    words = count_words(extract_text(content))
    return max(1, math.ceil(words / words_per_minute))


def format_reading_time(minutes: int) -> str:
    return f"{minutes} min read"
