"""
Troncature des extraits pour les cartes (listes d'articles, annuaire des courses).
Coupe au caractère, pas au mot : couper un mot en deux est accepté.
"""
from typing import Optional

ELLIPSIS = "..."

# Budgets observés selon la densité de la carte
EXCERPT_COMPACT  = 90
EXCERPT_GRID     = 100
EXCERPT_RELATED  = 120
EXCERPT_FEATURED = 140
EXCERPT_LEAD     = 150
EXCERPT_HERO     = 200


def truncate(text: Optional[str], limit: int) -> str:
    """Coupe `text` à `limit` caractères et ajoute "..." si coupé."""
    if not text:
        return ""
    if limit < 0:
        raise ValueError(f"limit doit être >= 0 (reçu {limit})")
    if len(text) <= limit:
        return text
    return f"{text[:limit]}{ELLIPSIS}"
