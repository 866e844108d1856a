"""Résolution des liens internes : référence CMS {"_ref": id} → slug via la base."""
import logging
from typing import Callable, Optional

from portable_text import LinkMark, resolve_link
from sqlalchemy.orm import Session

from .database import query_slug_for_ref

log = logging.getLogger(__name__)


def make_link_resolver(db: Session) -> Callable[[Optional[LinkMark]], Optional[str]]:
    """Résolveur de liens pour le renderer, lié à une session."""

    def _resolve(link: Optional[LinkMark]) -> Optional[str]:
        if link is None:
            return None
        update = {}
        for field in ("page", "post"):
            target = getattr(link, field)
            if isinstance(target, dict) and target.get("_ref"):
                slug = query_slug_for_ref(db, target["_ref"])
                if slug is None:
                    log.debug("Lien %s pendant : %s", field, target["_ref"])
                update[field] = slug
        return resolve_link(link.model_copy(update=update) if update else link)

    return _resolve
