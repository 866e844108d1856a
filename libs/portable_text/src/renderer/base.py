"""
Protocols collaborateurs — injectés dans le renderer (URL d'image, résolution de lien).
"""
from typing import Optional, Protocol, runtime_checkable

from ..blocks import ImageSource, LinkMark


@runtime_checkable
class ImageUrlResolver(Protocol):
    def __call__(self, image: ImageSource, width: Optional[int] = None,
                 height: Optional[int] = None, fit: Optional[str] = None) -> Optional[str]: ...


@runtime_checkable
class LinkResolver(Protocol):
    def __call__(self, link: LinkMark) -> Optional[str]: ...


def resolve_link(link: Optional[LinkMark]) -> Optional[str]:
    """
    Résolveur par défaut : branche sur link_type, jamais sur les champs présents.
    Référence non déréférencée (dict) ou cible absente → None (texte rendu sans lien).
    """
    if link is None:
        return None

    # Lien collé dans l'éditeur : pas de link_type mais un href
    link_type = link.link_type or ("href" if link.href else None)

    if link_type == "href":
        return link.href or None
    if link_type == "page":
        return f"/{link.page}" if isinstance(link.page, str) and link.page else None
    if link_type == "post":
        return f"/posts/{link.post}" if isinstance(link.post, str) and link.post else None
    return None
