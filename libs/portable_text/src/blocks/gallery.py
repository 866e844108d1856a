"""Bloc Galerie — 2 à 6 images en grille (2 ou 3 colonnes) ou en défilement horizontal."""
import logging
from typing import Any, List, Literal, Optional
from pydantic import Field, ValidationError, field_validator

from .base import BaseBlock, ImageSource

log = logging.getLogger(__name__)

GALLERY_MIN = 2
GALLERY_MAX = 6


class GalleryImage(ImageSource):
    pass


class ImageGallery(BaseBlock):
    """La borne 2..6 est une règle d'édition : le rendu accepte n'importe quelle longueur."""
    block_kind: Literal["ImageGallery"] = Field(default="ImageGallery", alias="blockKind")
    images: List[GalleryImage] = Field(default_factory=list)
    layout: Optional[str] = "grid2"      # grid2 | grid3 | scroll

    @field_validator("images", mode="before")
    @classmethod
    def _drop_invalid_images(cls, v: Any):
        # Une image invalide (sans alt…) est retirée, les autres restent
        if not isinstance(v, list):
            return v
        kept = []
        for i, item in enumerate(v):
            try:
                kept.append(GalleryImage.model_validate(item))
            except ValidationError as e:
                log.warning("Image %d de la galerie ignorée : %s", i, e.errors()[0]["msg"])
        return kept

    @property
    def within_bounds(self) -> bool:
        return GALLERY_MIN <= len(self.images) <= GALLERY_MAX
