"""
Blocs de base pour portable_text.
BaseBlock discriminé par block_kind + sources d'image partagées (image inline, galerie).
"""
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CMSModel(BaseModel):
    """Modèle lu depuis le CMS : accepte les alias (_key, markDefs…) et le nom Python."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AssetRef(CMSModel):
    """Référence d'asset CMS, ex. image-Tb9Ew8CXIwaY6R1kjMvI0uRR-2000x3000-jpg."""
    ref: str = Field(alias="_ref")


class Crop(CMSModel):
    """Recadrage fractionnaire (0..1) appliqué par l'éditeur."""
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0


class ImageSource(CMSModel):
    """Champs communs à toute image : asset, recadrage, texte alternatif, légende."""
    asset: Optional[AssetRef] = None
    crop: Optional[Crop] = None
    alt: str
    caption: Optional[str] = None

    @field_validator("asset", mode="before")
    @classmethod
    def _ref_string(cls, v: Union[str, Dict[str, Any], None]):
        # Ref brute "image-…" → {"_ref": …}
        if isinstance(v, str):
            return {"_ref": v} if v else None
        return v


class BaseBlock(CMSModel):
    """Bloc de base (classe parente de tous les blocs)."""
    block_kind: str = Field(alias="blockKind")
    key: Optional[str] = Field(default=None, alias="_key")
