"""
Data models — documents CMS (Post, Category, Race, Author, Page)
SQLAlchemy (SQLite, table documents JSON) + Pydantic v2 + Enums
"""
import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ── ENUMS ──────────────────────────────────────────────────────────────

class DocType(str, Enum):
    POST     = "post"
    CATEGORY = "category"
    RACE     = "race"
    AUTHOR   = "person"
    PAGE     = "page"


class Terrain(str, Enum):
    GRAVEL    = "gravel"
    MIXED     = "mixed"
    TECHNICAL = "technical"
    FAST      = "fast"
    MOUNTAIN  = "mountain"


class EditionStatus(str, Enum):
    UPCOMING          = "upcoming"
    REGISTRATION_OPEN = "registration-open"
    SOLD_OUT          = "sold-out"
    COMPLETED         = "completed"


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


class DocumentDB(Base):
    """Un document CMS, stocké tel quel (JSON) + colonnes d'index."""
    __tablename__ = "documents"
    id:         Mapped[str]           = mapped_column(sa.String, primary_key=True)
    doc_type:   Mapped[str]           = mapped_column(sa.String, nullable=False, index=True)
    slug:       Mapped[Optional[str]] = mapped_column(sa.String, nullable=True, index=True)
    data:       Mapped[str]           = mapped_column(sa.Text, nullable=False)
    updated_at: Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (sa.UniqueConstraint("doc_type", "slug", name="uq_documents_type_slug"),)


# ── PYDANTIC ───────────────────────────────────────────────────────────

_HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


class CMSDocument(BaseModel):
    """Base des documents : alias camelCase/_id du CMS acceptés, champs inconnus ignorés."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")

    @field_validator("slug", mode="before", check_fields=False)
    @classmethod
    def _slug_current(cls, v: Union[str, Dict[str, Any], None]) -> Optional[str]:
        # {"current": "unbound-gravel"} → "unbound-gravel"
        if isinstance(v, dict):
            return v.get("current")
        return v


class CoverImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    asset: Optional[Dict[str, Any]] = None
    crop: Optional[Dict[str, float]] = None
    alt: Optional[str] = None
    attribution: Optional[str] = None
    attribution_url: Optional[str] = Field(default=None, alias="attributionUrl")


class Category(CMSDocument):
    title: str = Field(..., min_length=1, max_length=50)
    slug: str
    description: Optional[str] = None
    color: Optional[str] = None
    order: int = 0

    @field_validator("color")
    @classmethod
    def _hex_color(cls, v):
        if v and not _HEX_COLOR.match(v):
            raise ValueError("Please enter a valid hex color (e.g., #c5a572)")
        return v or None


class Author(CMSDocument):
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    picture: Optional[CoverImage] = None

    @property
    def full_name(self) -> Optional[str]:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return None


class Page(CMSDocument):
    name: str
    slug: str
    heading: Optional[str] = None


class Post(CMSDocument):
    title: str
    slug: str
    excerpt: Optional[str] = None
    date: Optional[datetime] = None
    cover_image: Optional[CoverImage] = Field(default=None, alias="coverImage")
    # Déréférencés par les requêtes ; une catégorie legacy peut être une simple chaîne
    author: Optional[Author] = None
    category: Optional[Union[Category, str]] = None
    tags: List[str] = Field(default_factory=list)
    content: List[Any] = Field(default_factory=list)


class Location(BaseModel):
    city: Optional[str] = None
    region: Optional[str] = None
    country: str


class Edition(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    year: int = Field(..., ge=2000, le=2100)
    start_date: date = Field(alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    status: EditionStatus = EditionStatus.UPCOMING
    registration_deadline: Optional[date] = Field(default=None, alias="registrationDeadline")
    notes: Optional[str] = None


class Race(CMSDocument):
    name: str
    slug: str
    description: Optional[str] = None
    cover_image: Optional[CoverImage] = Field(default=None, alias="coverImage")
    location: Location
    website: Optional[str] = None
    registration_url: Optional[str] = Field(default=None, alias="registrationUrl")
    distances: List[str] = Field(default_factory=list)
    terrain: Optional[Terrain] = None
    elevation_gain: Optional[str] = Field(default=None, alias="elevationGain")
    entry_fee: Optional[str] = Field(default=None, alias="entryFee")
    editions: List[Edition] = Field(default_factory=list)


# Schéma de validation par type de document
DOC_SCHEMAS: Dict[str, type] = {
    DocType.POST.value:     Post,
    DocType.CATEGORY.value: Category,
    DocType.RACE.value:     Race,
    DocType.AUTHOR.value:   Author,
    DocType.PAGE.value:     Page,
}
