"""
Helpers de présentation — lieux, dates, statuts, catégories, signature,
+ modèles de vue des cartes (articles, courses).
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from portable_text import estimate_reading_time, format_reading_time, truncate
from portable_text.core import EXCERPT_GRID

from .images import url_for_image
from .models import Author, Category, Edition, Location, Post, Race

CARD_IMAGE = (500, 333)
AVATAR_SMALL, AVATAR_REGULAR = 64, 96

# Catégories legacy stockées en chaîne
_LEGACY_CATEGORIES = {
    "race": "Race", "tech": "Tech", "training": "Training", "gear": "Gear",
    "adventure": "Adventure", "nutrition": "Nutrition", "community": "Community", "news": "News",
}


def format_location(location: Optional[Location]) -> str:
    if location is None:
        return "Location TBD"
    return ", ".join(p for p in (location.city, location.region, location.country) if p)


def next_edition(editions: List[Edition], today: Optional[date] = None) -> Optional[Edition]:
    """Prochaine édition à venir ; à défaut la première listée."""
    if not editions:
        return None
    today = today or date.today()
    upcoming = sorted((e for e in editions if e.start_date > today), key=lambda e: e.start_date)
    return upcoming[0] if upcoming else editions[0]


def format_date(d: Union[date, datetime, None], long: bool = False) -> str:
    if d is None:
        return ""
    month = d.strftime("%B" if long else "%b")
    return f"{month} {d.day}, {d.year}"


def format_date_range(edition: Edition) -> str:
    label = format_date(edition.start_date)
    if edition.end_date and edition.end_date != edition.start_date:
        label += f" - {format_date(edition.end_date)}"
    return label


def format_status(status: Any) -> str:
    value = getattr(status, "value", status) or ""
    return value.replace("-", " ", 1)


def category_label(category: Union[Category, str, None]) -> Optional[Dict[str, Optional[str]]]:
    """{"name", "color"} pour l'étiquette de catégorie, None si aucune."""
    if not category:
        return None
    if isinstance(category, str):
        return {"name": _LEGACY_CATEGORIES.get(category, category), "color": None}
    return {"name": category.title, "color": category.color}


def byline(author: Optional[Author], small: bool = False) -> Optional[Dict[str, Optional[str]]]:
    if author is None:
        return None
    size = AVATAR_SMALL if small else AVATAR_REGULAR
    picture = author.picture
    avatar = url_for_image(picture, size, size, "crop") if picture else None
    return {
        "name": author.full_name,
        "avatar_url": avatar,
        "avatar_alt": (picture.alt if picture else None) or "",
        "photo_credit": picture.attribution if picture else None,
        "photo_credit_url": picture.attribution_url if picture else None,
    }


# ── Cartes ─────────────────────────────────────────────────────────────

class PostCard(BaseModel):
    id: str
    title: str
    slug: str
    url: str
    excerpt: str = ""
    date: Optional[str] = None
    image_url: Optional[str] = None
    image_alt: Optional[str] = None
    category: Optional[Dict[str, Optional[str]]] = None
    tag: Optional[str] = None
    author: Optional[str] = None
    reading_time: str


class RaceCard(BaseModel):
    id: str
    name: str
    slug: str
    url: str
    location: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    image_alt: Optional[str] = None
    dates: Optional[str] = None
    distances: str = ""
    status: Optional[str] = None


def post_card(post: Post, excerpt_limit: int = EXCERPT_GRID) -> PostCard:
    cover = post.cover_image
    return PostCard(
        id=post.id,
        title=post.title,
        slug=post.slug,
        url=f"/posts/{post.slug}",
        excerpt=truncate(post.excerpt, excerpt_limit),
        date=format_date(post.date) or None,
        image_url=url_for_image(cover, *CARD_IMAGE, "crop") if cover else None,
        image_alt=(cover.alt if cover else None) or post.title,
        category=category_label(post.category),
        tag=post.tags[0] if post.tags else None,
        author=post.author.full_name if post.author else None,
        reading_time=format_reading_time(estimate_reading_time(post.content)),
    )


def race_card(race: Race, today: Optional[date] = None) -> RaceCard:
    cover = race.cover_image
    edition = next_edition(race.editions, today)
    return RaceCard(
        id=race.id,
        name=race.name,
        slug=race.slug,
        url=f"/races/{race.slug}",
        location=format_location(race.location),
        description=race.description,
        image_url=url_for_image(cover, *CARD_IMAGE, "crop") if cover else None,
        image_alt=(cover.alt if cover else None) or race.name,
        dates=format_date_range(edition) if edition else None,
        distances=", ".join(race.distances),
        status=format_status(edition.status) if edition else None,
    )
