"""SQLite — init + session + CRUD documents CMS + requêtes typées"""
import json, logging, os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from .models import Base, DocumentDB, DocType, DOC_SCHEMAS, Category, Page, Post, Race

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"

DB_PATH      = os.getenv("DB_PATH", str(DATA_DIR / "gravel_mag.db"))
ENGINE       = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=ENGINE)


# Catégories de départ (importées si absentes)
_CATEGORY_DEFAULTS = [
    {"title": "Race",      "slug": "race",      "color": "#e74c3c", "order": 1,
     "description": "Racing coverage, results, and race reports"},
    {"title": "Tech",      "slug": "tech",      "color": "#3498db", "order": 2,
     "description": "Bike technology, gear reviews, and technical guides"},
    {"title": "Training",  "slug": "training",  "color": "#2ecc71", "order": 3,
     "description": "Training tips, workouts, and performance advice"},
    {"title": "Gear",      "slug": "gear",      "color": "#f39c12", "order": 4,
     "description": "Product reviews and gear recommendations"},
    {"title": "Adventure", "slug": "adventure", "color": "#9b59b6", "order": 5,
     "description": "Epic rides, bikepacking, and travel stories"},
    {"title": "Nutrition", "slug": "nutrition", "color": "#1abc9c", "order": 6,
     "description": "Fueling strategies and nutrition advice"},
    {"title": "Community", "slug": "community", "color": "#e67e22", "order": 7,
     "description": "Community features and rider spotlights"},
    {"title": "News",      "slug": "news",      "color": "#34495e", "order": 8,
     "description": "Latest news and updates from the gravel world"},
]


def init_db(engine=None):
    engine = engine or ENGINE
    if engine is ENGINE:
        Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)
    with Session(engine) as db:
        seed_categories(db)


def seed_categories(db: Session) -> int:
    """Insère les catégories par défaut absentes. Retourne le nombre créé."""
    created = 0
    for c in _CATEGORY_DEFAULTS:
        if db_get_by_slug(db, DocType.CATEGORY.value, c["slug"]):
            continue
        db_upsert_document(db, {"_id": f"category-{c['slug']}", "_type": "category", **c}, commit=False)
        created += 1
    db.commit()
    if created:
        log.info("%d catégorie(s) par défaut créée(s)", created)
    return created


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── Helpers ────────────────────────────────────────────────────────────

def jl(s: Optional[str]) -> Any:
    return json.loads(s) if s else {}


def _is_ref(value: Any) -> bool:
    return isinstance(value, dict) and "_ref" in value


def _slug_of(doc: Dict[str, Any]) -> Optional[str]:
    slug = doc.get("slug")
    if isinstance(slug, dict):
        slug = slug.get("current")
    return slug or None


def validate_document(doc: Dict[str, Any]) -> None:
    """
    Valide un document contre le schéma de son _type.
    Les références ({"_ref": id}) sont vérifiées à la lecture, pas ici.
    Lève ValueError (type inconnu) ou ValidationError (champs).
    """
    doc_type = doc.get("_type")
    schema = DOC_SCHEMAS.get(doc_type)
    if schema is None:
        raise ValueError(f"Type de document inconnu : {doc_type!r}. Types : {list(DOC_SCHEMAS)}")
    schema.model_validate({k: v for k, v in doc.items() if not _is_ref(v)})


# ── Documents CRUD ─────────────────────────────────────────────────────

def db_upsert_document(db: Session, doc: Dict[str, Any], commit: bool = True) -> DocumentDB:
    validate_document(doc)
    row = db.get(DocumentDB, doc["_id"])
    if row is None:
        row = DocumentDB(id=doc["_id"], doc_type=doc["_type"])
        db.add(row)
    row.doc_type = doc["_type"]
    row.slug = _slug_of(doc)
    row.data = json.dumps(doc, ensure_ascii=False, default=str)
    if commit:
        db.commit()
        db.refresh(row)
    return row


def db_get_document(db: Session, doc_id: str) -> Optional[Dict[str, Any]]:
    row = db.get(DocumentDB, doc_id)
    return jl(row.data) if row else None


def db_get_by_slug(db: Session, doc_type: str, slug: str) -> Optional[Dict[str, Any]]:
    row = db.scalars(
        select(DocumentDB).where(DocumentDB.doc_type == doc_type, DocumentDB.slug == slug)
    ).first()
    return jl(row.data) if row else None


def db_list_documents(db: Session, doc_type: str) -> List[Dict[str, Any]]:
    rows = db.scalars(select(DocumentDB).where(DocumentDB.doc_type == doc_type)).all()
    return [jl(r.data) for r in rows]


def db_delete_document(db: Session, doc_id: str) -> bool:
    row = db.get(DocumentDB, doc_id)
    if row is None:
        return False
    db.delete(row)
    db.commit()
    return True


# ── Requêtes typées ────────────────────────────────────────────────────

def _deref(db: Session, value: Any) -> Any:
    """{"_ref": id} → document référencé (None si pendant)."""
    if _is_ref(value):
        return db_get_document(db, value["_ref"])
    return value


def _to_model(schema, data: Optional[Dict[str, Any]]):
    if data is None:
        return None
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        log.warning("%s %s ignoré — %s", schema.__name__, data.get("_id"), e.errors()[0]["msg"])
        return None


def _post_from(db: Session, data: Dict[str, Any]) -> Optional[Post]:
    data = dict(data)
    for field in ("author", "category"):
        data[field] = _deref(db, data.get(field))
    return _to_model(Post, data)


def query_post(db: Session, slug: str) -> Optional[Post]:
    data = db_get_by_slug(db, DocType.POST.value, slug)
    return _post_from(db, data) if data else None


def query_posts(db: Session, limit: Optional[int] = None, skip: int = 0) -> List[Post]:
    """Articles du plus récent au plus ancien (sans date en dernier)."""
    posts = [p for p in (_post_from(db, d) for d in db_list_documents(db, DocType.POST.value)) if p]
    posts.sort(key=lambda p: (p.date is not None, p.date.timestamp() if p.date else 0), reverse=True)
    end = skip + limit if limit is not None else None
    return posts[skip:end]


def query_categories(db: Session) -> List[Category]:
    cats = [c for c in (_to_model(Category, d) for d in db_list_documents(db, DocType.CATEGORY.value)) if c]
    return sorted(cats, key=lambda c: (c.order, c.title))


def query_races(db: Session) -> List[Race]:
    races = [r for r in (_to_model(Race, d) for d in db_list_documents(db, DocType.RACE.value)) if r]
    return sorted(races, key=lambda r: r.name.lower())


def query_race(db: Session, slug: str) -> Optional[Race]:
    return _to_model(Race, db_get_by_slug(db, DocType.RACE.value, slug))


def query_page(db: Session, slug: str) -> Optional[Page]:
    return _to_model(Page, db_get_by_slug(db, DocType.PAGE.value, slug))


def query_slug_for_ref(db: Session, ref_id: str) -> Optional[str]:
    """Slug du document référencé, None si la référence est pendante."""
    row = db.get(DocumentDB, ref_id)
    return row.slug if row else None
