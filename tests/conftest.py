"""Fixtures partagées — SQLite en mémoire (StaticPool) + TestClient branché dessus."""
import sys, os, tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Avant tout import de gravel_mag.database (ENGINE créé à l'import)
os.environ.setdefault("DB_PATH", os.path.join(tempfile.mkdtemp(), "test.db"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gravel_mag.database import get_db, init_db


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    from gravel_mag.api.main import app
    TestingSession = sessionmaker(bind=engine, autoflush=False)

    def _override():
        s = TestingSession()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── Documents d'exemple ───────────────────────────────────────────────────────

AUTHOR = {"_id": "person-ada", "_type": "person", "firstName": "Ada", "lastName": "Rider",
          "picture": {"asset": {"_ref": "image-face1-400x400-jpg"}, "alt": "Ada",
                      "attribution": "Jo Lens", "attributionUrl": "https://lens.example"}}


def make_post(slug="unbound-recap", date="2025-06-01T12:00:00Z", words=450, **extra):
    doc = {
        "_id": f"post-{slug}", "_type": "post", "title": slug.replace("-", " ").title(),
        "slug": {"current": slug}, "date": date,
        "excerpt": "Two hundred miles of Flint Hills chunk, heat and headwind in Emporia, Kansas. " * 3,
        "author": {"_ref": "person-ada"}, "category": {"_ref": "category-race"},
        "coverImage": {"asset": {"_ref": "image-cover1-2000x1000-jpg"}, "alt": "Riders at dawn"},
        "content": [{"_type": "block", "_key": "p1", "style": "normal",
                     "children": [{"_type": "span", "text": " ".join(["word"] * words)}]}],
    }
    doc.update(extra)
    return doc


RACE = {
    "_id": "race-unbound", "_type": "race", "name": "Unbound Gravel", "slug": {"current": "unbound-gravel"},
    "description": "The world's premier gravel event.",
    "location": {"city": "Emporia", "region": "Kansas", "country": "USA"},
    "distances": ["200 mi", "100 mi"], "terrain": "gravel",
    "editions": [{"year": 2025, "startDate": "2025-05-31", "status": "completed"},
                 {"year": 2026, "startDate": "2026-05-30", "endDate": "2026-05-31",
                  "status": "registration-open"}],
}
