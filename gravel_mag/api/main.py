"""
GRAVEL MAG — FastAPI app
Démarrer : uvicorn gravel_mag.api.main:app --reload --port 8001
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="GRAVEL MAG — Magazine", version="0.1.0", docs_url="/docs")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.on_event("startup")
def startup():
    from ..database import init_db
    init_db()
    log.info("DB initialisée (SQLite)")


@app.get("/health")
def health():
    return {"status": "ok", "service": "gravel_mag", "version": "0.1.0"}


from .routes import posts, races, newsletter, admin

app.include_router(posts.router)
app.include_router(races.router)
app.include_router(newsletter.router)
app.include_router(admin.router)
