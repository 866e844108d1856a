"""Articles — accueil, page article, API JSON des cartes et du temps de lecture."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from portable_text import estimate_reading_time, format_reading_time

from ...database import get_db, query_post, query_posts
from ...links import make_link_resolver
from ...pages import article_page, home_page
from ...presentation import PostCard, post_card

router = APIRouter(tags=["Posts"])

HOME_POSTS = 13


def _post_or_404(db: Session, slug: str):
    post = query_post(db, slug)
    if post is None:
        raise HTTPException(404, f"Article introuvable : {slug}")
    return post


@router.get("/", response_class=HTMLResponse)
def home(db: Session = Depends(get_db)):
    return HTMLResponse(home_page(query_posts(db, limit=HOME_POSTS)))


@router.get("/posts/{slug}", response_class=HTMLResponse)
def post_detail(slug: str, db: Session = Depends(get_db)):
    post = _post_or_404(db, slug)
    return HTMLResponse(article_page(post, resolve_link=make_link_resolver(db)))


@router.get("/api/posts", response_model=List[PostCard])
def list_posts(limit: int = Query(20, ge=1, le=100), skip: int = Query(0, ge=0),
               db: Session = Depends(get_db)):
    return [post_card(p) for p in query_posts(db, limit=limit, skip=skip)]


@router.get("/api/posts/{slug}/reading-time")
def post_reading_time(slug: str, db: Session = Depends(get_db)):
    minutes = estimate_reading_time(_post_or_404(db, slug).content)
    return {"minutes": minutes, "label": format_reading_time(minutes)}
