"""Annuaire des courses — liste + fiche."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ...database import get_db, query_race, query_races
from ...pages import race_page, races_page
from ...presentation import RaceCard, race_card

router = APIRouter(tags=["Races"])


@router.get("/races", response_class=HTMLResponse)
def races(db: Session = Depends(get_db)):
    return HTMLResponse(races_page(query_races(db)))


@router.get("/races/{slug}", response_class=HTMLResponse)
def race_detail(slug: str, db: Session = Depends(get_db)):
    race = query_race(db, slug)
    if race is None:
        raise HTTPException(404, f"Course introuvable : {slug}")
    return HTMLResponse(race_page(race))


@router.get("/api/races", response_model=List[RaceCard])
def list_races(db: Session = Depends(get_db)):
    return [race_card(r) for r in query_races(db)]
