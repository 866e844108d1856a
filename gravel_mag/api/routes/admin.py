"""
Admin — import des documents CMS (protégé par ADMIN_TOKEN header ou ?token=)
POST   /api/admin/documents        upsert validé d'un document
DELETE /api/admin/documents/{id}
"""
import logging, os
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...database import get_db, db_delete_document, db_upsert_document

log = logging.getLogger(__name__)

router = APIRouter(tags=["Admin"])


def _check_token(request: Request):
    token = request.headers.get("X-Admin-Token") or request.query_params.get("token")
    if token != os.getenv("ADMIN_TOKEN", "changeme"):
        raise HTTPException(403, "Token admin invalide")


@router.post("/api/admin/documents")
def upsert_document(request: Request, doc: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    _check_token(request)
    if not doc.get("_id"):
        raise HTTPException(422, "Champ _id requis")
    try:
        row = db_upsert_document(db, doc)
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))
    except ValueError as e:
        raise HTTPException(422, str(e))
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, f"Slug déjà utilisé pour le type {doc.get('_type')}")
    log.info("Document %s (%s) enregistré", row.id, row.doc_type)
    return {"ok": True, "id": row.id, "type": row.doc_type, "slug": row.slug}


@router.delete("/api/admin/documents/{doc_id}")
def delete_document(doc_id: str, request: Request, db: Session = Depends(get_db)):
    _check_token(request)
    if not db_delete_document(db, doc_id):
        raise HTTPException(404, f"Document introuvable : {doc_id}")
    return {"ok": True}
