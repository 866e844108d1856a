"""POST /api/newsletter {email} — inscription auprès du fournisseur configuré."""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...newsletter import SubscriptionError, is_valid_email, subscribe

log = logging.getLogger(__name__)

router = APIRouter(tags=["Newsletter"])

_INVALID = {"error": "Please provide a valid email address"}


@router.post("/api/newsletter")
async def newsletter_signup(request: Request):
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(_INVALID, status_code=400)

    email = body.get("email") if isinstance(body, dict) else None
    if not is_valid_email(email):
        return JSONResponse(_INVALID, status_code=400)

    try:
        subscribe(email)
    except SubscriptionError as e:
        log.error("Erreur inscription newsletter : %s", e)
        return JSONResponse({"error": str(e)}, status_code=500)

    return {"message": "Successfully subscribed! Check your email to confirm."}
