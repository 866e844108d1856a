"""
Inscription newsletter — un fournisseur choisi par NEWSLETTER_PROVIDER.

  resend | convertkit | mailchimp | buttondown | mailerlite | none (défaut, dev)

Chaque fournisseur lit ses clés d'API dans l'environnement au moment de l'appel.
Pas de retry : un échec remonte en SubscriptionError avec le message du fournisseur.
"""
import logging, os, re
from typing import Any, Callable, Dict, Optional

import requests

log = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_TIMEOUT = 10
_DEFAULT_ERROR = "Failed to subscribe"


class SubscriptionError(Exception):
    """Fournisseur non configuré ou inscription refusée."""


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and bool(_EMAIL_RE.match(email))


def _post(url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None,
          error_field: str = "message") -> Dict[str, Any]:
    try:
        resp = requests.post(url, json=payload, headers=headers or {}, timeout=_TIMEOUT)
    except requests.RequestException as e:
        log.error("Newsletter POST %s : %s", url, e)
        raise SubscriptionError(_DEFAULT_ERROR) from e

    try:
        body = resp.json()
    except ValueError:
        body = {}

    if not resp.ok:
        message = body.get(error_field) if isinstance(body, dict) else None
        raise SubscriptionError(message or _DEFAULT_ERROR)
    return body if isinstance(body, dict) else {}


# ── Fournisseurs ───────────────────────────────────────────────────────

def subscribe_resend(email: str) -> Dict[str, Any]:
    api_key, audience_id = os.getenv("RESEND_API_KEY"), os.getenv("RESEND_AUDIENCE_ID")
    if not api_key or not audience_id:
        raise SubscriptionError("Resend API key or audience ID not configured")
    return _post(
        f"https://api.resend.com/audiences/{audience_id}/contacts",
        {"email": email, "unsubscribed": False},
        {"Authorization": f"Bearer {api_key}"},
    )


def subscribe_convertkit(email: str) -> Dict[str, Any]:
    api_key, form_id = os.getenv("CONVERTKIT_API_KEY"), os.getenv("CONVERTKIT_FORM_ID")
    if not api_key or not form_id:
        raise SubscriptionError("ConvertKit API key or form ID not configured")
    return _post(
        f"https://api.convertkit.com/v3/forms/{form_id}/subscribe",
        {"api_key": api_key, "email": email},
    )


def subscribe_mailchimp(email: str) -> Dict[str, Any]:
    api_key = os.getenv("MAILCHIMP_API_KEY")
    audience_id = os.getenv("MAILCHIMP_AUDIENCE_ID")
    prefix = os.getenv("MAILCHIMP_SERVER_PREFIX")  # ex. us1
    if not api_key or not audience_id or not prefix:
        raise SubscriptionError("Mailchimp API key, audience ID, or server prefix not configured")
    return _post(
        f"https://{prefix}.api.mailchimp.com/3.0/lists/{audience_id}/members",
        {"email_address": email, "status": "subscribed"},
        {"Authorization": f"Bearer {api_key}"},
        error_field="title",
    )


def subscribe_buttondown(email: str) -> Dict[str, Any]:
    api_key = os.getenv("BUTTONDOWN_API_KEY")
    if not api_key:
        raise SubscriptionError("Buttondown API key not configured")
    return _post(
        "https://api.buttondown.email/v1/subscribers",
        {"email": email},
        {"Authorization": f"Token {api_key}"},
    )


def subscribe_mailerlite(email: str) -> Dict[str, Any]:
    api_key = os.getenv("MAILERLITE_API_KEY")
    if not api_key:
        raise SubscriptionError("MailerLite API key not configured")
    payload: Dict[str, Any] = {"email": email}
    group_id = os.getenv("MAILERLITE_GROUP_ID")
    if group_id:
        payload["groups"] = [group_id]
    return _post(
        "https://connect.mailerlite.com/api/subscribers",
        payload,
        {"Authorization": f"Bearer {api_key}", "Accept": "application/json"},
    )


def _log_only(email: str) -> Dict[str, Any]:
    log.info("Inscription newsletter (aucun fournisseur configuré) : %s", email)
    return {}


PROVIDERS: Dict[str, Callable[[str], Dict[str, Any]]] = {
    "resend":     subscribe_resend,
    "convertkit": subscribe_convertkit,
    "mailchimp":  subscribe_mailchimp,
    "buttondown": subscribe_buttondown,
    "mailerlite": subscribe_mailerlite,
    "none":       _log_only,
}


def subscribe(email: str) -> Dict[str, Any]:
    """Inscrit l'adresse auprès du fournisseur configuré. Lève SubscriptionError."""
    provider = os.getenv("NEWSLETTER_PROVIDER", "none") or "none"
    fn = PROVIDERS.get(provider)
    if fn is None:
        raise SubscriptionError("Newsletter provider not configured")
    return fn(email)
