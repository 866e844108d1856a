"""
URLs CDN des images — ref d'asset `image-<id>-<W>x<H>-<fmt>` → URL
https://cdn.sanity.io/images/<projet>/<dataset>/<id>-<W>x<H>.<fmt>?…&auto=format
Le recadrage (crop fractionnaire) devient un paramètre rect=gauche,haut,l,h.
"""
import logging, os, re
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

log = logging.getLogger(__name__)

CDN_BASE = "https://cdn.sanity.io/images"
OG_WIDTH, OG_HEIGHT = 1200, 627

_REF_RE = re.compile(r"^image-(?P<id>[A-Za-z0-9]+)-(?P<w>\d+)x(?P<h>\d+)-(?P<fmt>[a-z0-9]+)$")


def _get(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _asset_ref(image: Any) -> Optional[str]:
    asset = _get(image, "asset")
    if isinstance(asset, str):
        return asset
    return _get(asset, "_ref") or _get(asset, "ref")


def parse_ref(ref: Optional[str]) -> Optional[Tuple[str, int, int, str]]:
    """(id, largeur, hauteur, format) ou None si la ref est mal formée."""
    m = _REF_RE.match(ref or "")
    if not m:
        return None
    return m["id"], int(m["w"]), int(m["h"]), m["fmt"]


def _crop_rect(crop: Any, width: int, height: int) -> Optional[Tuple[int, int, int, int]]:
    if not crop:
        return None
    c: Dict[str, float] = {k: float(_get(crop, k) or 0) for k in ("top", "bottom", "left", "right")}
    return (
        int(width * c["left"]),
        int(height * c["top"]),
        int(width * (1 - (c["right"] + c["left"]))),
        int(height * (1 - (c["top"] + c["bottom"]))),
    )


def url_for_image(image: Any, width: Optional[int] = None, height: Optional[int] = None,
                  fit: Optional[str] = None) -> Optional[str]:
    ref = _asset_ref(image)
    parsed = parse_ref(ref)
    if parsed is None:
        if ref:
            log.debug("Ref d'image invalide : %s", ref)
        return None
    asset_id, w, h, fmt = parsed

    params = []
    rect = _crop_rect(_get(image, "crop"), w, h)
    if rect:
        params.append(("rect", ",".join(str(v) for v in rect)))
    if width:
        params.append(("w", width))
    if height:
        params.append(("h", height))
    if fit:
        params.append(("fit", fit))
    params.append(("auto", "format"))

    project = os.getenv("SANITY_PROJECT_ID", "")
    dataset = os.getenv("SANITY_DATASET", "production")
    query = urlencode(params, safe=",")
    return f"{CDN_BASE}/{project}/{dataset}/{asset_id}-{w}x{h}.{fmt}?{query}"


def open_graph_image(image: Any) -> Optional[Dict[str, Any]]:
    """Image de partage (1200x627, recadrée) pour les métadonnées de page."""
    url = url_for_image(image, OG_WIDTH, OG_HEIGHT, "crop")
    if not url:
        return None
    return {"url": url, "alt": _get(image, "alt"), "width": OG_WIDTH, "height": OG_HEIGHT}
