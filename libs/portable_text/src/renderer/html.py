"""
Renderer HTML — corps d'article (structured content) → fragments HTML.

Dispatch à deux niveaux :
  1. block_kind  → renderer du bloc (texte, image inline, galerie, pull quote)
  2. style       → dans un bloc texte : paragraphe, h1–h3, blockquote ; listItem → <ul>/<ol>

Tolérant aux pannes partielles : un bloc inconnu, invalide ou dont le rendu
échoue est sauté, les autres sont rendus.
"""
import logging
from html import escape
from itertools import groupby
from typing import Any, Callable, Dict, List, Optional

from ..blocks import TextBlock, Span, InlineImage, ImageGallery, PullQuote
from ..parser import parse_block
from .base import ImageUrlResolver, LinkResolver, resolve_link as default_resolve_link

log = logging.getLogger(__name__)

# Largeur de rendu par taille d'image inline (4 paliers fixes)
INLINE_IMAGE_WIDTHS: Dict[str, int] = {
    "fullBleed": 1200,
    "large":     800,
    "medium":    600,
    "small":     400,
}

# (largeur, hauteur) recadrées par layout de galerie
GALLERY_GRID_CROP   = (400, 300)
GALLERY_SCROLL_CROP = (320, 240)

_GALLERY_LAYOUTS = ("grid2", "grid3", "scroll")
_ALIGNMENTS      = ("left", "center", "right")

_ANCHOR_ICON = (
    '<svg class="pt-heading__icon" fill="none" viewBox="0 0 24 24" stroke="currentColor" aria-hidden="true">'
    '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" '
    'd="M13.828 10.172a4 4 0 00-5.656 0l-4 4a4 4 0 105.656 5.656l1.102-1.101m-.758-4.899'
    'a4 4 0 005.656 0l4-4a4 4 0 00-5.656-5.656l-1.1 1.1"/></svg>'
)


# ── Point d'entrée public ───────────────────────────────────────────────────

def render_blocks(
    content: Any,
    resolve_image_url: Optional[ImageUrlResolver] = None,
    resolve_link: LinkResolver = default_resolve_link,
) -> List[str]:
    """
    Un fragment HTML par bloc rendu, dans l'ordre du document.
    Les éléments de liste consécutifs forment un seul fragment <ul>/<ol>.
    """
    if not isinstance(content, list):
        return []

    fragments: List[str] = []
    list_items: List[TextBlock] = []

    def flush_list():
        if list_items:
            html = _guarded("liste", list_items[0].key, render_list, list(list_items), resolve_link)
            if html:
                fragments.append(html)
            list_items.clear()

    for index, raw in enumerate(content):
        try:
            block = parse_block(raw)
        except Exception as e:
            log.warning("Bloc %d ignoré — lecture échouée : %s", index, e)
            continue
        if block is None:
            continue
        if isinstance(block, TextBlock) and block.list_item:
            list_items.append(block)
            continue
        flush_list()

        renderer = _BLOCK_RENDERERS.get(block.block_kind)
        if renderer is None:
            log.warning("Bloc ignoré — pas de renderer pour %r", block.block_kind)
            continue
        html = _guarded(block.block_kind, block.key, renderer, block, index, resolve_image_url, resolve_link)
        if html:
            fragments.append(html)
    flush_list()
    return fragments


def _guarded(kind: str, key: Optional[str], fn: Callable[..., str], *args) -> str:
    try:
        return fn(*args)
    except Exception as e:
        log.warning("Rendu du bloc %s (key=%s) échoué : %s", kind, key, e)
        return ""


def render_content(
    content: Any,
    resolve_image_url: Optional[ImageUrlResolver] = None,
    resolve_link: LinkResolver = default_resolve_link,
    css_class: Optional[str] = None,
) -> str:
    """Corps complet, enveloppé dans le conteneur .magazine-content."""
    classes = ["magazine-content"]
    if css_class:
        classes.append(css_class)
    inner = "\n".join(render_blocks(content, resolve_image_url, resolve_link))
    return f'<div class="{" ".join(classes)}">\n{inner}\n</div>'


# ── Spans & marks ────────────────────────────────────────────────────────────

def _render_span(block: TextBlock, span: Span) -> str:
    html = escape(span.text)
    for tag in block.decorators_for(span):
        html = f"<{tag}>{html}</{tag}>"
    return html


def render_spans(block: TextBlock, resolve_link: LinkResolver = default_resolve_link) -> str:
    """
    Rend les enfants d'un bloc texte. Les spans consécutifs portant le même lien
    partagent une seule ancre ; un lien non résolu laisse le texte sans ancre.
    """
    parts = []
    defs = block.link_index()
    for link, spans in groupby(block.children, key=lambda s: block.link_for(s, defs)):
        inner = "".join(_render_span(block, s) for s in spans)
        if link is None:
            parts.append(inner)
            continue
        href = resolve_link(link)
        if not href:
            log.debug("Lien non résolu (type=%s, key=%s) — texte sans ancre", link.link_type, link.key)
            parts.append(inner)
            continue
        target = ' target="_blank" rel="noopener noreferrer"' if link.open_in_new_tab else ""
        parts.append(f'<a href="{escape(href)}" class="pt-link"{target}>{inner}</a>')
    return "".join(parts)


# ── Renderers blocs ──────────────────────────────────────────────────────────

def render_text_block(b: TextBlock, index: int, resolve_image_url=None,
                      resolve_link: LinkResolver = default_resolve_link) -> str:
    children = render_spans(b, resolve_link)
    style = b.style

    if style in ("h1", "h2", "h3"):
        id_attr = f' id="{escape(b.key)}"' if b.key else ""
        anchor = ""
        # Permalien sur h1/h2 uniquement
        if style in ("h1", "h2") and b.key:
            anchor = (f'<a href="#{escape(b.key)}" class="pt-heading__anchor" '
                      f'aria-label="Link to this section">{_ANCHOR_ICON}</a>')
        return f'<{style}{id_attr} class="pt-heading pt-heading--{style}">{children}{anchor}</{style}>'

    if style == "blockquote":
        return (f'<blockquote class="pt-blockquote">'
                f'<div class="pt-blockquote__text">{children}</div></blockquote>')

    # normal (ou style inconnu) : lettrine uniquement pour le premier bloc du document
    classes = ["pt-paragraph"]
    if index == 0 and style == "normal":
        classes.append("pt-paragraph--drop-cap")
    return f'<p class="{" ".join(classes)}">{children}</p>'


def render_list(items: List[TextBlock], resolve_link: LinkResolver = default_resolve_link) -> str:
    """
    Éléments de liste consécutifs → <ul>/<ol> imbriqués selon level.
    listItem "number" donne <ol>, toute autre valeur <ul>.
    """
    html = ""
    open_lists: List[str] = []
    for b in items:
        tag = "ol" if b.list_item == "number" else "ul"
        level = max(1, b.level or 1)
        while len(open_lists) > level:
            html += f"</li></{open_lists.pop()}>"
        if len(open_lists) == level:
            if open_lists[-1] == tag:
                html += "</li>"
            else:
                html += f"</li></{open_lists.pop()}>"
        while len(open_lists) < level:
            html += f'<{tag} class="pt-list pt-list--{tag}">'
            open_lists.append(tag)
            # Niveau intermédiaire sauté : <li> porteur pour garder un HTML valide
            if len(open_lists) < level:
                html += '<li class="pt-list__item">'
        html += f'<li class="pt-list__item">{render_spans(b, resolve_link)}'
    while open_lists:
        html += f"</li></{open_lists.pop()}>"
    return html


def render_inline_image(b: InlineImage, index: int, resolve_image_url=None, resolve_link=None) -> str:
    if b.asset is None or resolve_image_url is None:
        return ""

    size = b.size if b.size in INLINE_IMAGE_WIDTHS else "large"
    src = resolve_image_url(b, width=INLINE_IMAGE_WIDTHS[size])
    if not src:
        return ""

    classes = ["pt-image", f"pt-image--{size}"]
    # Alignement sans objet en pleine largeur
    if size != "fullBleed":
        alignment = b.alignment if b.alignment in _ALIGNMENTS else "center"
        classes.append(f"pt-image--align-{alignment}")

    caption = f'\n  <figcaption class="pt-image__caption">{escape(b.caption)}</figcaption>' if b.caption else ""
    return f"""<figure class="{" ".join(classes)}">
  <img src="{escape(src)}" alt="{escape(b.alt)}" class="pt-image__img">{caption}
</figure>"""


def render_image_gallery(b: ImageGallery, index: int, resolve_image_url=None, resolve_link=None) -> str:
    if not b.images or resolve_image_url is None:
        return ""
    if not b.within_bounds:
        log.debug("Galerie key=%s : %d image(s) hors bornes, rendu tel quel", b.key, len(b.images))

    layout = b.layout if b.layout in _GALLERY_LAYOUTS else "grid2"
    width, height = GALLERY_SCROLL_CROP if layout == "scroll" else GALLERY_GRID_CROP

    items_html = ""
    for image in b.images:
        if image.asset is None:
            continue
        src = resolve_image_url(image, width=width, height=height, fit="crop")
        if not src:
            continue
        caption = f'<figcaption class="pt-gallery__caption">{escape(image.caption)}</figcaption>' if image.caption else ""
        items_html += f"""<figure class="pt-gallery__item">
  <img src="{escape(src)}" alt="{escape(image.alt)}" width="{width}" height="{height}">
  {caption}
</figure>"""

    if not items_html:
        return ""
    return f'<div class="pt-gallery pt-gallery--{layout}">{items_html}</div>'


def render_pull_quote(b: PullQuote, index: int, resolve_image_url=None, resolve_link=None) -> str:
    attribution = ""
    if b.attribution:
        attribution = f'<footer class="pull-quote__attribution">— {escape(b.attribution)}</footer>'

    if (b.style or "large") == "large":
        return f"""<div class="pull-quote pull-quote--large">
  <div class="pull-quote__glyph" aria-hidden="true">&ldquo;</div>
  <blockquote class="pull-quote__body">
    <p class="pull-quote__text">{escape(b.quote)}</p>
    {attribution}
  </blockquote>
</div>"""

    return f"""<aside class="pull-quote pull-quote--sidebar">
  <blockquote class="pull-quote__body">
    <p class="pull-quote__text">&ldquo;{escape(b.quote)}&rdquo;</p>
    {attribution}
  </blockquote>
</aside>"""


_BLOCK_RENDERERS: Dict[str, Callable[..., str]] = {
    "TextBlock":    render_text_block,
    "InlineImage":  render_inline_image,
    "ImageGallery": render_image_gallery,
    "PullQuote":    render_pull_quote,
}
