"""
Pages HTML publiques — accueil, article, annuaire des courses, fiche course.
Gabarit commun + fragments f-string ; le corps d'article passe par portable_text.
"""
from datetime import date
from html import escape
from typing import Callable, Dict, List, Optional

from portable_text import estimate_reading_time, format_reading_time, render_content
from portable_text.core import EXCERPT_GRID, EXCERPT_LEAD

from .images import open_graph_image, url_for_image
from .models import Post, Race
from .presentation import (
    PostCard, RaceCard, byline, category_label, format_date, format_date_range,
    format_location, format_status, post_card, race_card,
)

SITE_NAME = "Gravel Mag"

_CSS = """*{box-sizing:border-box}body{font-family:Georgia,serif;margin:0;color:#111;background:#fff}
header,main,footer{max-width:1100px;margin:0 auto;padding:20px}
header a{color:#111;text-decoration:none;margin-right:18px}
.grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(300px,1fr));gap:32px}
.card a{color:inherit;text-decoration:none}.card img{width:100%;aspect-ratio:3/2;object-fit:cover}
.meta{font-family:monospace;font-size:12px;letter-spacing:.1em;text-transform:uppercase;color:#777}
.category{font-size:12px;text-transform:uppercase;border-bottom:1px solid #ccc}
.magazine-content{max-width:720px;margin:0 auto;font-size:19px;line-height:1.7}
.pt-paragraph--drop-cap::first-letter{float:left;font-size:4em;line-height:.8;margin:6px 8px 0 0}
.pull-quote--large{font-size:1.6em;text-align:center;margin:48px 0}
.pull-quote--sidebar{float:right;width:40%;margin:0 0 16px 24px;border-left:3px solid #111;padding-left:16px}
.pt-gallery{display:grid;gap:8px}.pt-gallery--grid2{grid-template-columns:1fr 1fr}
.pt-gallery--grid3{grid-template-columns:repeat(3,1fr)}.pt-gallery--scroll{display:flex;overflow-x:auto}
.pt-list{padding-left:1.4em;margin:0 0 1em}.pt-list__item{margin:.3em 0}"""


def layout(title: str, body: str, description: Optional[str] = None,
           og_image: Optional[Dict] = None) -> str:
    meta = ""
    if description:
        meta += f'<meta name="description" content="{escape(description)}">'
    if og_image:
        meta += f'<meta property="og:image" content="{escape(og_image["url"])}">'
        meta += f'<meta property="og:image:width" content="{og_image["width"]}">'
        meta += f'<meta property="og:image:height" content="{og_image["height"]}">'
    return f"""<!DOCTYPE html><html lang="en"><head>
<meta charset="UTF-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<title>{escape(title)} | {SITE_NAME}</title>{meta}
<style>{_CSS}</style></head>
<body><header><a href="/"><b>{SITE_NAME}</b></a><a href="/races">Races</a></header>
<main>{body}</main>
<footer class="meta">{_newsletter_form()}</footer></body></html>"""


def _newsletter_form() -> str:
    return """<form id="newsletter" onsubmit="event.preventDefault();fetch('/api/newsletter',{method:'POST',
headers:{'Content-Type':'application/json'},body:JSON.stringify({email:this.email.value})})
.then(r=>r.json()).then(d=>{this.querySelector('output').textContent=d.message||d.error})">
<input type="email" name="email" placeholder="you@example.com" required>
<button type="submit">Subscribe</button> <output></output></form>"""


def _category_badge(category: Optional[Dict]) -> str:
    if not category:
        return ""
    color = escape(category["color"]) if category["color"] else ""
    style = f' style="color:{color};border-color:{color}60"' if color else ""
    return f'<span class="category"{style}>{escape(category["name"])}</span>'


def _image(url: Optional[str], alt: Optional[str]) -> str:
    if not url:
        return '<div class="meta" style="aspect-ratio:3/2;background:#f3f3f3;display:flex;align-items:center;justify-content:center">No Image</div>'
    return f'<img src="{escape(url)}" alt="{escape(alt or "")}" loading="lazy">'


# ── Cartes ─────────────────────────────────────────────────────────────

def post_card_html(card: PostCard) -> str:
    author = f'<p class="meta">{escape(card.author)} · {card.date or ""}</p>' if card.author else ""
    return f"""<article class="card"><a href="{escape(card.url)}">
{_image(card.image_url, card.image_alt)}
{_category_badge(card.category)}
<h3>{escape(card.title)}</h3>
<p>{escape(card.excerpt)}</p>
<p class="meta">{card.reading_time}</p>{author}
</a></article>"""


def race_card_html(card: RaceCard) -> str:
    details = " · ".join(escape(x) for x in (card.dates, card.distances, card.status) if x)
    return f"""<article class="card"><a href="{escape(card.url)}">
{_image(card.image_url, card.image_alt)}
<div class="meta">{escape(card.location)}</div>
<h3>{escape(card.name)}</h3>
{f"<p>{escape(card.description)}</p>" if card.description else ""}
<p>{details}</p>
</a></article>"""


# ── Pages ──────────────────────────────────────────────────────────────

def home_page(posts: List[Post]) -> str:
    """Article à la une (extrait long) + grille des suivants."""
    if not posts:
        return layout("Home", "<h1>Gravel Mag</h1><p>No posts yet.</p>")
    lead = post_card(posts[0], EXCERPT_LEAD)
    grid = "".join(post_card_html(post_card(p, EXCERPT_GRID)) for p in posts[1:])
    body = f"""<section class="lead">{post_card_html(lead)}</section>
<section class="grid">{grid}</section>"""
    return layout("Home", body)


def article_page(post: Post, resolve_image_url: Callable = url_for_image,
                 resolve_link: Optional[Callable] = None) -> str:
    author = byline(post.author)
    author_html = ""
    if author and author["name"]:
        avatar = (f'<img src="{escape(author["avatar_url"])}" alt="{escape(author["avatar_alt"])}" '
                  f'width="48" height="48" style="border-radius:50%">') if author["avatar_url"] else "By "
        credit = ""
        if author["photo_credit"]:
            name = escape(author["photo_credit"])
            if author["photo_credit_url"]:
                name = f'<a href="{escape(author["photo_credit_url"])}" target="_blank" rel="noopener noreferrer">{name}</a>'
            credit = f'<p class="meta">Photo by {name}</p>'
        author_html = f'<div class="byline">{avatar} <b>{escape(author["name"])}</b> <span class="meta">{format_date(post.date)}</span>{credit}</div>'

    cover = post.cover_image
    cover_html = _image(url_for_image(cover, 1200, 900, "crop"), cover.alt) if cover else ""

    kwargs = {"resolve_image_url": resolve_image_url}
    if resolve_link is not None:
        kwargs["resolve_link"] = resolve_link
    content = render_content(post.content, css_class="magazine-article", **kwargs)
    minutes = estimate_reading_time(post.content)

    body = f"""<article>
{_category_badge(category_label(post.category)) or '<span class="category">Article</span>'}
<h1>{escape(post.title)}</h1>
{f"<p class='lead'>{escape(post.excerpt)}</p>" if post.excerpt else ""}
<p class="meta reading-time">{format_reading_time(minutes)}</p>
{author_html}
{cover_html}
{content}
</article>"""
    return layout(post.title, body, post.excerpt, open_graph_image(cover) if cover else None)


def races_page(races: List[Race], today: Optional[date] = None) -> str:
    cards = "".join(race_card_html(race_card(r, today)) for r in races)
    body = f"""<h1>Race Directory</h1>
<p>Comprehensive directory of gravel races around the world</p>
<section class="grid">{cards or "<p>No races yet.</p>"}</section>"""
    return layout("Race Directory", body, "Comprehensive directory of gravel races around the world")


def race_page(race: Race) -> str:
    facts = [
        ("Location", format_location(race.location)),
        ("Distances", ", ".join(race.distances)),
        ("Terrain", race.terrain.value if race.terrain else None),
        ("Elevation", race.elevation_gain),
        ("Entry fee", race.entry_fee),
    ]
    facts_html = "".join(f"<dt>{k}</dt><dd>{escape(v)}</dd>" for k, v in facts if v)
    editions = "".join(
        f"<tr><td>{e.year}</td><td>{format_date_range(e)}</td><td>{format_status(e.status)}</td>"
        f"<td>{escape(e.notes or '')}</td></tr>"
        for e in sorted(race.editions, key=lambda e: e.year, reverse=True)
    )
    links = "".join(
        f'<a href="{escape(url)}" target="_blank" rel="noopener noreferrer">{label}</a> '
        for label, url in (("Website", race.website), ("Register", race.registration_url)) if url
    )
    cover = race.cover_image
    body = f"""<article>
<div class="meta">{escape(format_location(race.location))}</div>
<h1>{escape(race.name)}</h1>
{_image(url_for_image(cover, 1200, 800, "crop"), cover.alt or race.name) if cover else ""}
{f"<p>{escape(race.description)}</p>" if race.description else ""}
<dl>{facts_html}</dl>
{f"<table><tr><th>Year</th><th>Dates</th><th>Status</th><th>Notes</th></tr>{editions}</table>" if editions else ""}
<p>{links}</p>
</article>"""
    return layout(race.name, body, race.description, open_graph_image(cover) if cover else None)
