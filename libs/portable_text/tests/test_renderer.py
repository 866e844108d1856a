"""Tests renderer HTML — dispatch par bloc, lettrine, ancres, images, galeries, citations, liens."""
import pytest
from portable_text import render_blocks, render_content, resolve_link, LinkMark
from portable_text.renderer.html import INLINE_IMAGE_WIDTHS


# ── Helpers ───────────────────────────────────────────────────────────────────

class FakeImages:
    """Résolveur d'URL d'image qui enregistre ses appels."""

    def __init__(self, missing=()):
        self.calls = []
        self.missing = set(missing)

    def __call__(self, image, width=None, height=None, fit=None):
        self.calls.append((image.asset.ref, width, height, fit))
        if image.asset.ref in self.missing:
            return None
        return f"https://cdn.test/{image.asset.ref}?w={width}"


def para(text, key=None, style="normal", **extra):
    b = {"blockKind": "TextBlock", "style": style, "children": [{"text": text}], **extra}
    if key:
        b["_key"] = key
    return b


def image(ref="image-a-800x600-jpg", **fields):
    return {"blockKind": "InlineImage", "asset": {"_ref": ref}, "alt": "Alt text", **fields}


# ── Lettrine ──────────────────────────────────────────────────────────────────

def test_drop_cap_only_first_of_two_normals():
    frags = render_blocks([para("Premier"), para("Second")])
    assert "drop-cap" in frags[0]
    assert "drop-cap" not in frags[1]


def test_no_drop_cap_when_heading_first():
    frags = render_blocks([para("Titre", key="h", style="h1"), para("Corps")])
    assert "drop-cap" not in frags[1]


def test_no_drop_cap_for_blockquote_at_index_zero():
    frags = render_blocks([para("Citée", style="blockquote")])
    assert "drop-cap" not in frags[0]


def test_drop_cap_uses_document_position_not_rendered_position():
    frags = render_blocks([{"blockKind": "Mystery"}, para("Corps")])
    assert len(frags) == 1
    assert "drop-cap" not in frags[0]


# ── Titres ────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("style", ["h1", "h2"])
def test_h1_h2_have_permalink(style):
    html = render_blocks([para("Section", key="abc123", style=style)])[0]
    assert f"<{style}" in html
    assert 'href="#abc123"' in html
    assert "Section" in html


def test_h3_has_no_permalink():
    html = render_blocks([para("Sous-section", key="k3", style="h3")])[0]
    assert "<h3" in html
    assert 'href="#k3"' not in html


def test_blockquote_distinct_from_pull_quote():
    html = render_blocks([para("Sagesse", style="blockquote")])[0]
    assert "pt-blockquote" in html
    assert "pull-quote" not in html


def test_unknown_style_renders_as_paragraph():
    html = render_blocks([para("Liste", style="bullet")])[0]
    assert html.startswith("<p")


def test_text_is_escaped():
    html = render_blocks([para("<script>alert(1)</script>")])[0]
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_decorators():
    html = render_blocks([{"blockKind": "TextBlock", "children": [
        {"text": "gras", "marks": ["strong"]},
        {"text": " et "},
        {"text": "italique", "marks": ["em"]},
    ]}])[0]
    assert "<strong>gras</strong>" in html
    assert "<em>italique</em>" in html


# ── Liens ─────────────────────────────────────────────────────────────────────

def test_href_link_new_tab():
    html = render_blocks([{"blockKind": "TextBlock", "children": [{"text": "site", "marks": ["l"]}],
                           "markDefs": [{"_key": "l", "linkType": "href", "href": "https://bwr.com",
                                         "openInNewTab": True}]}])[0]
    assert '<a href="https://bwr.com"' in html
    assert 'target="_blank"' in html


def test_dangling_post_link_renders_text_only():
    content = [{"blockKind": "TextBlock", "children": [
        {"text": "voir le récit", "marks": [{"linkType": "post", "post": {"_ref": "missing-post"}}]},
    ]}]
    html = render_blocks(content, resolve_link=lambda link: None)[0]
    assert "voir le récit" in html
    assert "<a" not in html


def test_consecutive_spans_share_one_anchor():
    html = render_blocks([{"blockKind": "TextBlock", "children": [
        {"text": "Unbound ", "marks": ["l"]},
        {"text": "Gravel", "marks": ["l", "strong"]},
        {"text": " 2025"},
    ], "markDefs": [{"_key": "l", "linkType": "page", "page": "unbound"}]}])[0]
    assert html.count("<a ") == 1
    assert 'href="/unbound"' in html
    assert "<strong>Gravel</strong>" in html


def test_resolve_link_branches_on_link_type():
    # href présent mais linkType=post : c'est la référence post qui compte
    link = LinkMark(link_type="post", href="https://ignored.example", post="recap")
    assert resolve_link(link) == "/posts/recap"
    assert resolve_link(LinkMark(link_type="page", page="about", post="x")) == "/about"
    assert resolve_link(LinkMark(link_type="href", href="https://a.b")) == "https://a.b"


def test_resolve_link_pasted_href_without_type():
    assert resolve_link(LinkMark(href="https://a.b")) == "https://a.b"


@pytest.mark.parametrize("link", [
    LinkMark(link_type="post", post={"_ref": "abc"}),
    LinkMark(link_type="page"),
    LinkMark(link_type="href"),
    LinkMark(),
    None,
])
def test_resolve_link_unresolvable(link):
    assert resolve_link(link) is None


# ── Image inline ──────────────────────────────────────────────────────────────

@pytest.mark.parametrize("size,width", list(INLINE_IMAGE_WIDTHS.items()))
def test_inline_image_width_tiers(size, width):
    images = FakeImages()
    render_blocks([image(size=size)], resolve_image_url=images)
    assert images.calls[0][1] == width


def test_full_bleed_ignores_alignment():
    html = render_blocks([image(size="fullBleed", alignment="right")], resolve_image_url=FakeImages())[0]
    assert "pt-image--fullBleed" in html
    assert "align-right" not in html


def test_alignment_applied_otherwise():
    html = render_blocks([image(size="small", alignment="right")], resolve_image_url=FakeImages())[0]
    assert "pt-image--align-right" in html


def test_unknown_size_falls_back_to_large():
    images = FakeImages()
    render_blocks([image(size="huge")], resolve_image_url=images)
    assert images.calls[0][1] == 800


def test_inline_image_caption_and_alt():
    html = render_blocks([image(caption="Flint Hills")], resolve_image_url=FakeImages())[0]
    assert 'alt="Alt text"' in html
    assert "Flint Hills" in html


def test_inline_image_without_asset_renders_nothing():
    images = FakeImages()
    frags = render_blocks([{"blockKind": "InlineImage", "alt": "x"}], resolve_image_url=images)
    assert frags == []
    assert images.calls == []


def test_inline_image_unresolved_url_renders_nothing():
    frags = render_blocks([image(ref="image-gone-1x1-jpg")],
                          resolve_image_url=FakeImages(missing={"image-gone-1x1-jpg"}))
    assert frags == []


# ── Galerie ───────────────────────────────────────────────────────────────────

def gallery(n, layout=None):
    g = {"blockKind": "ImageGallery",
         "images": [{"asset": {"_ref": f"image-g{i}-10x10-jpg"}, "alt": f"g{i}"} for i in range(n)]}
    if layout:
        g["layout"] = layout
    return g


def test_empty_gallery_renders_nothing():
    assert render_blocks([gallery(0)], resolve_image_url=FakeImages()) == []


def test_grid_gallery_crop():
    images = FakeImages()
    html = render_blocks([gallery(3, "grid3")], resolve_image_url=images)[0]
    assert "pt-gallery--grid3" in html
    assert images.calls == [(f"image-g{i}-10x10-jpg", 400, 300, "crop") for i in range(3)]


def test_scroll_gallery_smaller_crop():
    images = FakeImages()
    render_blocks([gallery(2, "scroll")], resolve_image_url=images)
    assert {(w, h) for _, w, h, _ in images.calls} == {(320, 240)}


def test_gallery_default_layout_grid2():
    html = render_blocks([gallery(2)], resolve_image_url=FakeImages())[0]
    assert "pt-gallery--grid2" in html


def test_gallery_out_of_bounds_renders_all():
    html = render_blocks([gallery(8)], resolve_image_url=FakeImages())[0]
    assert html.count("<figure") == 8
    html = render_blocks([gallery(1)], resolve_image_url=FakeImages())[0]
    assert html.count("<figure") == 1


def test_gallery_skips_unresolved_images():
    html = render_blocks([gallery(3)], resolve_image_url=FakeImages(missing={"image-g1-10x10-jpg"}))[0]
    assert html.count("<figure") == 2


# ── Pull quote ────────────────────────────────────────────────────────────────

def test_pull_quote_large():
    html = render_blocks([{"blockKind": "PullQuote", "quote": "Ride more.", "attribution": "Eddy"}])[0]
    assert "pull-quote--large" in html
    assert "pull-quote__glyph" in html
    assert "— Eddy" in html


def test_pull_quote_sidebar_without_attribution():
    html = render_blocks([{"blockKind": "PullQuote", "quote": "Less is more.", "style": "sidebar"}])[0]
    assert "pull-quote--sidebar" in html
    assert "<aside" in html
    assert "—" not in html


# ── Tolérance aux pannes ──────────────────────────────────────────────────────

def test_bad_blocks_do_not_abort_document():
    content = [
        para("Avant"),
        {"blockKind": "Unknown"},
        {"blockKind": "TextBlock"},
        {"blockKind": "PullQuote"},
        42,
        para("Après"),
    ]
    frags = render_blocks(content)
    assert len(frags) == 2
    assert "Avant" in frags[0] and "Après" in frags[1]


def test_failing_image_resolver_skips_only_that_block():
    def broken(image, width=None, height=None, fit=None):
        raise RuntimeError("CDN indisponible")

    frags = render_blocks([image(), para("Texte")], resolve_image_url=broken)
    assert len(frags) == 1
    assert "Texte" in frags[0]


def test_order_preserved():
    frags = render_blocks([para("un"), para("deux"), para("trois")])
    assert [f.split(">", 1)[1].split("<", 1)[0] for f in frags] == ["un", "deux", "trois"]


def test_render_content_wrapper():
    html = render_content([para("Bonjour")], css_class="article-body")
    assert html.startswith('<div class="magazine-content article-body">')
    assert "Bonjour" in html


def test_render_content_non_list():
    assert render_content(None) == '<div class="magazine-content">\n\n</div>'


@pytest.mark.parametrize("bad", [
    {"blockKind": "TextBlock", "children": [{"text": "a", "marks": 5}]},
    {"blockKind": "TextBlock", "children": [{"text": "a"}], "markDefs": 7},
    {"blockKind": ["TextBlock"]},
    {"_type": {"x": 1}},
    {"blockKind": "TextBlock", "style": ["h1"], "children": [{"text": "a"}]},
])
def test_malformed_block_does_not_abort_document(bad):
    frags = render_blocks([bad, para("Survivant")])
    assert any("Survivant" in f for f in frags)


def test_malformed_block_in_render_content():
    html = render_content([{"blockKind": ["TextBlock"]}, para("Corps")])
    assert "Corps" in html


# ── Annotations de lien invalides ─────────────────────────────────────────────

def test_unknown_link_type_keeps_text_without_anchor():
    html = render_blocks([{"blockKind": "TextBlock", "_key": "p1",
                           "children": [{"text": "Texte du paragraphe", "marks": ["l1"]}],
                           "markDefs": [{"_key": "l1", "linkType": "external", "href": "https://x"}]}])[0]
    assert "Texte du paragraphe" in html
    assert "<a" not in html


def test_invalid_mark_def_dropped_alone():
    html = render_blocks([{"blockKind": "TextBlock", "children": [
        {"text": "cassé", "marks": ["bad"]},
        {"text": " et valide", "marks": ["ok"]},
    ], "markDefs": [
        {"_key": "bad", "linkType": "href", "href": ["pas", "une", "url"]},
        {"_key": "ok", "linkType": "href", "href": "https://bwr.com"},
    ]}])[0]
    assert "cassé" in html
    assert html.count("<a ") == 1
    assert 'href="https://bwr.com"' in html


# ── Galerie : image invalide retirée seule ────────────────────────────────────

def test_gallery_image_without_alt_dropped_alone():
    g = {"blockKind": "ImageGallery", "images": [
        {"asset": {"_ref": "image-g0-10x10-jpg"}, "alt": "avec alt"},
        {"asset": {"_ref": "image-g1-10x10-jpg"}},
        {"asset": {"_ref": "image-g2-10x10-jpg"}, "alt": "aussi"},
    ]}
    images = FakeImages()
    html = render_blocks([g], resolve_image_url=images)[0]
    assert html.count("<figure") == 2
    assert [c[0] for c in images.calls] == ["image-g0-10x10-jpg", "image-g2-10x10-jpg"]


# ── Listes ────────────────────────────────────────────────────────────────────

def item(text, kind="bullet", level=1):
    return {"_type": "block", "style": "normal", "listItem": kind, "level": level,
            "children": [{"_type": "span", "text": text}]}


def test_consecutive_bullets_share_one_list():
    frags = render_blocks([para("Intro"), item("un"), item("deux"), para("Fin")])
    assert len(frags) == 3
    assert frags[1].startswith('<ul class="pt-list pt-list--ul">')
    assert frags[1].count("<li") == 2
    assert frags[1].endswith("</li></ul>")


def test_number_list_is_ordered():
    html = render_blocks([item("premier", "number"), item("second", "number")])[0]
    assert html.startswith("<ol")
    assert html.count("<li") == 2


def test_list_kind_change_starts_new_list():
    html = render_blocks([item("a"), item("b", "number")])[0]
    assert html == ('<ul class="pt-list pt-list--ul"><li class="pt-list__item">a</li></ul>'
                    '<ol class="pt-list pt-list--ol"><li class="pt-list__item">b</li></ol>')


def test_nested_levels():
    html = render_blocks([item("a"), item("a.1", level=2), item("b")])[0]
    assert html == ('<ul class="pt-list pt-list--ul"><li class="pt-list__item">a'
                    '<ul class="pt-list pt-list--ul"><li class="pt-list__item">a.1</li></ul>'
                    '</li><li class="pt-list__item">b</li></ul>')


def test_list_items_have_no_drop_cap_and_dont_take_it():
    frags = render_blocks([item("puce"), para("Après")])
    assert "drop-cap" not in frags[0]
    assert "drop-cap" not in frags[1]


def test_list_item_links_and_marks():
    html = render_blocks([{**item("x"), "children": [{"text": "lien", "marks": ["l", "strong"]}],
                           "markDefs": [{"_key": "l", "linkType": "page", "page": "about"}]}])[0]
    assert '<a href="/about" class="pt-link"><strong>lien</strong></a>' in html


def test_link_index_built_once_per_block(monkeypatch):
    from portable_text import TextBlock
    calls = []
    original = TextBlock.link_index

    def counting(self):
        calls.append(self.key)
        return original(self)

    monkeypatch.setattr(TextBlock, "link_index", counting)
    html = render_blocks([{"blockKind": "TextBlock", "_key": "p", "children": [
        {"text": w, "marks": ["l"] if i % 2 else []} for i, w in enumerate("a b c d e f".split())
    ], "markDefs": [{"_key": "l", "linkType": "page", "page": "x"}]}])[0]
    assert html.count("<a ") == 3
    assert calls == ["p"]
