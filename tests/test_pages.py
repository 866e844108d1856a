"""Tests pages HTML — échappement des valeurs CMS, rendu des listes dans l'article."""
from conftest import make_post
from gravel_mag.models import Post
from gravel_mag.pages import _category_badge, article_page


def test_category_color_escaped():
    html = _category_badge({"name": "Race", "color": '"><script>alert(1)</script>'})
    assert "<script>" not in html
    assert "&quot;&gt;&lt;script&gt;" in html


def test_category_without_color_has_no_style():
    assert _category_badge({"name": "News", "color": None}) == '<span class="category">News</span>'


def test_article_renders_lists():
    post = Post.model_validate(make_post(author=None, category=None, content=[
        {"_type": "block", "listItem": "bullet", "level": 1, "children": [{"_type": "span", "text": "Pneus 45 mm"}]},
        {"_type": "block", "listItem": "bullet", "level": 1, "children": [{"_type": "span", "text": "Bidons"}]},
    ]))
    html = article_page(post, resolve_image_url=lambda *a, **k: None)
    assert html.count('<li class="pt-list__item">') == 2
    assert "<ul" in html
