"""Unit tests for folding posts into the site model."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

import pytest

from sitefold.models import Post
from sitefold.site import build_site, extract_first_image, slugify_tag


def _post(slug: str, date: str, tags: tuple[str, ...] = (), html: str = "") -> Post:
    year = date[:4]
    return Post(
        title=slug.title(),
        date=date,
        tags=tags,
        content="",
        slug=slug,
        url=f"/{year}/{slug}/",
        excerpt="",
        html=html,
        source_path=Path(f"content/{year}/{slug}.md"),
    )


@pytest.mark.parametrize(
    ("name", "expected"),
    [("Travel", "travel"), ("new-york", "new-york"), ("C++ & Rust!", "c-rust")],
)
def test_slugify_tag(name: str, expected: str) -> None:
    """Tag slugs are lowercase and hyphen separated."""
    assert slugify_tag(name) == expected


@pytest.mark.parametrize("name", ["東京", "!!!", "🍜"])
def test_slugify_tag_never_returns_empty(name: str) -> None:
    """Names without ASCII alphanumerics still get a usable, stable slug."""
    slug = slugify_tag(name)
    assert slug.startswith("tag-"), slug
    assert len(slug) == len("tag-") + 8, slug
    assert slugify_tag(name) == slug, "Fallback slug must be deterministic"


def test_fallback_tag_slugs_are_distinct() -> None:
    """Different non-ASCII tags must not share a tag page."""
    assert slugify_tag("東京") != slugify_tag("大阪")


def test_tags_are_counted_in_first_seen_order() -> None:
    """Tag entries appear in first-seen order with counts and posts."""
    posts = [
        _post("c", "2025-01-03T00:00:00-08:00", ("food", "travel")),
        _post("b", "2025-01-02T00:00:00-08:00", ("travel",)),
        _post("a", "2024-01-01T00:00:00-08:00", ("seattle",)),
    ]
    site = build_site(posts, {"travel": "Trips and notes"}, name="Blog")
    assert list(site.tags) == ["food", "travel", "seattle"]
    travel = site.tags["travel"]
    assert travel.count == 2
    assert [post.slug for post in travel.posts] == ["c", "b"]
    assert travel.description == "Trips and notes"
    assert site.tags["food"].description is None
    assert site.name == "Blog"


def test_tag_description_lookup_is_case_insensitive() -> None:
    """Descriptions are keyed by lowercased tag name."""
    site = build_site([_post("a", "2024-01-01T00:00:00-08:00", ("Seattle",))], {"seattle": "Home"})
    assert site.tags["Seattle"].description == "Home"
    assert site.tags["Seattle"].slug == "seattle"


def test_posts_by_year_preserves_order() -> None:
    """Year buckets keep the incoming newest-first order."""
    posts = [
        _post("c", "2025-03-01T00:00:00-08:00"),
        _post("b", "2025-01-01T00:00:00-08:00"),
        _post("a", "2024-06-01T00:00:00-07:00"),
    ]
    site = build_site(posts)
    assert list(site.posts_by_year) == ["2025", "2024"]
    assert [post.slug for post in site.posts_by_year["2025"]] == ["c", "b"]
    assert site.posts == posts


def test_only_tag_slugs_and_image_change() -> None:
    """Building the site fills tag slugs and images and nothing else."""
    post = _post(
        "a", "2024-01-01T00:00:00-08:00", ("New-York",), '<p><img src="/img/a.jpg"></p>'
    )
    before = dc.replace(post)
    build_site([post], base_url="https://blog.test/")
    assert post.tag_slugs == {"New-York": "new-york"}
    assert post.image == "https://blog.test/img/a.jpg"
    for field in dc.fields(Post):
        if field.name not in {"tag_slugs", "image"}:
            assert getattr(post, field.name) == getattr(before, field.name), field.name


@pytest.mark.parametrize(
    ("html", "base_url", "expected"),
    [
        ('<img src="https://cdn.test/a.jpg">', "https://blog.test", "https://cdn.test/a.jpg"),
        ('<img alt="" src="a.jpg">', "", "a.jpg"),
        ("<p>no images</p>", "https://blog.test", None),
    ],
)
def test_extract_first_image(html: str, base_url: str, expected: str | None) -> None:
    """The first image source is returned, made absolute when possible."""
    assert extract_first_image(html, base_url) == expected
