"""Fold parsed posts into the site model: tag index and year archives."""

from __future__ import annotations

import hashlib
import re
import typing as typ

from .models import Post, Site, TagData

if typ.TYPE_CHECKING:
    import collections.abc as cabc

TAG_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
FIRST_IMAGE_PATTERN = re.compile(r"<img[^>]+src=[\"']([^\"']+)[\"']", re.IGNORECASE)


def slugify_tag(name: str) -> str:
    """Return the URL slug for a tag name.

    Names with no ASCII letters or digits (``"東京"``, ``"!!!"``) would
    collapse to an empty slug, so they fall back to ``tag-`` followed by the
    first eight hex digits of the name's SHA-1. The fallback is stable across
    builds and differs between names in practice.

    >>> slugify_tag("New-York City!")
    'new-york-city'
    """
    slug = TAG_SLUG_PATTERN.sub("-", name.lower()).strip("-")
    if slug:
        return slug
    digest = hashlib.sha1(name.encode("utf-8"), usedforsecurity=False).hexdigest()
    return f"tag-{digest[:8]}"


def extract_first_image(html: str, base_url: str = "") -> str | None:
    """Return the first ``<img>`` source in ``html``, absolute when possible.

    Absolute ``http(s)`` sources are returned unchanged; other sources are
    joined to ``base_url`` when one is given.
    """
    match = FIRST_IMAGE_PATTERN.search(html)
    if not match:
        return None
    src = match.group(1)
    if src.startswith(("http://", "https://")) or not base_url:
        return src
    return f"{base_url.rstrip('/')}/{src.lstrip('/')}"


def build_site(
    posts: cabc.Sequence[Post],
    tag_descriptions: cabc.Mapping[str, str] | None = None,
    *,
    name: str = "",
    base_url: str = "",
) -> Site:
    """Build the tag index and year buckets for already-sorted posts.

    Parameters
    ----------
    posts : Sequence[Post]
        Posts in display order (newest first, as returned by ``parse_all``).
    tag_descriptions : Mapping[str, str], optional
        Descriptions keyed by lowercased tag name.
    name : str, optional
        Site name carried onto the model.
    base_url : str, optional
        Prefix used to make each post's ``image`` absolute.

    Returns
    -------
    Site
        The site model. Each post gains ``tag_slugs`` and ``image``; no other
        post field changes.
    """
    descriptions = tag_descriptions or {}
    tags: dict[str, TagData] = {}
    posts_by_year: dict[str, list[Post]] = {}

    for post in posts:
        post.tag_slugs = {}
        post.image = extract_first_image(post.html, base_url)
        for tag in post.tags:
            slug = slugify_tag(tag)
            post.tag_slugs[tag] = slug
            entry = tags.get(tag)
            if entry is None:
                entry = TagData(
                    name=tag, slug=slug, description=descriptions.get(tag.lower())
                )
                tags[tag] = entry
            entry.count += 1
            entry.posts.append(post)
        posts_by_year.setdefault(post.year, []).append(post)

    return Site(name=name, posts=list(posts), tags=tags, posts_by_year=posts_by_year)


__all__ = ["build_site", "extract_first_image", "slugify_tag"]
