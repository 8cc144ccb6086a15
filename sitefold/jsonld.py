"""Schema.org structured data for posts and their points of interest.

The mappings returned here are plain dictionaries; renderers embed them with
:func:`to_script_tag`.

Example
-------
>>> from sitefold.models import Business
>>> place = place_schema(Business("Cafe", "Cafe Ladro", 47.6, -122.3))
>>> place["geo"]["latitude"]
47.6
"""

from __future__ import annotations

import json
import typing as typ

if typ.TYPE_CHECKING:
    from .models import Business, Post

SCHEMA_CONTEXT = "https://schema.org"
DEFAULT_LANGUAGE = "en-US"


def place_schema(business: Business) -> dict[str, typ.Any]:
    """Return a Place (or subtype) mapping for one point of interest."""
    place: dict[str, typ.Any] = {
        "@type": business.type,
        "name": business.name,
        "geo": {
            "@type": "GeoCoordinates",
            "latitude": business.lat,
            "longitude": business.lng,
        },
    }
    if business.address:
        place["address"] = business.address
    optional = {
        "telephone": business.telephone,
        "url": business.url,
        "priceRange": business.price_range,
        "servesCuisine": business.cuisine,
        "openingHours": business.opening_hours,
    }
    place.update({key: value for key, value in optional.items() if value})
    return place


def blog_posting_schema(
    post: Post,
    site_name: str,
    base_url: str,
    image_url: str | None = None,
    language: str = DEFAULT_LANGUAGE,
) -> dict[str, typ.Any]:
    """Return a BlogPosting mapping for ``post``.

    Parameters
    ----------
    post : Post
        Parsed post; its ``business`` entries become ``contentLocation``.
    site_name : str
        Publisher name.
    base_url : str
        Absolute site root used to build the canonical URL.
    image_url : str, optional
        Representative image; defaults to ``post.image``.
    language : str, optional
        ``inLanguage`` value. Defaults to ``"en-US"``.
    """
    root = base_url.rstrip("/")
    url = f"{root}{post.url}"
    posting: dict[str, typ.Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": "BlogPosting",
        "headline": post.title,
        "description": post.excerpt,
        "url": url,
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
        "datePublished": post.date,
        "dateModified": post.date,
        "publisher": {"@type": "Organization", "name": site_name, "url": f"{root}/"},
        "wordCount": len(post.content.split()),
        "inLanguage": language,
    }
    image = image_url or post.image
    if image:
        posting["image"] = image
    if post.tags:
        posting["keywords"] = ", ".join(post.tags)
        posting["articleSection"] = post.category or post.tags[0]
    elif post.category:
        posting["articleSection"] = post.category
    if post.business:
        posting["contentLocation"] = [place_schema(entry) for entry in post.business]
    return posting


def to_script_tag(data: typ.Mapping[str, typ.Any]) -> str:
    """Serialize ``data`` into an ``application/ld+json`` script element."""
    payload = json.dumps(data, ensure_ascii=False, indent=2).replace("</", "<\\/")
    return f'<script type="application/ld+json">\n{payload}\n</script>'


__all__ = ["blog_posting_schema", "place_schema", "to_script_tag"]
