r"""Ordered passes applied to serialized HTML before sanitization.

Each pass is a plain ``str -> str`` function. They run in this order (see
:func:`postprocess_html`):

1. :func:`embed_youtube_links` replaces every anchor carrying the
   ``data-embed="youtube"`` marker written by the link tree processor with a
   responsive iframe wrapper. The video id is read from the anchor's ``href``.
   It runs first so converted anchors are never seen by the link policy.
2. :func:`add_lazy_loading` adds ``loading="lazy"`` to each ``<img`` tag that
   lacks one. It touches only ``<img`` tags, never anchors.
3. :func:`apply_external_link_policy` parses the markup with BeautifulSoup and
   gives every anchor whose ``href`` starts with ``http://``, ``https://`` or
   ``//`` a ``target="_blank"`` and a ``rel`` value, replacing whatever the
   author wrote. Attribute order and raw-HTML anchors do not matter.

Example
-------
>>> from sitefold.markup.postprocess import apply_external_link_policy
>>> apply_external_link_policy('<a href="https://x.test/">x</a>', frozenset())
'<a href="https://x.test/" target="_blank" rel="noopener noreferrer nofollow">x</a>'
"""

from __future__ import annotations

import html
import re
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from sitefold._constants import EXTERNAL_PREFIXES, YOUTUBE_LINK_PATTERN
from sitefold.config.helpers import normalize_domain

YOUTUBE_ANCHOR_PATTERN = re.compile(
    r'(<a\b[^>]*\bdata-embed="youtube"[^>]*>).*?</a>', re.DOTALL
)
HREF_ATTRIBUTE_PATTERN = re.compile(r'\bhref="([^"]*)"')
IMG_TAG_PATTERN = re.compile(r"<img(?![^>]*\bloading=)(?=[\s/>])")

YOUTUBE_EMBED_TEMPLATE = (
    '<div class="video-container"><iframe '
    'src="https://www.youtube.com/embed/{video_id}" frameborder="0" '
    'allow="accelerometer; autoplay; clipboard-write; encrypted-media; '
    'gyroscope; picture-in-picture" allowfullscreen loading="lazy"></iframe></div>'
)


def embed_youtube_links(markup: str) -> str:
    """Swap marked YouTube anchors for an embedded player.

    A marked anchor whose ``href`` is not a YouTube video is left in place;
    the sanitizer drops the marker attribute.
    """

    def _repl(match: re.Match[str]) -> str:
        href = HREF_ATTRIBUTE_PATTERN.search(match.group(1))
        if href is None:
            return match.group(0)
        video = YOUTUBE_LINK_PATTERN.match(html.unescape(href.group(1)))
        if video is None:
            return match.group(0)
        return YOUTUBE_EMBED_TEMPLATE.format(video_id=video.group(1))

    return YOUTUBE_ANCHOR_PATTERN.sub(_repl, markup)


def add_lazy_loading(markup: str) -> str:
    """Inject ``loading="lazy"`` into every image tag."""
    return IMG_TAG_PATTERN.sub('<img loading="lazy"', markup)


def link_rel(url: str, nofollow_exceptions: frozenset[str]) -> str:
    """Return the ``rel`` value for an external ``url``.

    ``nofollow`` is omitted only when the lowercased hostname, minus a
    leading ``www.``, is one of ``nofollow_exceptions``. Unparseable URLs
    always get ``nofollow``.
    """
    rel = "noopener noreferrer"
    try:
        hostname = urlsplit(html.unescape(url)).hostname
    except ValueError:
        hostname = None
    if not hostname or normalize_domain(hostname) not in nofollow_exceptions:
        rel += " nofollow"
    return rel


def apply_external_link_policy(markup: str, nofollow_exceptions: frozenset[str]) -> str:
    """Open external links in a new tab with the site's ``rel`` policy.

    Any ``target`` or ``rel`` already on an external anchor is overwritten, so
    raw HTML in a post cannot opt out of ``nofollow``.
    """
    soup = BeautifulSoup(markup, "html.parser")
    for anchor in soup.find_all("a", href=True):
        href = str(anchor["href"]).strip()
        if not href.lower().startswith(EXTERNAL_PREFIXES):
            continue
        anchor["target"] = "_blank"
        anchor["rel"] = link_rel(href, nofollow_exceptions)
    return str(soup)


def postprocess_html(markup: str, nofollow_exceptions: frozenset[str]) -> str:
    """Run the string passes in their fixed order."""
    markup = embed_youtube_links(markup)
    markup = add_lazy_loading(markup)
    return apply_external_link_policy(markup, nofollow_exceptions)


__all__ = [
    "add_lazy_loading",
    "apply_external_link_policy",
    "embed_youtube_links",
    "link_rel",
    "postprocess_html",
]
