"""Pure rewrite passes over link and image targets.

Each pass takes a :class:`LinkToken` and returns a new one; none of them
mutates its input or reads global state. :func:`build_link_passes` composes
them in their fixed order so the tree processor in
:mod:`sitefold.markup.extensions` only has to convert elements to tokens and
back.

Example
-------
>>> from sitefold.markup.tokens import LinkToken, run_passes, build_link_passes
>>> token = run_passes(LinkToken("link", "../../2023/tea.md#brew"), build_link_passes())
>>> token.href
'/2023/tea/#brew'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import functools
import typing as typ

from sitefold._constants import (
    ASSET_IMAGE_PATTERN,
    CROSS_DOCUMENT_LINK_PATTERN,
    YOUTUBE_LINK_PATTERN,
)

if typ.TYPE_CHECKING:
    from sitefold.config import CdnConfig

TokenKind = typ.Literal["link", "image"]


@dc.dataclass(frozen=True, slots=True)
class LinkToken:
    """A link or image target plus the marker the embed pass attached.

    Attributes
    ----------
    kind : {"link", "image"}
        Whether the target came from an anchor or an image.
    href : str
        Current target URL.
    youtube : bool
        Set for absolute links that point at a YouTube video. The tree
        processor writes it back as ``data-embed="youtube"`` so the embed pass
        in :mod:`sitefold.markup.postprocess` can find the anchor.
    """

    kind: TokenKind
    href: str
    youtube: bool = False


LinkPass = cabc.Callable[[LinkToken], LinkToken]


def rewrite_cross_document_link(token: LinkToken) -> LinkToken:
    """Rewrite ``../2024/slug.md#anchor`` style links to ``/2024/slug/#anchor``.

    Links with other file extensions (``../2024/report.pdf``) do not match and
    pass through unchanged.
    """
    if token.kind != "link":
        return token
    match = CROSS_DOCUMENT_LINK_PATTERN.match(token.href)
    if not match:
        return token
    _, year, slug, anchor = match.groups()
    return dc.replace(token, href=f"/{year}/{slug}/{anchor or ''}")


def mark_youtube_link(token: LinkToken) -> LinkToken:
    """Flag absolute YouTube watch and short links for embedding.

    ``rel`` and ``target`` for external links are not decided here; they are
    applied to the serialized HTML so raw-HTML anchors are covered too.
    """
    if token.kind != "link" or not YOUTUBE_LINK_PATTERN.match(token.href):
        return token
    return dc.replace(token, youtube=True)


def rewrite_cdn_image(token: LinkToken, cdn: CdnConfig | None) -> LinkToken:
    """Point ``../../assets/{year}/{slug}/{filename}`` images at the CDN.

    Does nothing unless ``cdn`` is enabled; any other image target, including
    absolute URLs, passes through unchanged.
    """
    if token.kind != "image" or cdn is None or not cdn.enabled:
        return token
    match = ASSET_IMAGE_PATTERN.match(token.href)
    if not match:
        return token
    year, slug, filename = match.groups()
    path = (
        cdn.path_pattern.replace("{year}", year)
        .replace("{slug}", slug)
        .replace("{filename}", filename)
    )
    return dc.replace(token, href=f"{cdn.base_url.rstrip('/')}/{path.lstrip('/')}")


def build_link_passes(cdn: CdnConfig | None = None) -> tuple[LinkPass, ...]:
    """Return the link and image passes in the order they must run."""
    return (
        rewrite_cross_document_link,
        mark_youtube_link,
        functools.partial(rewrite_cdn_image, cdn=cdn),
    )


def run_passes(token: LinkToken, passes: cabc.Iterable[LinkPass]) -> LinkToken:
    """Thread ``token`` through ``passes`` and return the final token."""
    return functools.reduce(lambda current, step: step(current), passes, token)


__all__ = [
    "LinkPass",
    "LinkToken",
    "build_link_passes",
    "mark_youtube_link",
    "rewrite_cdn_image",
    "rewrite_cross_document_link",
    "run_passes",
]
