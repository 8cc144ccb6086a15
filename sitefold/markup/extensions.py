"""Python-Markdown extensions that run the document rewrite passes.

Two tree processors are registered by :class:`ContentPipelineExtension`;
fenced code is left to the stock ``fenced_code`` and ``codehilite``
extensions configured in :mod:`sitefold.markup.renderer`.

* ``LinkRewriteTreeprocessor`` converts every ``<a>`` and ``<img>`` into a
  :class:`~sitefold.markup.tokens.LinkToken`, runs the pure passes from
  :mod:`sitefold.markup.tokens` and writes the result back, including the
  ``data-embed="youtube"`` marker for videos.
* ``CalloutTreeprocessor`` turns ``> [!NOTE]`` style blockquotes into labelled
  callout blocks with an icon.
"""

from __future__ import annotations

import re
import typing as typ
import xml.etree.ElementTree as etree

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from sitefold._constants import CALLOUT_ICON_PATHS

from .tokens import LinkToken, build_link_passes, run_passes

if typ.TYPE_CHECKING:
    from markdown import Markdown

    from sitefold.config import CdnConfig

    from .tokens import LinkPass

EMBED_MARKER_ATTRIBUTE = "data-embed"
CALLOUT_MARKER_PATTERN = re.compile(
    r"^\s*\[!(" + "|".join(CALLOUT_ICON_PATHS) + r")\][ \t]*\n?", re.IGNORECASE
)


class LinkRewriteTreeprocessor(Treeprocessor):
    """Apply the link and image passes to every anchor and image element."""

    def __init__(self, md: Markdown, passes: tuple[LinkPass, ...]) -> None:
        super().__init__(md)
        self.passes = passes

    def run(self, root: etree.Element) -> etree.Element:
        """Rewrite ``href``/``src`` attributes in place on the parsed tree."""
        for element in root.iter():
            if element.tag == "a":
                self._rewrite(element, "link", "href")
            elif element.tag == "img":
                self._rewrite(element, "image", "src")
        return root

    def _rewrite(
        self, element: etree.Element, kind: typ.Literal["link", "image"], attr: str
    ) -> None:
        target = element.get(attr)
        if target is None:
            return
        token = run_passes(LinkToken(kind=kind, href=target), self.passes)
        if token.href != target:
            element.set(attr, token.href)
        if token.youtube:
            element.set(EMBED_MARKER_ATTRIBUTE, "youtube")


class CalloutTreeprocessor(Treeprocessor):
    """Convert ``[!TYPE]`` blockquotes into callout blocks."""

    def run(self, root: etree.Element) -> etree.Element:
        """Replace marked blockquotes with ``markdown-alert`` containers."""
        targets = [
            (parent, index, child)
            for parent in root.iter()
            for index, child in enumerate(parent)
            if child.tag == "blockquote"
        ]
        # Innermost first so nested callouts are converted before their parent.
        for parent, index, blockquote in reversed(targets):
            callout = self._convert(blockquote)
            if callout is not None:
                parent[index] = callout
        return root

    def _convert(self, blockquote: etree.Element) -> etree.Element | None:
        first = blockquote[0] if len(blockquote) else None
        if first is None or first.tag != "p":
            return None
        match = CALLOUT_MARKER_PATTERN.match(first.text or "")
        if not match:
            return None

        kind = match.group(1).lower()
        first.text = (first.text or "")[match.end() :]
        if not first.text and len(first) and first[0].tag == "br":
            line_break = first[0]
            first.text = (line_break.tail or "").lstrip("\n")
            first.remove(line_break)
        if not first.text and not len(first):
            blockquote.remove(first)

        callout = etree.Element(
            "div", {"class": f"markdown-alert markdown-alert-{kind}"}
        )
        title = etree.SubElement(callout, "p", {"class": "markdown-alert-title"})
        icon = _build_icon(kind)
        icon.tail = kind.capitalize()
        title.append(icon)
        callout.extend(list(blockquote))
        callout.tail = blockquote.tail
        return callout


def _build_icon(kind: str) -> etree.Element:
    """Return the SVG icon element for a callout type."""
    path_data, evenodd = CALLOUT_ICON_PATHS[kind]
    svg = etree.Element(
        "svg",
        {
            "xmlns": "http://www.w3.org/2000/svg",
            "width": "20",
            "height": "20",
            "viewBox": "0 0 20 20",
            "fill": "currentColor",
            "aria-hidden": "true",
        },
    )
    path_attrs = {"d": path_data}
    if evenodd:
        path_attrs["fill-rule"] = "evenodd"
    etree.SubElement(svg, "path", path_attrs)
    return svg


class ContentPipelineExtension(Extension):
    """Register link rewriting and callouts on a Markdown instance."""

    def __init__(self, cdn: CdnConfig | None = None) -> None:
        self.cdn = cdn
        super().__init__()

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the tree processors on the instance."""
        md.treeprocessors.register(
            LinkRewriteTreeprocessor(md, build_link_passes(self.cdn)),
            "sitefold_links",
            15,
        )
        md.treeprocessors.register(CalloutTreeprocessor(md), "sitefold_callouts", 12)


__all__ = [
    "EMBED_MARKER_ATTRIBUTE",
    "CalloutTreeprocessor",
    "ContentPipelineExtension",
    "LinkRewriteTreeprocessor",
]
