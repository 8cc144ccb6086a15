"""Render a markdown body into sanitized HTML.

:class:`MarkupTransformer` owns the Pygments style and the read-only
:class:`~sitefold.config.MarkupOptions` for a generation run. Each call to
:meth:`MarkupTransformer.render` builds a fresh ``markdown.Markdown`` instance,
so transformers are safe to share between the aggregator's parse tasks.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from sitefold._constants import DEFAULT_CODE_LANGUAGE
from sitefold.config import MarkupOptions

from .extensions import ContentPipelineExtension
from .postprocess import postprocess_html
from .sanitizer import sanitize_html

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODE_BLOCK_PATTERN = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[ ]*\{?\.?(?P<lang>[A-Za-z0-9_+#.-]+)?[^\n]*\n"
    r".*?^(?P=fence)[ ]*$",
    re.MULTILINE | re.DOTALL,
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
MARKDOWN_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists", "nl2br")


class MarkupTransformer:
    """Run the markup rewrite pipeline and sanitize the result."""

    def __init__(
        self, options: MarkupOptions | None = None, pygments_style: str = "monokai"
    ) -> None:
        """Initialize a transformer for one generation run.

        Parameters
        ----------
        options : MarkupOptions, optional
            CDN rewriting and nofollow exceptions; defaults to no CDN and an
            empty exception set.
        pygments_style : str, optional
            Name of the Pygments style used for code blocks and the
            stylesheet. Defaults to ``"monokai"``.
        """
        self.options = options or MarkupOptions()
        self.pygments_style = pygments_style

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        formatter = HtmlFormatter(style=self.pygments_style, cssclass="codehilite")
        return formatter.get_style_defs(".codehilite")

    def render(self, body: str) -> str:
        """Convert a markdown body into sanitized HTML.

        Malformed markup never raises: unknown code languages fall back to
        plain text and unmatched link targets pass through unchanged.
        """
        normalized = self._normalize_fenced_blocks(body)
        if not normalized.strip():
            return ""
        extensions: list[Extension | str] = [
            ContentPipelineExtension(self.options.cdn),
            *MARKDOWN_EXTENSIONS,
        ]
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        html = self._annotate_codehilite(md.convert(normalized), normalized)
        html = postprocess_html(html, self.options.nofollow_exceptions)
        return sanitize_html(html)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        """Unindent fence lines and drop ``,no_run`` style fence labels."""
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            return f"{fence}{language or ''}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)

    @staticmethod
    def _annotate_codehilite(html: str, source_markdown: str) -> str:
        """Tag each highlighted block with the language its fence declared.

        Blocks are matched to fences in document order; a fence without a
        language is tagged ``text``.
        """
        languages = [
            match.group("lang") or DEFAULT_CODE_LANGUAGE
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(_match: re.Match[str]) -> str:
            safe_lang = escape(next(lang_iter, DEFAULT_CODE_LANGUAGE), quote=True)
            return f'<div class="codehilite" data-language="{safe_lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))


def render(body: str, options: MarkupOptions | None = None) -> str:
    """Render ``body`` with a one-off :class:`MarkupTransformer`."""
    return MarkupTransformer(options).render(body)


__all__ = ["MarkupTransformer", "render"]
