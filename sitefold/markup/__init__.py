"""Markdown rendering, link rewriting and HTML sanitization for posts."""

from .renderer import MarkupTransformer, render
from .sanitizer import sanitize_html
from .tokens import LinkToken, build_link_passes

__all__ = [
    "LinkToken",
    "MarkupTransformer",
    "build_link_passes",
    "render",
    "sanitize_html",
]
