"""Turn a directory of markdown posts into a validated site model.

The package parses front-matter and markdown into sanitized posts, rejects
content that would break a build, and folds the survivors into tag and year
indexes with pagination helpers for renderers.

Exports
-------
- ``parse_all``: Parse a content tree into posts sorted newest first.
- ``parse_document``: Parse one markdown file into a ``ParseResult``.
- ``build_site``: Build the ``Site`` model from parsed posts.
- ``paginate`` / ``slice_page``: Pagination metadata and page slices.
- ``render``: Render a markdown body to sanitized HTML.
- ``app`` / ``main``: The ``sitefold`` Cyclopts command line.

Examples
--------
>>> from pathlib import Path
>>> from sitefold import build_site, parse_all
>>> site = build_site(parse_all(Path("content")))  # doctest: +SKIP
>>> sorted(site.posts_by_year)  # doctest: +SKIP
['2024', '2025']
"""

from __future__ import annotations

from .aggregator import ContentValidationError, format_error_summary, parse_all
from .cli import app, main
from .frontmatter import parse_document
from .markup import MarkupTransformer, render
from .models import ErrorKind, ParseError, ParseResult, Post, Site, TagData
from .pagination import paginate, slice_page
from .site import build_site

__all__ = [
    "ContentValidationError",
    "ErrorKind",
    "MarkupTransformer",
    "ParseError",
    "ParseResult",
    "Post",
    "Site",
    "TagData",
    "app",
    "build_site",
    "format_error_summary",
    "main",
    "paginate",
    "parse_all",
    "parse_document",
    "render",
    "slice_page",
]
