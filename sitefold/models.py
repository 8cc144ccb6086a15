"""Typed records shared by the content pipeline.

These dataclasses describe everything the pipeline hands to downstream
renderers: parsed posts with their point-of-interest data, categorized parse
errors, the tag index and year buckets of a site, and pagination metadata.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class ErrorKind(enum.StrEnum):
    """Categories of per-file parse failures, in reporting order."""

    VALIDATION = "validation"
    YAML = "yaml"
    MISSING_FIELD = "missing_field"
    FILE_NOT_FOUND = "file_not_found"
    UNKNOWN = "unknown"


@dc.dataclass(frozen=True, slots=True)
class ParseError:
    """A categorized failure attached to one source file.

    Attributes
    ----------
    file : str
        Path of the offending document (or both paths for slug conflicts).
    kind : ErrorKind
        Error category used for grouping and the fatal-error policy.
    message : str
        Human-readable description of the problem.
    suggestion : str | None
        One-line remediation hint, when one is known.
    """

    file: str
    kind: ErrorKind
    message: str
    suggestion: str | None = None


@dc.dataclass(frozen=True, slots=True)
class Business:
    """A point of interest attached to a post, typed as a Schema.org Place."""

    type: str
    name: str
    lat: float
    lng: float
    address: str = ""
    cuisine: str | None = None
    price_range: str | None = None
    telephone: str | None = None
    url: str | None = None
    opening_hours: str | None = None


@dc.dataclass(slots=True)
class Post:
    """A parsed, rendered document.

    Everything except ``tag_slugs`` and ``image`` is fixed once the extractor
    returns; the site builder fills those two in while folding posts into the
    tag index.

    Attributes
    ----------
    title : str
        Title from front-matter.
    date : str
        ISO 8601 timestamp in the reference timezone.
    tags : tuple[str, ...]
        Tags in front-matter order.
    content : str
        Raw markdown body.
    slug : str
        Explicit ``slug`` field or the derived filename stem.
    url : str
        ``/{year}/{slug}/``.
    excerpt : str
        Explicit or auto-extracted plain-text summary.
    html : str
        Sanitized HTML body.
    source_path : Path
        File the post was parsed from.
    category : str | None
        Optional category from front-matter.
    business : tuple[Business, ...]
        Zero or more points of interest.
    tag_slugs : dict[str, str]
        Tag name to URL slug, filled by the site builder.
    image : str | None
        First image URL in ``html``, filled by the site builder.
    """

    title: str
    date: str
    tags: tuple[str, ...]
    content: str
    slug: str
    url: str
    excerpt: str
    html: str
    source_path: Path
    category: str | None = None
    business: tuple[Business, ...] = ()
    tag_slugs: dict[str, str] = dc.field(default_factory=dict)
    image: str | None = None

    @property
    def published_at(self) -> dt.datetime:
        """Return the normalized publication timestamp."""
        return dt.datetime.fromisoformat(self.date)

    @property
    def year(self) -> str:
        """Return the four-digit publication year used for URLs and archives."""
        return f"{self.published_at.year:04d}"


@dc.dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of parsing one document: exactly one field is set."""

    post: Post | None = None
    error: ParseError | None = None


@dc.dataclass(slots=True)
class TagData:
    """Aggregated view of every post carrying one tag."""

    name: str
    slug: str
    count: int = 0
    posts: list[Post] = dc.field(default_factory=list)
    description: str | None = None


@dc.dataclass(slots=True)
class Site:
    """The site model consumed by renderers, feeds and sitemaps.

    Attributes
    ----------
    name : str
        Site name.
    posts : list[Post]
        Posts sorted by date, newest first.
    tags : dict[str, TagData]
        Tag name to aggregated tag data, in first-seen order.
    posts_by_year : dict[str, list[Post]]
        Four-digit year to that year's posts, newest first.
    """

    name: str
    posts: list[Post]
    tags: dict[str, TagData]
    posts_by_year: dict[str, list[Post]]


@dc.dataclass(frozen=True, slots=True)
class PaginationData:
    """Navigation metadata for one page of an ordered collection."""

    current_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    next_page: int | None
    prev_page: int | None
    page_size: int
    total_items: int
    page_path: str


__all__ = [
    "Business",
    "ErrorKind",
    "PaginationData",
    "ParseError",
    "ParseResult",
    "Post",
    "Site",
    "TagData",
]
