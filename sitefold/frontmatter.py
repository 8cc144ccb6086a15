"""Split documents into front-matter and body and build posts from them.

:func:`parse_document` is the per-file entry point used by the aggregator. It
never raises for content problems; every failure is returned as a categorized
:class:`~sitefold.models.ParseError` inside a
:class:`~sitefold.models.ParseResult`.

Example
-------
>>> from pathlib import Path
>>> from sitefold.frontmatter import parse_document
>>> result = parse_document(Path("content/2024/hello.md"))  # doctest: +SKIP
>>> result.post.url  # doctest: +SKIP
'/2024/hello/'
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import re
import typing as typ
from zoneinfo import ZoneInfo

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import DEFAULT_EXCERPT_LENGTH, REFERENCE_TIMEZONE
from .markup import MarkupTransformer
from .models import Business, ErrorKind, ParseError, ParseResult, Post
from .validators import (
    as_business_entries,
    check_deprecated_location_field,
    validate_business_location,
    validate_tags,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

FRONTMATTER_PATTERN = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?P<meta>.*?)^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.MULTILINE | re.DOTALL,
)
INDEX_FILENAMES = frozenset({"readme.md", "index.md"})

EXCERPT_HEADING = re.compile(r"^#.*$", re.MULTILINE)
EXCERPT_CODE_BLOCK = re.compile(r"```.*?```", re.DOTALL)
EXCERPT_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
EXCERPT_EMPHASIS = re.compile(r"[*_]{1,2}([^*_]+)[*_]{1,2}")
EXCERPT_NEWLINES = re.compile(r"\n+")

YAML_SUGGESTION = (
    "Check the frontmatter syntax; quote titles or descriptions that contain "
    "colons, e.g. title: \"Seattle: A Guide\""
)

_OPTIONAL_BUSINESS_FIELDS = {
    "cuisine": "cuisine",
    "priceRange": "price_range",
    "telephone": "telephone",
    "url": "url",
    "openingHours": "opening_hours",
}


class FrontmatterError(ValueError):
    """Raised when a front-matter block is present but cannot be loaded."""


def split_frontmatter(text: str) -> tuple[dict[str, typ.Any], str]:
    """Return the front-matter mapping and the remaining body of ``text``.

    Documents without a leading ``---`` block yield an empty mapping and the
    whole text as body.

    Raises
    ------
    FrontmatterError
        If the block is not valid YAML or does not contain a mapping.
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text.lstrip("\ufeff")

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(match.group("meta"))
    except YAMLError as exc:
        raise FrontmatterError(str(exc)) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = "Frontmatter must be a mapping of key: value pairs"
        raise FrontmatterError(msg)
    return dict(loaded), text[match.end() :]


def normalize_date(value: object, tz_name: str = REFERENCE_TIMEZONE) -> dt.datetime:
    """Return ``value`` as an aware datetime in the reference timezone.

    Dates without a time are midnight in the reference timezone; naive
    datetimes are taken as UTC; aware datetimes are converted.

    Raises
    ------
    ValueError
        If ``value`` is not a date, datetime or ISO 8601 string.
    """
    zone = ZoneInfo(tz_name)
    match value:
        case dt.datetime():
            parsed = value
        case dt.date():
            return dt.datetime.combine(value, dt.time(), tzinfo=zone)
        case str() as text if text.strip():
            sanitized = text.strip()
            if len(sanitized) == 10:
                return dt.datetime.combine(
                    dt.date.fromisoformat(sanitized), dt.time(), tzinfo=zone
                )
            parsed = dt.datetime.fromisoformat(sanitized)
        case _:
            msg = f"Unrecognised date value {value!r}"
            raise ValueError(msg)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(zone)


def extract_excerpt(content: str, max_length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """Derive a plain-text summary from a markdown body.

    Headings and fenced code are dropped, links keep their text and emphasis
    markers are removed. Text longer than ``max_length`` is cut at the last
    space within the limit and suffixed with ``...``.
    """
    text = EXCERPT_HEADING.sub("", content)
    text = EXCERPT_CODE_BLOCK.sub("", text)
    text = EXCERPT_LINK.sub(r"\1", text)
    text = EXCERPT_EMPHASIS.sub(r"\1", text)
    text = EXCERPT_NEWLINES.sub(" ", text).strip()
    if len(text) <= max_length:
        return text
    truncated = text[:max_length]
    cut = truncated.rfind(" ")
    if cut > 0:
        truncated = truncated[:cut]
    return f"{truncated}..."


def document_stem(path: Path) -> str:
    """Return the slug a file contributes: its stem, or its folder for READMEs."""
    if path.name.lower() in INDEX_FILENAMES:
        return path.parent.name
    return path.stem


def normalize_business(business: object) -> tuple[Business, ...]:
    """Convert validated ``business`` front-matter into Business records."""
    if not business:
        return ()
    records: list[Business] = []
    for entry in as_business_entries(business):
        payload = typ.cast("cabc.Mapping[str, typ.Any]", entry)
        extras = {
            attr: _optional_text(payload.get(key))
            for key, attr in _OPTIONAL_BUSINESS_FIELDS.items()
        }
        records.append(
            Business(
                type=str(payload["type"]),
                name=str(payload["name"]),
                lat=float(payload["lat"]),
                lng=float(payload["lng"]),
                address=str(payload.get("address") or ""),
                **extras,
            )
        )
    return tuple(records)


def _optional_text(value: object) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, list | tuple):
        return ", ".join(str(item) for item in value)
    return str(value)


def _normalize_tags(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, cabc.Sequence):
        return tuple(str(tag) for tag in value)
    msg = f"'tags' must be a list of strings, got {type(value).__name__}"
    raise TypeError(msg)


def _build_post(
    path: Path, data: dict[str, typ.Any], body: str, transformer: MarkupTransformer
) -> Post:
    published = normalize_date(data["date"])
    slug = str(data.get("slug") or document_stem(path)).strip()
    excerpt = data.get("excerpt")
    category = data.get("category")
    return Post(
        title=str(data["title"]),
        date=published.isoformat(),
        tags=_normalize_tags(data.get("tags")),
        content=body,
        slug=slug,
        url=f"/{published.year:04d}/{slug}/",
        excerpt=str(excerpt) if excerpt else extract_excerpt(body),
        html=transformer.render(body),
        source_path=path,
        category=str(category) if category else None,
        business=normalize_business(data.get("business")),
    )


def parse_document(
    path: Path, transformer: MarkupTransformer | None = None
) -> ParseResult:
    """Parse one markdown file into a post or a categorized error.

    Parameters
    ----------
    path : Path
        Markdown file to read.
    transformer : MarkupTransformer, optional
        Renderer for the body; a default transformer is created when omitted.

    Returns
    -------
    ParseResult
        ``post`` on success, otherwise ``error`` with kind ``file_not_found``,
        ``yaml``, ``missing_field``, ``validation`` or ``unknown``.
    """
    file = str(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return ParseResult(
            error=ParseError(
                file=file,
                kind=ErrorKind.FILE_NOT_FOUND,
                message=f"File not found or couldn't be read: {exc}",
            )
        )

    try:
        data, body = split_frontmatter(text)
    except FrontmatterError as exc:
        return ParseResult(
            error=ParseError(
                file=file,
                kind=ErrorKind.YAML,
                message=f"YAML parsing error: {exc}",
                suggestion=YAML_SUGGESTION,
            )
        )

    missing = [key for key in ("title", "date") if not data.get(key)]
    if missing:
        names = " and ".join(missing)
        return ParseResult(
            error=ParseError(
                file=file,
                kind=ErrorKind.MISSING_FIELD,
                message=f"Missing required field(s): {names}",
                suggestion=f"Add {names} to the frontmatter",
            )
        )

    violation = (
        check_deprecated_location_field(data, file)
        or validate_business_location(data.get("business"), file)
        or validate_tags(data.get("tags"), file)
    )
    if violation:
        return ParseResult(error=violation)

    try:
        post = _build_post(path, data, body, transformer or MarkupTransformer())
    except Exception as exc:  # noqa: BLE001 - reported as an "unknown" parse error
        return ParseResult(
            error=ParseError(
                file=file,
                kind=ErrorKind.UNKNOWN,
                message=f"{type(exc).__name__}: {exc}",
            )
        )
    return ParseResult(post=post)


__all__ = [
    "FrontmatterError",
    "document_stem",
    "extract_excerpt",
    "normalize_business",
    "normalize_date",
    "parse_document",
    "split_frontmatter",
]
