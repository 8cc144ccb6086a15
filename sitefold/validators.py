"""Front-matter rules for points of interest, tags and deprecated keys.

Each validator is a pure function over the raw front-matter values. It
returns the first :class:`~sitefold.models.ParseError` it finds (kind
``validation``) or ``None`` when the value is acceptable; nothing is raised.

Example
-------
>>> from sitefold.validators import validate_tags
>>> validate_tags(["travel", "new york"], "post.md").message
'Tags must not contain spaces. Found: "new york"'
"""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ

from ._constants import PLACE_TYPE_EXAMPLES, PLACE_TYPES
from .models import ErrorKind, ParseError

WHITESPACE_PATTERN = re.compile(r"\s")


def _validation_error(file: str, message: str, suggestion: str) -> ParseError:
    return ParseError(
        file=file, kind=ErrorKind.VALIDATION, message=message, suggestion=suggestion
    )


def as_business_entries(business: object) -> list[object]:
    """Return ``business`` as a list whether one entry or many were given."""
    if isinstance(business, cabc.Sequence) and not isinstance(business, str):
        return list(business)
    return [business]


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def validate_business_location(business: object, file: str) -> ParseError | None:
    """Check every point-of-interest entry and return the first violation.

    Parameters
    ----------
    business : object
        The raw ``business`` front-matter value, a mapping or a list of them.
    file : str
        Path reported in the error.

    Returns
    -------
    ParseError | None
        The first problem found, checked per entry in this order: missing
        ``type``, unknown ``type``, missing ``name``, legacy
        ``latitude``/``longitude`` keys, missing or non-numeric ``lat``/``lng``.
    """
    if not business:
        return None

    entries = as_business_entries(business)
    for index, raw_entry in enumerate(entries, start=1):
        entry: cabc.Mapping[str, typ.Any] = (
            raw_entry if isinstance(raw_entry, cabc.Mapping) else {}
        )
        where = f" (location {index})" if len(entries) > 1 else ""

        place_type = entry.get("type")
        if not place_type:
            return _validation_error(
                file,
                f"Missing required field 'type' in business{where}",
                "Add 'type: Restaurant' (or Market, Park, Hotel, Museum, Cafe, "
                "Zoo, etc.) to frontmatter",
            )
        if place_type not in PLACE_TYPES:
            examples = ", ".join(PLACE_TYPE_EXAMPLES)
            return _validation_error(
                file,
                f"Invalid business type '{place_type}' in business{where}",
                f"Use a valid Schema.org Place type: {examples}, etc.",
            )
        if not entry.get("name"):
            return _validation_error(
                file,
                f"Missing required field 'name' in business{where}",
                "Add 'name: \"Full Business Name\"' to frontmatter",
            )
        if "latitude" in entry or "longitude" in entry:
            return _validation_error(
                file,
                "Use 'lat' and 'lng' instead of 'latitude' and 'longitude' "
                f"in business{where}",
                "Replace 'latitude:' with 'lat:' and 'longitude:' with 'lng:' "
                "in frontmatter",
            )
        if not (_is_number(entry.get("lat")) and _is_number(entry.get("lng"))):
            return _validation_error(
                file,
                f"Missing required coordinates in business{where}",
                "Add 'lat: 47.6062' and 'lng: -122.3321' with numeric "
                "coordinates to frontmatter (REQUIRED)",
            )
    return None


def validate_tags(tags: object, file: str) -> ParseError | None:
    """Flag tags containing whitespace, naming every offending tag in one error.

    A bare string is checked as a single tag. Values that are neither a
    string nor a sequence are rejected outright.
    """
    if tags is None:
        return None
    if isinstance(tags, str):
        tags = [tags]
    if not isinstance(tags, cabc.Sequence):
        return _validation_error(
            file,
            f"Tags must be a list of strings, got {type(tags).__name__}",
            "Write tags as a list. Example: tags: [travel, food]",
        )
    offending = [str(tag) for tag in tags if WHITESPACE_PATTERN.search(str(tag))]
    if not offending:
        return None
    found = ", ".join(f'"{tag}"' for tag in offending)
    return _validation_error(
        file,
        f"Tags must not contain spaces. Found: {found}",
        'Use hyphens instead of spaces. Example: "new-york-city" instead of '
        '"new york city"',
    )


def check_deprecated_location_field(
    data: cabc.Mapping[str, typ.Any], file: str
) -> ParseError | None:
    """Reject the legacy top-level ``location`` key in favour of ``business``."""
    if "location" not in data:
        return None
    return _validation_error(
        file,
        "Use 'business:' instead of deprecated 'location:' field",
        "Replace 'location:' with 'business:' in frontmatter (business "
        "requires type, name, lat, lng)",
    )


__all__ = [
    "as_business_entries",
    "check_deprecated_location_field",
    "validate_business_location",
    "validate_tags",
]
