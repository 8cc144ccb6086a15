"""Common literal values used across sitefold.

The Place-type vocabulary, callout icon geometry and the regex contracts for
link rewriting live here so validators, the markup pipeline and tests import
the same values without drifting.

Examples
--------
>>> from sitefold import _constants
>>> "Restaurant" in _constants.PLACE_TYPES
True
>>> _constants.CROSS_DOCUMENT_LINK_PATTERN.match("../2024/hello.md").group(2)
'2024'
"""

from __future__ import annotations

import re

REFERENCE_TIMEZONE = "America/Los_Angeles"
DEFAULT_EXCERPT_LENGTH = 200
DEFAULT_CODE_LANGUAGE = "text"

CROSS_DOCUMENT_LINK_PATTERN = re.compile(
    r"^(\.\./)+(\d{4})/([a-zA-Z0-9_-]+?)(?:\.md)?/?(#[^#]*)?$"
)
ASSET_IMAGE_PATTERN = re.compile(r"^\.\./\.\./assets/(\d{4})/([^/]+)/(.+)$")
EXTERNAL_PREFIXES = ("http://", "https://", "//")
YOUTUBE_LINK_PATTERN = re.compile(
    r"^https?://(?:www\.)?(?:youtube\.com/watch\?v=|youtu\.be/)([\w-]+)"
)

# Place types accepted for ``business.type`` (Schema.org Place subtypes).
PLACE_TYPES: frozenset[str] = frozenset(
    {
        "Accommodation",
        "Apartment",
        "Attraction",
        "Beach",
        "BodyOfWater",
        "Bridge",
        "Building",
        "BusStation",
        "Cafe",
        "Campground",
        "CivicStructure",
        "EventVenue",
        "Ferry",
        "Garden",
        "HistoricalSite",
        "Hotel",
        "Hostel",
        "Landmark",
        "LodgingBusiness",
        "Market",
        "Monument",
        "Museum",
        "NaturalFeature",
        "Park",
        "Playground",
        "Restaurant",
        "ServiceCenter",
        "ShoppingCenter",
        "Store",
        "TouristAttraction",
        "TrainStation",
        "Viewpoint",
        "Zoo",
    }
)

# Example values quoted in validation suggestions, in a stable order.
PLACE_TYPE_EXAMPLES: tuple[str, ...] = tuple(sorted(PLACE_TYPES))[:10]

# Heroicons (20x20 solid) path data per callout type: (d, uses_evenodd).
CALLOUT_ICON_PATHS: dict[str, tuple[str, bool]] = {
    "note": (
        "M18 10a8 8 0 1 1-16 0 8 8 0 0 1 16 0Zm-7-4a1 1 0 1 1-2 0 1 1 0 0 1 2 0Z"
        "M9 9a.75.75 0 0 0 0 1.5h.253a.25.25 0 0 1 .244.304l-.459 2.066A1.75 "
        "1.75 0 0 0 10.747 15H11a.75.75 0 0 0 0-1.5h-.253a.25.25 0 0 "
        "1-.244-.304l.459-2.066A1.75 1.75 0 0 0 9.253 9H9Z",
        True,
    ),
    "tip": (
        "M10 1a6 6 0 0 0-3.815 10.631C7.237 12.5 8 13.443 8 14.456v.644a.75.75 "
        "0 0 0 .75.75h2.5a.75.75 0 0 0 .75-.75v-.644c0-1.013.762-1.957 "
        "1.815-2.825A6 6 0 0 0 10 1ZM8.863 17.414a.75.75 0 0 0-.226 1.483 "
        "9.066 9.066 0 0 0 2.726 0 .75.75 0 0 0-.226-1.483 7.553 7.553 0 0 "
        "1-2.274 0Z",
        False,
    ),
    "important": (
        "M18 10a8 8 0 1 1-16 0 8 8 0 0 1 16 0Zm-8-5a.75.75 0 0 1 .75.75v4.5a.75"
        ".75 0 0 1-1.5 0v-4.5A.75.75 0 0 1 10 5Zm0 10a1 1 0 1 0 0-2 1 1 0 0 0 "
        "0 2Z",
        True,
    ),
    "warning": (
        "M8.485 2.495c.673-1.167 2.357-1.167 3.03 0l6.28 10.875c.673 "
        "1.167-.17 2.625-1.516 2.625H3.72c-1.347 0-2.189-1.458-1.515-2.625L8.485"
        " 2.495ZM10 5a.75.75 0 0 1 .75.75v3.5a.75.75 0 0 1-1.5 0v-3.5A.75.75 0 "
        "0 1 10 5Zm0 9a1 1 0 1 0 0-2 1 1 0 0 0 0 2Z",
        True,
    ),
    "caution": (
        "M18 10a8 8 0 1 1-16 0 8 8 0 0 1 16 0ZM8.28 7.22a.75.75 0 0 0-1.06 "
        "1.06L8.94 10l-1.72 1.72a.75.75 0 1 0 1.06 1.06L10 11.06l1.72 1.72a.75"
        ".75 0 1 0 1.06-1.06L11.06 10l1.72-1.72a.75.75 0 0 0-1.06-1.06L10 8.94 "
        "8.28 7.22Z",
        True,
    ),
}

CALLOUT_TYPES: tuple[str, ...] = tuple(CALLOUT_ICON_PATHS)
