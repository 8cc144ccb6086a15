"""Utility helpers shared by the configuration loader and link policy."""

from __future__ import annotations

import collections.abc as cabc


def normalize_domain(value: str) -> str:
    """Lowercase a hostname and strip one leading ``www.``."""
    domain = value.strip().lower()
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def normalize_nofollow_exceptions(value: object) -> frozenset[str]:
    """Normalize a domain or sequence of domains into a lookup set."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items: cabc.Iterable[object] = [value]
    elif isinstance(value, cabc.Iterable):
        items = value
    else:
        msg = f"Expected a list of domains, got {type(value).__name__}"
        raise TypeError(msg)
    normalized = (normalize_domain(str(item)) for item in items)
    return frozenset(domain for domain in normalized if domain)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = ["_optional_str", "normalize_domain", "normalize_nofollow_exceptions"]
