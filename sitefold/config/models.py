"""Typed dataclasses describing pipeline configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from .helpers import normalize_nofollow_exceptions

DEFAULT_CDN_PATH_PATTERN = "{year}/{slug}/{filename}"


class ConfigError(ValueError):
    """Raised when the pipeline configuration is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class CdnConfig:
    """Rewrite rule for relative asset images.

    ``path_pattern`` may contain ``{year}``, ``{slug}`` and ``{filename}``
    placeholders; the substituted path is appended to ``base_url``.
    """

    enabled: bool = False
    base_url: str = ""
    path_pattern: str = DEFAULT_CDN_PATH_PATTERN


@dc.dataclass(frozen=True, slots=True)
class MarkupOptions:
    """Read-only inputs threaded into the markup transformer for one run."""

    cdn: CdnConfig | None = None
    nofollow_exceptions: frozenset[str] = frozenset()

    @classmethod
    def build(
        cls, *, cdn: CdnConfig | None = None, nofollow_exceptions: object = ()
    ) -> MarkupOptions:
        """Return options with ``nofollow_exceptions`` normalized."""
        return cls(
            cdn=cdn,
            nofollow_exceptions=normalize_nofollow_exceptions(nofollow_exceptions),
        )


@dc.dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Everything one generation run needs, resolved from YAML or defaults."""

    content_dir: Path = Path("content")
    strict: bool = False
    site_name: str = ""
    base_url: str = ""
    page_size: int = 10
    markup: MarkupOptions = dc.field(default_factory=MarkupOptions)
    tag_descriptions: dict[str, str] = dc.field(default_factory=dict)


__all__ = [
    "DEFAULT_CDN_PATH_PATTERN",
    "CdnConfig",
    "ConfigError",
    "MarkupOptions",
    "PipelineConfig",
]
