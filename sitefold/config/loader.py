"""Load pipeline configuration YAML into typed dataclasses."""

from __future__ import annotations

import tomllib
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import _optional_str
from .models import (
    DEFAULT_CDN_PATH_PATTERN,
    CdnConfig,
    ConfigError,
    MarkupOptions,
    PipelineConfig,
)

DEFAULT_PAGE_SIZE = 10


def load_pipeline_config(path: Path) -> PipelineConfig:
    """Load the YAML configuration describing one generation run.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``sitefold.yaml``). Relative ``content_dir`` and ``tags_file`` values
        are resolved against the file's directory.

    Returns
    -------
    PipelineConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ConfigError
        If the top-level structure is not a mapping or a section is invalid
        (for example, CDN rewriting enabled without a base URL).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from sitefold.config import load_pipeline_config
    >>> config = load_pipeline_config(Path("sitefold.yaml"))  # doctest: +SKIP
    >>> config.markup.cdn.enabled  # doctest: +SKIP
    True
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base_dir = path.parent

    site_raw = _section(raw, "site")
    page_size = site_raw.get("page_size", DEFAULT_PAGE_SIZE)
    if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size < 1:
        msg = f"site.page_size must be a positive integer, got {page_size!r}"
        raise ConfigError(msg)

    tags_file = _optional_str(raw.get("tags_file"))
    tag_descriptions = (
        load_tag_descriptions(base_dir / tags_file) if tags_file else {}
    )

    try:
        markup = MarkupOptions.build(
            cdn=_build_cdn_config(_section(raw, "cdn")),
            nofollow_exceptions=raw.get("nofollow_exceptions") or (),
        )
    except TypeError as exc:
        msg = f"nofollow_exceptions: {exc}"
        raise ConfigError(msg) from exc

    return PipelineConfig(
        content_dir=base_dir / str(raw.get("content_dir", "content")),
        strict=bool(raw.get("strict", False)),
        site_name=_optional_str(site_raw.get("name")) or "",
        base_url=(_optional_str(site_raw.get("base_url")) or "").rstrip("/"),
        page_size=page_size,
        markup=markup,
        tag_descriptions=tag_descriptions,
    )


def load_tag_descriptions(path: Path) -> dict[str, str]:
    """Return lowercased tag name to description from a TOML file.

    A missing file yields an empty mapping; non-string values are ignored.
    """
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        try:
            loaded = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid tag description file '{path}': {exc}"
            raise ConfigError(msg) from exc
    return {
        str(key).lower(): value.strip()
        for key, value in loaded.items()
        if isinstance(value, str) and value.strip()
    }


def _section(raw: dict[str, typ.Any], key: str) -> dict[str, typ.Any]:
    """Return a nested mapping section, treating null as empty."""
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping."
        raise ConfigError(msg)
    return value


def _build_cdn_config(payload: dict[str, typ.Any]) -> CdnConfig | None:
    """Build a CdnConfig from the ``cdn`` section, or None when absent."""
    if not payload:
        return None
    enabled = bool(payload.get("enabled", False))
    base_url = (_optional_str(payload.get("base_url")) or "").rstrip("/")
    if enabled and not base_url:
        msg = "cdn.base_url is required when cdn.enabled is true."
        raise ConfigError(msg)
    pattern = _optional_str(payload.get("path_pattern")) or DEFAULT_CDN_PATH_PATTERN
    return CdnConfig(enabled=enabled, base_url=base_url, path_pattern=pattern)


__all__ = ["DEFAULT_PAGE_SIZE", "load_pipeline_config", "load_tag_descriptions"]
