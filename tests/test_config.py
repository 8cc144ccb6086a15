"""Unit tests for configuration loading.

``load_pipeline_config`` reads YAML written to ``tmp_path`` so relative paths
can be checked against the config file's directory.
"""

from __future__ import annotations

import typing as typ

import pytest

from sitefold.config import (
    ConfigError,
    MarkupOptions,
    PipelineConfig,
    load_pipeline_config,
    load_tag_descriptions,
    normalize_domain,
    normalize_nofollow_exceptions,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "sitefold.yaml"
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return path


def test_full_config_is_loaded(tmp_path: Path) -> None:
    """Every section is parsed and relative paths resolve beside the file."""
    (tmp_path / "tags.toml").write_text('Travel = "Trips"\n', encoding="utf-8")
    path = _write_config(
        tmp_path,
        """
content_dir: posts
strict: true
site:
  name: Field Notes
  base_url: https://notes.test/
  page_size: 5
cdn:
  enabled: true
  base_url: https://cdn.notes.test/
  path_pattern: "{year}/{slug}/{filename}"
nofollow_exceptions:
  - www.Friend.test
tags_file: tags.toml
        """,
    )
    config = load_pipeline_config(path)
    assert config.content_dir == tmp_path / "posts"
    assert config.strict is True
    assert config.site_name == "Field Notes"
    assert config.base_url == "https://notes.test"
    assert config.page_size == 5
    assert config.markup.cdn is not None
    assert config.markup.cdn.base_url == "https://cdn.notes.test"
    assert config.markup.nofollow_exceptions == frozenset({"friend.test"})
    assert config.tag_descriptions == {"travel": "Trips"}


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    """An empty file yields the default configuration."""
    config = load_pipeline_config(_write_config(tmp_path, ""))
    assert config.content_dir == tmp_path / "content"
    assert config.strict is False
    assert config.page_size == 10
    assert config.markup == MarkupOptions()


def test_missing_config_raises(tmp_path: Path) -> None:
    """A missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_pipeline_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("text", "match"),
    [
        ("- a\n- b", "mapping"),
        ("site:\n  page_size: 0", "page_size"),
        ("cdn:\n  enabled: true", "cdn.base_url"),
        ("cdn: yes-please", "'cdn' must be a mapping"),
        ("nofollow_exceptions: 3", "nofollow_exceptions"),
    ],
)
def test_invalid_configs_raise(tmp_path: Path, text: str, match: str) -> None:
    """Structural problems raise ConfigError with a helpful message."""
    with pytest.raises(ConfigError, match=match):
        load_pipeline_config(_write_config(tmp_path, text))


def test_tag_descriptions_missing_file(tmp_path: Path) -> None:
    """A missing tag description file is an empty mapping."""
    assert load_tag_descriptions(tmp_path / "tags.toml") == {}


def test_tag_descriptions_invalid_toml(tmp_path: Path) -> None:
    """Malformed TOML is reported as a configuration error."""
    path = tmp_path / "tags.toml"
    path.write_text("travel = \n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid tag description file"):
        load_tag_descriptions(path)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("WWW.Example.com", "example.com"), ("www.www.test", "www.test"), ("blog.test", "blog.test")],
)
def test_normalize_domain(value: str, expected: str) -> None:
    """Hostnames are lowercased and lose one leading ``www.``."""
    assert normalize_domain(value) == expected


def test_nofollow_exceptions_accept_single_string() -> None:
    """A single domain string is accepted as a one-element set."""
    assert normalize_nofollow_exceptions("www.A.test") == frozenset({"a.test"})
    assert normalize_nofollow_exceptions(None) == frozenset()


def test_pipeline_config_defaults() -> None:
    """The default configuration needs no file."""
    config = PipelineConfig()
    assert config.markup.cdn is None
    assert config.tag_descriptions == {}
