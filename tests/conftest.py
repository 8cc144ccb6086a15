"""Shared fixtures for building throwaway content trees."""

from __future__ import annotations

import collections.abc as cabc
import textwrap
import typing as typ

import pytest

if typ.TYPE_CHECKING:
    from pathlib import Path

WritePost = cabc.Callable[..., "Path"]


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Return an empty ``content`` directory under ``tmp_path``."""
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def write_post(content_dir: Path) -> WritePost:
    """Return a helper that writes a markdown file below ``content_dir``.

    ``frontmatter`` is dedented and wrapped in ``---`` fences unless ``None``
    is passed, in which case only ``body`` is written.
    """

    def _write(
        relative: str,
        frontmatter: str | None = 'title: "Post"\ndate: 2024-05-01',
        body: str = "Body text.\n",
    ) -> Path:
        path = content_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        text = body
        if frontmatter is not None:
            text = f"---\n{textwrap.dedent(frontmatter).strip()}\n---\n{body}"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
