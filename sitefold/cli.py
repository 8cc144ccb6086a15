"""Cyclopts CLI entrypoint for checking and summarising a content tree.

The ``sitefold`` console script parses a directory of markdown posts with the
same pipeline a site build uses. ``sitefold validate`` runs in strict mode and
exits non-zero when any file would break the build; ``sitefold summary``
prints how many posts, tags and year archives the tree produces.

Examples
--------
Validate the default ``content`` directory:

>>> from sitefold.cli import main
>>> main()  # doctest: +SKIP

Summarise a tree described by a configuration file:

>>> from sitefold.cli import app
>>> app(["summary", "--config", "sitefold.yaml"])  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .aggregator import ContentValidationError, parse_all
from .config import PipelineConfig, load_pipeline_config
from .site import build_site

app = App(name="sitefold", config=cyclopts.config.Env("SITEFOLD_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the path as given."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _resolve_config(
    config: Path | None, content_dir: Path | None, *, verbose: bool
) -> PipelineConfig:
    if verbose:
        logging.basicConfig(
            level=logging.INFO, format="%(levelname)s %(name)s: %(message)s"
        )
    settings = load_pipeline_config(config) if config else PipelineConfig()
    if content_dir is not None:
        settings = dc.replace(settings, content_dir=content_dir)
    return settings


@app.command(help="Parse every post strictly and report problems.")
def validate(
    *,
    content_dir: typ.Annotated[
        Path | None,
        Parameter(help="Content directory to scan", env_var="SITEFOLD_CONTENT_DIR"),
    ] = None,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to sitefold.yaml", env_var="SITEFOLD_CONFIG"),
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log pipeline progress")] = False,
) -> None:
    """Validate a content tree in strict mode.

    Parameters
    ----------
    content_dir : Path or None, optional
        Directory to scan; overrides the configured ``content_dir``.
    config : Path or None, optional
        Optional YAML configuration file.
    verbose : bool, optional
        Configure logging at INFO level before parsing.

    Raises
    ------
    SystemExit
        With status 1 when the tree has any error.
    """
    settings = _resolve_config(config, content_dir, verbose=verbose)
    target = _format_path(settings.content_dir)
    try:
        posts = parse_all(settings.content_dir, True, settings.markup)  # noqa: FBT003
    except ContentValidationError as exc:
        print(f"{target}: {exc}")
        raise SystemExit(1) from exc
    except FileNotFoundError as exc:
        print(str(exc))
        raise SystemExit(1) from exc
    print(f"{target}: {len(posts)} post(s) OK")


@app.command(help="Print post, tag and year counts for a content tree.")
def summary(
    *,
    content_dir: typ.Annotated[
        Path | None,
        Parameter(help="Content directory to scan", env_var="SITEFOLD_CONTENT_DIR"),
    ] = None,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to sitefold.yaml", env_var="SITEFOLD_CONFIG"),
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log pipeline progress")] = False,
) -> None:
    """Build the site model and print its shape.

    Uses the configured strictness, so non-validation errors are skipped
    unless ``strict`` is set in the configuration.
    """
    settings = _resolve_config(config, content_dir, verbose=verbose)
    posts = parse_all(settings.content_dir, settings.strict, settings.markup)
    site = build_site(
        posts,
        settings.tag_descriptions,
        name=settings.site_name,
        base_url=settings.base_url,
    )
    print(f"posts: {len(site.posts)}")
    print(f"tags: {len(site.tags)}")
    print(f"years: {', '.join(site.posts_by_year) or '-'}")


def main() -> None:
    """Invoke the Cyclopts application behind the ``sitefold`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
