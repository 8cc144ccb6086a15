"""Parse a content tree into posts, enforcing the site's error policy.

:func:`parse_all` finds every markdown file under a content directory,
rejects files that would publish to the same ``/{year}/{slug}/`` URL, parses
the rest concurrently and returns the surviving posts newest first.

Validation errors are always fatal. Other per-file errors are fatal only in
strict mode; otherwise the file is left out and a warning is logged.

Example
-------
>>> from pathlib import Path
>>> from sitefold.aggregator import parse_all
>>> posts = parse_all(Path("content"), strict=True)  # doctest: +SKIP
>>> posts[0].url  # doctest: +SKIP
'/2025/latest-post/'
"""

from __future__ import annotations

import collections
import logging
import re
import typing as typ
from concurrent.futures import ThreadPoolExecutor

from .frontmatter import document_stem, parse_document
from .markup import MarkupTransformer
from .models import ErrorKind, ParseError, ParseResult, Post

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config import MarkupOptions

logger = logging.getLogger(__name__)

YEAR_DIR_PATTERN = re.compile(r"^\d{4}$")
SUMMARY_LIMIT = 5
CONFLICT_SUGGESTION = (
    "Keep only one file for this slug: either 'slug.md' or 'slug/README.md'"
)
URL_CONFLICT_SUGGESTION = (
    "Change the 'slug' field in all but one of these posts so each URL is unique"
)


class ContentValidationError(RuntimeError):
    """Raised when a content tree cannot be published.

    Attributes
    ----------
    errors : tuple[ParseError, ...]
        Every error collected during the run, conflicts first.
    validation_count : int
        Number of ``validation`` errors.
    strict_count : int
        Number of other errors that strict mode promoted to fatal.
    """

    def __init__(
        self, errors: cabc.Sequence[ParseError], *, strict: bool = False
    ) -> None:
        self.errors = tuple(errors)
        self.validation_count = sum(
            1 for error in self.errors if error.kind is ErrorKind.VALIDATION
        )
        self.strict_count = (
            len(self.errors) - self.validation_count if strict else 0
        )
        reasons: list[str] = []
        if self.validation_count:
            reasons.append(f"{self.validation_count} validation error(s)")
        if self.strict_count:
            reasons.append(f"{self.strict_count} parse error(s) in strict mode")
        headline = "Content validation failed: " + " and ".join(reasons)
        super().__init__(f"{headline}\n{format_error_summary(self.errors)}")


def find_markdown_files(content_dir: Path) -> list[Path]:
    """Return every ``*.md`` file under ``content_dir`` in sorted order.

    Raises
    ------
    FileNotFoundError
        If ``content_dir`` is not a directory.
    """
    if not content_dir.is_dir():
        msg = f"Content directory '{content_dir}' not found."
        raise FileNotFoundError(msg)
    return sorted(path for path in content_dir.rglob("*.md") if path.is_file())


def year_directory(path: Path, root: Path | None = None) -> str | None:
    """Return the nearest ancestor below ``root`` named as a four-digit year."""
    for parent in path.parents:
        if root is not None and parent == root:
            break
        if YEAR_DIR_PATTERN.match(parent.name):
            return parent.name
    return None


def detect_slug_conflicts(
    files: cabc.Iterable[Path], root: Path | None = None
) -> list[ParseError]:
    """Report files that resolve to the same year directory and slug.

    ``2025/post.md`` and ``2025/post/README.md`` both claim ``/2025/post/``;
    each such group yields one ``validation`` error naming every path.
    """
    groups: dict[tuple[str, str], list[Path]] = collections.defaultdict(list)
    for path in files:
        year = year_directory(path, root)
        if year is not None:
            groups[(year, document_stem(path))].append(path)

    return [
        _conflict_error(paths, f"/{year}/{slug}/", CONFLICT_SUGGESTION)
        for (year, slug), paths in groups.items()
        if len(paths) > 1
    ]


def detect_url_conflicts(
    posts: cabc.Iterable[Post], already_reported: cabc.Collection[ParseError] = ()
) -> list[ParseError]:
    """Report parsed posts that share a URL through an explicit ``slug`` field."""
    reported_paths = {
        path for error in already_reported for path in error.file.split(" & ")
    }
    groups: dict[str, list[Path]] = collections.defaultdict(list)
    for post in posts:
        groups[post.url].append(post.source_path)

    errors: list[ParseError] = []
    for url, paths in groups.items():
        if len(paths) < 2 or {str(path) for path in paths} <= reported_paths:
            continue
        errors.append(_conflict_error(paths, url, URL_CONFLICT_SUGGESTION))
    return errors


def _conflict_error(
    paths: cabc.Sequence[Path], url: str, suggestion: str
) -> ParseError:
    return ParseError(
        file=" & ".join(str(path) for path in paths),
        kind=ErrorKind.VALIDATION,
        message=f"Slug conflict: {len(paths)} files publish to {url}",
        suggestion=suggestion,
    )


def parse_files(
    files: cabc.Sequence[Path], transformer: MarkupTransformer
) -> list[ParseResult]:
    """Parse every file concurrently and return results in input order."""
    if not files:
        return []
    with ThreadPoolExecutor(max_workers=len(files)) as executor:
        return list(executor.map(lambda path: parse_document(path, transformer), files))


def format_error_summary(
    errors: cabc.Iterable[ParseError], limit: int = SUMMARY_LIMIT
) -> str:
    """Group errors by kind and render a human-readable report.

    At most ``limit`` errors are listed per kind; the remainder is counted.
    """
    grouped: dict[ErrorKind, list[ParseError]] = collections.defaultdict(list)
    for error in errors:
        grouped[error.kind].append(error)

    lines: list[str] = []
    for kind in ErrorKind:
        entries = grouped.get(kind)
        if not entries:
            continue
        lines.append(f"{kind.value} ({len(entries)}):")
        for error in entries[:limit]:
            lines.append(f"  {error.file}: {error.message}")
            if error.suggestion:
                lines.append(f"    suggestion: {error.suggestion}")
        if len(entries) > limit:
            lines.append(f"  ... and {len(entries) - limit} more")
    return "\n".join(lines)


def sort_posts(posts: cabc.Iterable[Post]) -> list[Post]:
    """Sort posts newest first; equal timestamps keep file order."""
    return sorted(posts, key=lambda post: post.published_at, reverse=True)


def parse_all(
    content_dir: Path,
    strict: bool = False,  # noqa: FBT001, FBT002 - mirrors the public contract
    options: MarkupOptions | None = None,
    *,
    transformer: MarkupTransformer | None = None,
) -> list[Post]:
    """Parse every markdown file under ``content_dir`` into sorted posts.

    Parameters
    ----------
    content_dir : Path
        Root of the content tree; searched recursively.
    strict : bool, optional
        Treat ``yaml``, ``missing_field``, ``file_not_found`` and ``unknown``
        errors as fatal instead of skipping the affected files.
    options : MarkupOptions, optional
        CDN rewriting and nofollow exceptions for the markup transformer.
    transformer : MarkupTransformer, optional
        Pre-built transformer; overrides ``options`` when given.

    Returns
    -------
    list[Post]
        Successfully parsed posts, newest first.

    Raises
    ------
    FileNotFoundError
        If ``content_dir`` does not exist.
    ContentValidationError
        If any validation error (including slug conflicts) exists, or if
        ``strict`` is set and any other error exists.
    """
    files = find_markdown_files(content_dir)
    logger.info("Found %d markdown files in %s", len(files), content_dir)

    conflicts = detect_slug_conflicts(files, content_dir)
    results = parse_files(files, transformer or MarkupTransformer(options))

    posts = [result.post for result in results if result.post is not None]
    errors = [*conflicts]
    errors.extend(result.error for result in results if result.error is not None)
    errors.extend(detect_url_conflicts(posts, conflicts))

    if errors:
        has_validation = any(error.kind is ErrorKind.VALIDATION for error in errors)
        if has_validation or strict:
            failure = ContentValidationError(errors, strict=strict)
            logger.error("%s", failure)
            raise failure
        for error in errors:
            logger.warning("Skipping %s (%s): %s", error.file, error.kind, error.message)

    return sort_posts(posts)


__all__ = [
    "ContentValidationError",
    "detect_slug_conflicts",
    "detect_url_conflicts",
    "find_markdown_files",
    "format_error_summary",
    "parse_all",
    "parse_files",
    "sort_posts",
    "year_directory",
]
