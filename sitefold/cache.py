"""Content hashes for incremental builds.

The pipeline itself always parses every file; this module only records what
was seen so callers can decide which outputs to rebuild. The cache is a JSON
document encoded with ``msgspec``.
"""

from __future__ import annotations

import hashlib
import logging
import typing as typ

import msgspec
import msgspec.json as msgspec_json

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

logger = logging.getLogger(__name__)

CACHE_VERSION = "1"


class CacheEntry(msgspec.Struct):
    """Hash and modification time recorded for one source file."""

    hash: str
    mtime: float


class BuildCache(msgspec.Struct):
    """Every source file seen by the previous build."""

    version: str = CACHE_VERSION
    files: dict[str, CacheEntry] = msgspec.field(default_factory=dict)


class ChangeSet(msgspec.Struct):
    """Files that changed or disappeared since the cached build."""

    changed: list[str] = msgspec.field(default_factory=list)
    deleted: list[str] = msgspec.field(default_factory=list)
    full_rebuild: bool = False


def hash_file(path: Path) -> str:
    """Return the SHA-256 hex digest of ``path``, or ``""`` if unreadable."""
    try:
        return hashlib.sha256(path.read_bytes()).hexdigest()
    except OSError:
        return ""


def load_cache(path: Path) -> BuildCache:
    """Load a cache file, starting fresh when it is missing or stale."""
    if not path.exists():
        return BuildCache()
    try:
        cache = msgspec_json.decode(path.read_bytes(), type=BuildCache)
    except (OSError, msgspec.DecodeError) as exc:
        logger.warning("Ignoring unreadable build cache %s: %s", path, exc)
        return BuildCache()
    if cache.version != CACHE_VERSION:
        logger.info(
            "Build cache version %s does not match %s; rebuilding",
            cache.version,
            CACHE_VERSION,
        )
        return BuildCache()
    return cache


def save_cache(path: Path, cache: BuildCache) -> None:
    """Write ``cache`` to ``path`` as formatted JSON."""
    path.write_bytes(msgspec_json.format(msgspec_json.encode(cache), indent=2))


def detect_changes(files: cabc.Iterable[Path], cache: BuildCache) -> ChangeSet:
    """Compare ``files`` against ``cache``.

    A file is changed when its hash differs from the cached one or it was not
    cached. Cached markdown files that no longer exist are deleted, and any
    deletion forces a full rebuild since tag and year pages must drop them.
    """
    current = {str(path): path for path in files}
    changes = ChangeSet()
    for key, path in current.items():
        entry = cache.files.get(key)
        if entry is None or entry.hash != hash_file(path):
            changes.changed.append(key)
    changes.deleted = sorted(
        key for key in cache.files if key.endswith(".md") and key not in current
    )
    changes.full_rebuild = bool(changes.deleted)
    return changes


def update_cache(files: cabc.Iterable[Path], cache: BuildCache) -> BuildCache:
    """Return a new cache recording the current hash of every file."""
    entries: dict[str, CacheEntry] = {}
    for path in files:
        try:
            mtime = path.stat().st_mtime
        except OSError:
            continue
        entries[str(path)] = CacheEntry(hash=hash_file(path), mtime=mtime)
    return BuildCache(version=cache.version, files=entries)


__all__ = [
    "BuildCache",
    "CacheEntry",
    "ChangeSet",
    "detect_changes",
    "hash_file",
    "load_cache",
    "save_cache",
    "update_cache",
]
