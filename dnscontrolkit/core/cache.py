"""
Install directory cache for dnscontrolkit.

The cache stores a whole install directory under a deterministic key derived
from (tool, version, os, arch), so a later run on the same kind of host can
restore the directory instead of downloading the release again.

The cache is an optimization only. ToolCache routes every backend call
through best_effort(), so a broken or unavailable backend degrades to a
cache miss on restore and to a no-op on save.

Usage:
    from dnscontrolkit.core.cache import ToolCache, LocalCacheBackend, cache_key

    cache = ToolCache(LocalCacheBackend(Path("~/.dnscontrolkit/cache").expanduser()))
    key = cache_key("dnscontrol", "4.2.0", platform_info)
    if not cache.restore(install_dir, key):
        install(install_dir)
        cache.save(install_dir, key)
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol, Sequence

from dnscontrolkit.core.exceptions import CacheError
from dnscontrolkit.core.filesystem import copy_tree, safe_rmtree
from dnscontrolkit.core.platform import PlatformInfo
from dnscontrolkit.core.resilience import best_effort

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"
MANIFEST_VERSION = 1


def cache_key(tool: str, version: str, platform: PlatformInfo) -> str:
    """
    Build the cache key for an install.

    Example:
        >>> cache_key("dnscontrol", "3.16.0", PlatformInfo("linux", "x64"))
        'dnscontrol-cache-3.16.0-linux-x64'
    """
    return f"{tool}-cache-{version}-{platform.os}-{platform.arch}"


class CacheBackend(Protocol):
    """Storage for cached directories."""

    def restore(self, paths: Sequence[Path], key: str) -> Optional[str]:
        """Restore paths saved under key. Returns the matched key, or None on miss."""
        ...

    def save(self, paths: Sequence[Path], key: str) -> None:
        """Save paths under key."""
        ...

    def delete(self, key: str) -> None:
        """Drop the entry stored under key, if any."""
        ...


class NullCacheBackend:
    """Backend used when caching is disabled: always misses, never stores."""

    def restore(self, paths: Sequence[Path], key: str) -> Optional[str]:
        return None

    def save(self, paths: Sequence[Path], key: str) -> None:
        return None

    def delete(self, key: str) -> None:
        return None


class LocalCacheBackend:
    """
    Cache backend storing entries in a local directory.

    Layout:
        {cache_root}/{key}/manifest.json
        {cache_root}/{key}/0/...   copy of paths[0]
        {cache_root}/{key}/1/...   copy of paths[1]

    Entries are immutable once written: saving a key that already exists is
    a no-op, matching the semantics of hosted CI caches.
    """

    def __init__(self, cache_root: Path):
        self.cache_root = Path(cache_root)

    def entry_dir(self, key: str) -> Path:
        safe_key = key.replace("/", "-").replace("\\", "-").replace(":", "-")
        return self.cache_root / safe_key

    def restore(self, paths: Sequence[Path], key: str) -> Optional[str]:
        entry = self.entry_dir(key)
        manifest = self._read_manifest(entry)
        if manifest is None:
            logger.debug(f"Cache entry not found: {key}")
            return None

        saved_paths = manifest.get("paths", [])
        requested = [str(Path(p)) for p in paths]
        if saved_paths != requested:
            logger.debug(
                f"Cache entry {key} was saved for {saved_paths}, not {requested}"
            )
            return None

        for index, path in enumerate(paths):
            copy_tree(entry / str(index), Path(path))

        logger.debug(f"Restored cache entry {key} from {entry}")
        return key

    def save(self, paths: Sequence[Path], key: str) -> None:
        entry = self.entry_dir(key)
        if entry.exists():
            logger.debug(f"Cache entry already exists, not overwriting: {key}")
            return

        for path in paths:
            if not Path(path).exists():
                raise CacheError(f"Path to cache does not exist: {path}")

        self.cache_root.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=".staging-", dir=self.cache_root))

        try:
            for index, path in enumerate(paths):
                copy_tree(Path(path), staging / str(index))

            manifest = {
                "version": MANIFEST_VERSION,
                "key": key,
                "paths": [str(Path(p)) for p in paths],
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            (staging / MANIFEST_NAME).write_text(
                json.dumps(manifest, indent=2), encoding="utf-8"
            )

            os.replace(staging, entry)
        except OSError as e:
            raise CacheError(f"Failed to save cache entry {key}: {e}") from e
        finally:
            if staging.exists():
                safe_rmtree(staging)

        logger.debug(f"Saved cache entry {key} to {entry}")

    def delete(self, key: str) -> None:
        entry = self.entry_dir(key)
        safe_rmtree(entry, require_prefix=self.cache_root)
        logger.debug(f"Deleted cache entry {key}")

    def _read_manifest(self, entry: Path) -> Optional[dict]:
        manifest_path = entry / MANIFEST_NAME
        if not manifest_path.is_file():
            return None

        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            raise CacheError(f"Corrupt cache manifest {manifest_path}: {e}") from e

        if not isinstance(data, dict) or data.get("version") != MANIFEST_VERSION:
            raise CacheError(f"Unsupported cache manifest format: {manifest_path}")

        return data


class ToolCache:
    """
    Restore-before-download, save-after-download for an install directory.

    Backend failures are logged as warnings and never raised.
    """

    def __init__(self, backend: Optional[CacheBackend] = None):
        self.backend = backend or NullCacheBackend()

    def restore(self, install_dir: Path, key: str) -> bool:
        """
        Try to restore install_dir from the cache.

        Returns:
            True on cache hit, False on miss or backend failure
        """
        matched = best_effort(
            lambda: self.backend.restore([install_dir], key),
            f"Cache restore for {key}",
            log=logger,
        )
        return bool(matched)

    def save(self, install_dir: Path, key: str) -> bool:
        """
        Try to save install_dir to the cache.

        Returns:
            True if the backend accepted the save, False if it failed
        """

        def _save() -> bool:
            self.backend.save([install_dir], key)
            return True

        return bool(best_effort(_save, f"Cache save for {key}", False, log=logger))

    def evict(self, key: str) -> None:
        """Drop a cache entry that turned out to be unusable."""
        best_effort(
            lambda: self.backend.delete(key), f"Cache eviction of {key}", log=logger
        )
