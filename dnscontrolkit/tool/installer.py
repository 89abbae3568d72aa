"""
DNSControl installation.

This module orchestrates getting a DNSControl binary into a version-scoped
install directory:

1. Restore the install directory from the cache (hit: skip to 7)
2. Locate the release asset for the platform
3. Download it to a temporary work directory
4. Extract the archive and move the binary into place (or place a raw binary)
5. Make the binary executable
6. Save the install directory to the cache
7. Register the install directory on PATH

Any fatal error aborts the sequence. Cache and cleanup failures are logged
as warnings only.
"""

import logging
import tempfile
from contextlib import nullcontext
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

import requests

from dnscontrolkit.ci.runner import Runner
from dnscontrolkit.core.cache import ToolCache, cache_key
from dnscontrolkit.core.download import DownloadProgress, download_file
from dnscontrolkit.core.exceptions import PlacementError, UnsupportedArchiveFormat
from dnscontrolkit.core.filesystem import (
    extract_archive,
    make_executable,
    move_file,
    safe_rmtree,
)
from dnscontrolkit.core.locking import install_lock
from dnscontrolkit.core.platform import PlatformInfo
from dnscontrolkit.core.resilience import best_effort
from dnscontrolkit.tool.locator import (
    TOOL_NAME,
    Artifact,
    binary_name_for,
    locate_artifact,
)

logger = logging.getLogger(__name__)


class InstallState(Enum):
    """Steps of an install, in the order they can occur."""

    CHECK_CACHE = "check_cache"
    HIT = "hit"
    MISS = "miss"
    LOCATE = "locate"
    DOWNLOAD = "download"
    EXTRACT_OR_PLACE = "extract_or_place"
    FIX_PERMISSIONS = "fix_permissions"
    SAVE_CACHE = "save_cache"
    REGISTER_PATH = "register_path"
    DONE = "done"


@dataclass
class InstallResult:
    """Result of an install."""

    version: str
    install_dir: Path
    binary_path: Path
    cache_key: str
    cache_hit: bool
    states: List[InstallState] = field(default_factory=list)
    """States visited, for diagnostics"""


class Installer:
    """
    Installs a DNSControl version into {install_root}/dnscontrol-{version}.

    Example:
        >>> installer = Installer(detect_platform(), Runner(), ToolCache(backend))
        >>> result = installer.install("4.2.0")
        >>> print(result.binary_path)
    """

    def __init__(
        self,
        platform: PlatformInfo,
        runner: Runner,
        cache: Optional[ToolCache] = None,
        install_root: Optional[Path] = None,
        session: Optional[requests.Session] = None,
        lock: bool = False,
        lock_timeout: float = 300,
        http_timeout: float = 30,
        locate: Callable[[str, str, str], Artifact] = locate_artifact,
    ):
        """
        Initialize installer.

        Args:
            platform: Target platform
            runner: CI runner used to register PATH
            cache: Install directory cache (default: disabled)
            install_root: Parent of install directories (default: system temp)
            session: Optional requests session for downloads
            lock: Hold a file lock on the install directory while installing
            lock_timeout: Seconds to wait for the lock
            http_timeout: Download connect/read timeout in seconds
            locate: Function mapping (os, arch, version) to an Artifact
        """
        self.platform = platform
        self.runner = runner
        self.cache = cache or ToolCache()
        self.install_root = Path(install_root or tempfile.gettempdir())
        self.session = session
        self.lock = lock
        self.lock_timeout = lock_timeout
        self.http_timeout = http_timeout
        self.locate = locate

    def install_dir_for(self, version: str) -> Path:
        return self.install_root / f"{TOOL_NAME}-{version}"

    def install(self, version: str) -> InstallResult:
        """
        Install version and put it on PATH.

        Args:
            version: Bare version string (e.g., '4.2.0')

        Returns:
            InstallResult describing the installed binary

        Raises:
            UnsupportedTargetError: If the platform has no release asset
            TransferError: If download, extraction or placement fails
        """
        install_dir = self.install_dir_for(version)
        key = cache_key(TOOL_NAME, version, self.platform)
        binary_path = install_dir / binary_name_for(self.platform.os)
        result = InstallResult(
            version=version,
            install_dir=install_dir,
            binary_path=binary_path,
            cache_key=key,
            cache_hit=False,
        )

        logger.info(f"Version to install: {version} (target directory: {install_dir})")

        guard = (
            install_lock(install_dir, timeout=self.lock_timeout)
            if self.lock
            else nullcontext()
        )
        with guard:
            self._enter(result, InstallState.CHECK_CACHE)
            result.cache_hit = self._restore(install_dir, key, binary_path)

            if result.cache_hit:
                self._enter(result, InstallState.HIT)
                logger.info("DNSControl restored from cache")
            else:
                self._enter(result, InstallState.MISS)
                self._install_from_release(result)

        self._enter(result, InstallState.REGISTER_PATH)
        self.runner.add_path(install_dir)

        self._enter(result, InstallState.DONE)
        return result

    def _restore(self, install_dir: Path, key: str, binary_path: Path) -> bool:
        if not self.cache.restore(install_dir, key):
            return False

        if not binary_path.is_file():
            logger.warning(
                f"Cache entry {key} does not contain {binary_path.name}, reinstalling"
            )
            self.cache.evict(key)
            return False

        return True

    def _install_from_release(self, result: InstallResult) -> None:
        self._enter(result, InstallState.LOCATE)
        artifact = self.locate(self.platform.os, self.platform.arch, result.version)
        logger.debug(f"Release asset: {artifact.url}")

        work_dir = Path(tempfile.mkdtemp(prefix=f"{TOOL_NAME}.tmp-"))
        try:
            self._enter(result, InstallState.DOWNLOAD)
            archive_path = download_file(
                artifact.url,
                work_dir / artifact.file_name,
                session=self.session,
                progress_callback=_log_progress,
                timeout=self.http_timeout,
            )

            self._enter(result, InstallState.EXTRACT_OR_PLACE)
            self._place(artifact, archive_path, work_dir, result.binary_path)
        finally:
            best_effort(
                lambda: safe_rmtree(work_dir),
                f"Cleanup of {work_dir}",
                log=logger,
            )

        self._enter(result, InstallState.FIX_PERMISSIONS)
        if self.platform.tracks_executable_bit:
            make_executable(result.binary_path)

        self._enter(result, InstallState.SAVE_CACHE)
        self.cache.save(result.install_dir, result.cache_key)

    def _place(
        self, artifact: Artifact, archive_path: Path, work_dir: Path, target: Path
    ) -> None:
        """Move the binary from the downloaded artifact to target."""
        if artifact.archive_format == "binary":
            move_file(archive_path, target)
            return

        if artifact.archive_format not in ("tar.gz", "zip"):
            raise UnsupportedArchiveFormat(
                f"Unsupported distributive format: {artifact.archive_format}"
            )

        staging = work_dir / "unpacked"
        extract_archive(archive_path, staging, artifact.archive_format)

        entry = staging / artifact.binary_name
        if not entry.is_file():
            raise PlacementError(
                f"{artifact.binary_name} not found in {artifact.file_name}"
            )

        move_file(entry, target)

    def _enter(self, result: InstallResult, state: InstallState) -> None:
        logger.debug(f"Install state: {state.value}")
        result.states.append(state)


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"Downloading: {progress}")
