"""
Install directory locking for dnscontrolkit.

Two setup runs installing the same version on the same host share one
install directory. When locking is enabled the installer holds a file lock
next to that directory for the whole install, so the second run waits and
then finds the binary already in place.

Usage:
    from dnscontrolkit.core.locking import install_lock

    with install_lock(install_dir, timeout=300):
        install()
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from dnscontrolkit.core.exceptions import PlacementError

logger = logging.getLogger(__name__)


def lock_path_for(install_dir: Path) -> Path:
    """Lock file path for an install directory (a sibling, not inside it)."""
    install_dir = Path(install_dir)
    return install_dir.with_name(f"{install_dir.name}.lock")


@contextmanager
def install_lock(install_dir: Path, timeout: float = 300):
    """
    Acquire the lock for an install directory.

    Args:
        install_dir: Install directory to protect
        timeout: Maximum wait time in seconds (default: 300 for long downloads)

    Raises:
        PlacementError: If the lock can't be acquired within timeout or the
            lock file can't be created
    """
    lock_path = lock_path_for(install_dir)
    lock = FileLock(str(lock_path), timeout=timeout)

    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock.acquire()
    except LockTimeout as e:
        raise PlacementError(
            f"Could not acquire install lock for {install_dir} after {timeout}s. "
            "Another process may be installing this version."
        ) from e
    except OSError as e:
        raise PlacementError(f"Cannot create install lock {lock_path}: {e}") from e

    logger.debug(f"Acquired install lock: {lock_path}")
    try:
        yield
    finally:
        lock.release()
        logger.debug(f"Released install lock: {lock_path}")
