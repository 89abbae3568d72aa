"""
File operations used while placing a release on disk.

Archives are unpacked only after every member has been checked to land
inside the destination. Removal helpers refuse to delete outside an
expected root. Failures are raised as TransferError subclasses so the
installer can report them as the run's failure reason.
"""

import os
import shutil
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Dict, Iterable, Union

from dnscontrolkit.core.exceptions import (
    ArchiveExtractionError,
    InsecureArchiveError,
    PlacementError,
    UnsupportedArchiveFormat,
)

PathLike = Union[str, Path]

# rwxr-xr-x
EXECUTABLE_MODE = 0o755


class FilesystemError(PlacementError):
    """Removing or copying files failed."""


def is_relative_to(path: Path, parent: Path) -> bool:
    """True if path is parent or lies below it."""
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def _check_members(names: Iterable[str], destination: Path) -> None:
    root = destination.resolve()
    for name in names:
        if not is_relative_to((root / name).resolve(), root):
            raise InsecureArchiveError(
                f"Archive member '{name}' attempts directory traversal; "
                "refusing to extract"
            )


def _unpack_zip(archive_path: Path, destination: Path) -> None:
    with zipfile.ZipFile(archive_path) as zf:
        _check_members(zf.namelist(), destination)
        zf.extractall(destination)


def _unpack_tar_gz(archive_path: Path, destination: Path) -> None:
    with tarfile.open(archive_path, "r:gz") as tar:
        _check_members(tar.getnames(), destination)
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


EXTRACTORS: Dict[str, Callable[[Path, Path], None]] = {
    "tar.gz": _unpack_tar_gz,
    "zip": _unpack_zip,
}


def extract_archive(
    archive_path: PathLike, destination: PathLike, archive_format: str
) -> None:
    """
    Unpack archive_path into destination.

    The format is given by the caller because the downloaded file name is
    not trusted to carry it.

    Raises:
        UnsupportedArchiveFormat: For formats other than 'tar.gz' and 'zip'
        InsecureArchiveError: If a member would be written outside destination
        ArchiveExtractionError: If the archive is missing or unreadable
    """
    extractor = EXTRACTORS.get(archive_format)
    if extractor is None:
        raise UnsupportedArchiveFormat(
            f"Unsupported distributive format: {archive_format}"
        )

    archive_path = Path(archive_path)
    destination = Path(destination)
    if not archive_path.is_file():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)
    try:
        extractor(archive_path, destination)
    except InsecureArchiveError:
        raise
    except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def move_file(source: PathLike, target: PathLike) -> Path:
    """
    Move a file to target, replacing what is there.

    Raises:
        PlacementError: If source is not a file or the move fails
    """
    source = Path(source)
    target = Path(target)
    if not source.is_file():
        raise PlacementError(f"File to place not found: {source}")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.unlink(missing_ok=True)
        shutil.move(str(source), str(target))
    except OSError as e:
        raise PlacementError(f"Failed to move {source} to {target}: {e}") from e
    return target


def make_executable(path: PathLike, mode: int = EXECUTABLE_MODE) -> None:
    try:
        os.chmod(path, mode)
    except OSError as e:
        raise PlacementError(f"Failed to make {path} executable: {e}") from e


def safe_rmtree(path: PathLike, require_prefix: Union[PathLike, None] = None) -> None:
    """
    Delete a directory tree, optionally only if it lies under require_prefix.

    A missing path is not an error.

    Raises:
        ValueError: If path is outside require_prefix
        FilesystemError: If path is not a directory or removal fails
    """
    path = Path(path).resolve()
    if require_prefix is not None:
        prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, prefix):
            raise ValueError(f"Refusing to delete '{path}': not under '{prefix}'")

    if not path.exists():
        return
    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def remove_path(path: PathLike) -> None:
    """Remove a file, symlink or directory tree if present."""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        safe_rmtree(path)
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise FilesystemError(f"Failed to remove file '{path}': {e}") from e


def copy_tree(source: PathLike, destination: PathLike) -> None:
    """
    Replace destination with a copy of source (file or directory).

    File modes are preserved, so a cached binary stays executable.

    Raises:
        FilesystemError: If source does not exist
    """
    source = Path(source)
    destination = Path(destination)
    if not source.exists():
        raise FilesystemError(f"Source does not exist: {source}")

    remove_path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    if source.is_dir():
        shutil.copytree(source, destination, symlinks=True)
    else:
        shutil.copy2(source, destination)


__all__ = [
    "FilesystemError",
    "EXECUTABLE_MODE",
    "is_relative_to",
    "extract_archive",
    "move_file",
    "make_executable",
    "safe_rmtree",
    "remove_path",
    "copy_tree",
]
