"""
Release artifact download.

One streaming GET per artifact, written to disk in chunks. Progress is
reported to an optional callback at most every PROGRESS_INTERVAL seconds
and once more when the body is complete.

There is no retry: a transport error or non-2xx status surfaces as a
DownloadError and the partially written file is removed.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from dnscontrolkit.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
PROGRESS_INTERVAL = 0.5

MIB = 1024 * 1024


@dataclass(frozen=True)
class DownloadProgress:
    """
    Snapshot of a running download.

    Attributes:
        received: Bytes written so far
        total: Expected size from Content-Length (0 when unknown)
        elapsed: Seconds since the first byte was requested
    """

    received: int
    total: int
    elapsed: float

    @property
    def fraction(self) -> Optional[float]:
        """Completed fraction in [0, 1], or None when the size is unknown."""
        if self.total <= 0:
            return None
        return min(self.received / self.total, 1.0)

    @property
    def rate(self) -> float:
        """Average bytes per second."""
        return self.received / self.elapsed if self.elapsed > 0 else 0.0

    @property
    def eta(self) -> Optional[float]:
        if self.fraction is None or self.rate <= 0:
            return None
        return (self.total - self.received) / self.rate

    def __str__(self) -> str:
        rate = f"{self.rate / MIB:.1f} MiB/s"
        if self.fraction is None:
            return f"{self.received / MIB:.1f} MiB, {rate}"
        text = (
            f"{self.received / MIB:.1f} of {self.total / MIB:.1f} MiB "
            f"({self.fraction:.0%}), {rate}"
        )
        if self.eta is not None and self.received < self.total:
            text += f", {self.eta:.0f}s left"
        return text


ProgressCallback = Callable[[DownloadProgress], None]


def download_file(
    url: str,
    destination: Path,
    session: Optional[requests.Session] = None,
    progress_callback: Optional[ProgressCallback] = None,
    timeout: float = 30,
) -> Path:
    """
    Download url to destination, creating the parent directory.

    Args:
        url: Artifact URL
        destination: File to write
        session: requests session to reuse (module-level requests if None)
        progress_callback: Receives DownloadProgress snapshots
        timeout: Connect and read timeout in seconds

    Returns:
        destination

    Raises:
        DownloadError: On transport errors, non-2xx status or write failure
        ValueError: If url or destination is empty
    """
    if not url:
        raise ValueError("URL cannot be empty")
    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    http = session or requests

    logger.info(f"Downloading {url}")
    try:
        with http.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            size = _stream_to_file(response, destination, progress_callback)
    except RequestException as e:
        _discard(destination)
        raise DownloadError(f"Failed to download {url}: {e}") from e
    except OSError as e:
        _discard(destination)
        raise DownloadError(f"Failed to write {destination}: {e}") from e

    logger.info(f"Saved {size} bytes to {destination}")
    return destination


def _stream_to_file(
    response, destination: Path, progress_callback: Optional[ProgressCallback]
) -> int:
    total = int(response.headers.get("Content-Length") or 0)
    received = 0
    started = time.monotonic()
    reported = started

    with open(destination, "wb") as out:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            out.write(chunk)
            received += len(chunk)

            now = time.monotonic()
            if progress_callback and now - reported >= PROGRESS_INTERVAL:
                progress_callback(DownloadProgress(received, total, now - started))
                reported = now

    if progress_callback:
        progress_callback(
            DownloadProgress(received, total, time.monotonic() - started)
        )
    return received


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug(f"Could not remove partial download {path}: {e}")
