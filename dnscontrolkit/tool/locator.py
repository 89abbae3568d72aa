"""
Release artifact locator for DNSControl.

Maps (os, arch, version) to the release asset published on GitHub, following
the asset naming scheme of https://github.com/StackExchange/dnscontrol/releases.
macOS ships one universal archive for both architectures.
"""

from dataclasses import dataclass

from dnscontrolkit.core.exceptions import (
    UnsupportedArchitectureError,
    UnsupportedArchiveFormat,
    UnsupportedPlatformError,
)
from dnscontrolkit.core.platform import is_supported_os, normalize_arch

TOOL_NAME = "dnscontrol"

RELEASES_BASE_URL = "https://github.com/StackExchange/dnscontrol/releases/download"

# (os, normalized arch) -> asset suffix after "dnscontrol_{version}_"
RELEASE_ASSETS = {
    ("linux", "x64"): "linux_amd64.tar.gz",
    ("linux", "arm64"): "linux_arm64.tar.gz",
    ("darwin", "x64"): "darwin_all.tar.gz",
    ("darwin", "arm64"): "darwin_all.tar.gz",
    ("windows", "x64"): "windows_amd64.zip",
    ("windows", "arm64"): "windows_arm64.zip",
}

ARCHIVE_FORMATS = ("tar.gz", "zip")


@dataclass(frozen=True)
class Artifact:
    """A downloadable release asset."""

    url: str
    archive_format: str
    """'tar.gz', 'zip' or 'binary'"""

    binary_name: str
    """Name of the executable inside the archive (or of the raw binary)"""

    @property
    def file_name(self) -> str:
        return self.url.rsplit("/", 1)[-1]


def binary_name_for(os_name: str) -> str:
    return f"{TOOL_NAME}.exe" if os_name == "windows" else TOOL_NAME


def archive_format_of(url: str) -> str:
    """
    Infer archive format from the artifact URL suffix.

    Raises:
        UnsupportedArchiveFormat: If the suffix is not tar.gz or zip
    """
    for archive_format in ARCHIVE_FORMATS:
        if url.endswith(archive_format):
            return archive_format
    raise UnsupportedArchiveFormat(f"Unsupported distributive format: {url}")


def artifact_url(
    os_name: str, arch: str, version: str, base_url: str = RELEASES_BASE_URL
) -> str:
    """
    Get the download URL of the release asset.

    Args:
        os_name: 'linux', 'darwin' or 'windows'
        arch: CPU architecture ('x64'/'amd64', 'arm64', ...)
        version: Bare version string without 'v' prefix (e.g., '4.2.0')
        base_url: Releases download URL

    Returns:
        Fully-qualified asset URL

    Raises:
        UnsupportedPlatformError: If the OS is not supported
        UnsupportedArchitectureError: If the architecture is not supported on the OS

    Example:
        >>> artifact_url("linux", "x64", "3.16.0")
        'https://github.com/StackExchange/dnscontrol/releases/download/v3.16.0/dnscontrol_3.16.0_linux_amd64.tar.gz'
    """
    if not is_supported_os(os_name):
        raise UnsupportedPlatformError(os_name)

    suffix = RELEASE_ASSETS.get((os_name, normalize_arch(arch)))
    if suffix is None:
        raise UnsupportedArchitectureError(os_name, arch)

    return f"{base_url}/v{version}/{TOOL_NAME}_{version}_{suffix}"


def locate_artifact(
    os_name: str, arch: str, version: str, base_url: str = RELEASES_BASE_URL
) -> Artifact:
    """Resolve the release asset, its archive format and binary entry name."""
    url = artifact_url(os_name, arch, version, base_url=base_url)
    return Artifact(
        url=url,
        archive_format=archive_format_of(url),
        binary_name=binary_name_for(os_name),
    )
