"""
Platform detection for dnscontrolkit.

This module detects the current platform (OS and CPU architecture) used to
select the release asset and to build the cache key.

Features:
- Operating system detection (Linux, macOS, Windows)
- CPU architecture detection (x64, ARM64, x86, ARM)
- Canonical platform string generation (e.g., 'linux-x64', 'darwin-arm64')

Usage:
    from dnscontrolkit.core.platform import detect_platform

    platform_info = detect_platform()
    print(f"Platform string: {platform_info.platform_string()}")
"""

import functools
import platform
from dataclasses import dataclass

from dnscontrolkit.core.exceptions import UnsupportedPlatformError

SUPPORTED_OS = ("linux", "darwin", "windows")


@dataclass(frozen=True)
class PlatformInfo:
    """
    Target platform for an install.

    Attributes:
        os: Operating system ('linux', 'darwin', 'windows')
        arch: CPU architecture ('x64', 'arm64', or the raw machine name)
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'darwin-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    @property
    def executable_suffix(self) -> str:
        """File suffix of executables on this OS."""
        return ".exe" if self.os == "windows" else ""

    @property
    def tracks_executable_bit(self) -> bool:
        """Whether the filesystem carries POSIX execute permissions."""
        return self.os != "windows"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Raises:
        UnsupportedPlatformError: If the host OS is not supported
    """
    return PlatformInfo(os=_detect_os(), arch=normalize_arch(platform.machine()))


def clear_platform_cache():
    """Clear cached platform detection (for tests)."""
    detect_platform.cache_clear()


def _detect_os() -> str:
    system = platform.system().lower()

    if system == "linux":
        return "linux"
    elif system == "darwin":
        return "darwin"
    elif system == "windows":
        return "windows"
    else:
        raise UnsupportedPlatformError(system)


def normalize_os(name: str) -> str:
    """
    Normalize an OS name given on the command line or in a config file.

    Accepts the aliases used by CI runners and Node ('win32', 'macos').
    Unknown names are returned lowercased so the locator can reject them.
    """
    value = (name or "").strip().lower()
    aliases = {
        "win32": "windows",
        "win": "windows",
        "macos": "darwin",
        "osx": "darwin",
        "mac": "darwin",
    }
    return aliases.get(value, value)


def normalize_arch(machine: str) -> str:
    """
    Normalize CPU architecture.

    Returns:
        'x64', 'arm64', 'x86', 'arm', or the lowercased original for
        unknown machines
    """
    machine = (machine or "").strip().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86", "ia32"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def is_supported_os(os_name: str) -> bool:
    return os_name in SUPPORTED_OS
