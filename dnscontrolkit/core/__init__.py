"""
Core functionality for dnscontrolkit.

This package contains the foundational modules that other components depend on.
"""

from .cache import (
    CacheBackend,
    LocalCacheBackend,
    NullCacheBackend,
    ToolCache,
    cache_key,
)

from .exceptions import (
    DnsControlKitError,
    ConfigurationError,
    ResolutionError,
    UnsupportedTargetError,
    UnsupportedPlatformError,
    UnsupportedArchitectureError,
    UnsupportedArchiveFormat,
    CacheError,
    TransferError,
    DownloadError,
    ArchiveExtractionError,
    InsecureArchiveError,
    PlacementError,
    VerificationError,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .resilience import best_effort

__all__ = [
    "CacheBackend",
    "LocalCacheBackend",
    "NullCacheBackend",
    "ToolCache",
    "cache_key",
    "DnsControlKitError",
    "ConfigurationError",
    "ResolutionError",
    "UnsupportedTargetError",
    "UnsupportedPlatformError",
    "UnsupportedArchitectureError",
    "UnsupportedArchiveFormat",
    "CacheError",
    "TransferError",
    "DownloadError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "PlacementError",
    "VerificationError",
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "best_effort",
]
