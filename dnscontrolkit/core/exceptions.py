"""
Centralized exception hierarchy for dnscontrolkit.

Every fatal condition of a setup run is a subclass of DnsControlKitError so
the orchestrator can report it as the single failure reason of the run.
Cache-layer errors are the only ones that are expected to be caught and
downgraded to warnings.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class DnsControlKitError(Exception):
    """Base exception for all dnscontrolkit errors."""

    pass


class ConfigurationError(DnsControlKitError):
    """Invalid or missing setup configuration."""

    pass


# ============================================================================
# Version Resolution Exceptions
# ============================================================================


class ResolutionError(DnsControlKitError):
    """Raised when the upstream release index returns an unexpected response."""

    pass


# ============================================================================
# Unsupported Target Exceptions
# ============================================================================


class UnsupportedTargetError(DnsControlKitError):
    """Base exception for OS/architecture/format combinations outside the matrix."""

    pass


class UnsupportedPlatformError(UnsupportedTargetError):
    """Raised when the operating system is not supported."""

    def __init__(self, os_name: str):
        self.os_name = os_name
        super().__init__(f"Unsupported OS ({os_name or 'unset'})")


class UnsupportedArchitectureError(UnsupportedTargetError):
    """Raised when the CPU architecture is not supported on a given OS."""

    def __init__(self, os_name: str, arch: str):
        self.os_name = os_name
        self.arch = arch
        super().__init__(f"Unsupported {os_name} architecture ({arch or 'unset'})")


class UnsupportedArchiveFormat(UnsupportedTargetError):
    """Raised when an artifact is in a format the installer cannot unpack."""

    pass


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(DnsControlKitError):
    """Cache backend failure. Never fatal for a setup run."""

    pass


# ============================================================================
# Transfer / Placement Exceptions
# ============================================================================


class TransferError(DnsControlKitError):
    """Base exception for download, extraction and placement failures."""

    pass


class DownloadError(TransferError):
    """Raised when an artifact cannot be downloaded."""

    pass


class ArchiveExtractionError(TransferError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class PlacementError(TransferError):
    """Raised when the binary cannot be moved into place or made executable."""

    pass


# ============================================================================
# Verification Exceptions
# ============================================================================


class VerificationError(DnsControlKitError):
    """Raised when the installed binary is missing or does not run."""

    pass
