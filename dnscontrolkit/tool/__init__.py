"""
DNSControl release handling: version resolution, asset location,
installation and verification.
"""

from .installer import Installer, InstallResult, InstallState
from .locator import Artifact, artifact_url, locate_artifact
from .resolver import (
    GitHubApiStrategy,
    RedirectStrategy,
    VersionResolver,
    build_strategy,
    is_latest,
    normalize_version,
)
from .verifier import Verifier

__all__ = [
    "Installer",
    "InstallResult",
    "InstallState",
    "Artifact",
    "artifact_url",
    "locate_artifact",
    "GitHubApiStrategy",
    "RedirectStrategy",
    "VersionResolver",
    "build_strategy",
    "is_latest",
    "normalize_version",
    "Verifier",
]
