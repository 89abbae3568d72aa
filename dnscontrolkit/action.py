"""
DNSControl setup step.

Sequences version resolution, installation and verification. There is no
recovery between stages: the first error aborts the run and propagates to
the caller unchanged.

Usage:
    from dnscontrolkit.action import run_setup
    from dnscontrolkit.config import SetupConfig

    result = run_setup(SetupConfig(version="latest"))
    print(result.binary_path)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests

from dnscontrolkit.ci.runner import Runner
from dnscontrolkit.config import SetupConfig
from dnscontrolkit.core.cache import LocalCacheBackend, NullCacheBackend, ToolCache
from dnscontrolkit.core.platform import PlatformInfo, detect_platform
from dnscontrolkit.tool.installer import Installer, InstallResult
from dnscontrolkit.tool.resolver import VersionResolver, build_strategy
from dnscontrolkit.tool.verifier import Verifier

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Outcome of a successful setup run."""

    version: str
    binary_path: Path
    install: InstallResult


def build_cache(config: SetupConfig) -> ToolCache:
    if not config.cache_enabled:
        logger.debug("Cache disabled")
        return ToolCache(NullCacheBackend())
    return ToolCache(LocalCacheBackend(config.cache_dir))


def run_setup(
    config: SetupConfig,
    runner: Optional[Runner] = None,
    session: Optional[requests.Session] = None,
    platform: Optional[PlatformInfo] = None,
) -> SetupResult:
    """
    Install and verify the configured DNSControl version.

    Args:
        config: Setup configuration
        runner: CI runner (default: one bound to os.environ)
        session: requests session shared by resolution and download
        platform: Target platform (default: detected host platform)

    Returns:
        SetupResult with the resolved version and verified binary path

    Raises:
        DnsControlKitError: On any fatal error of any stage
    """
    runner = runner or Runner()
    session = session or requests.Session()
    platform = platform or detect_platform()

    resolver = VersionResolver(
        build_strategy(
            config.resolve_strategy,
            token=config.auth_token,
            session=session,
            timeout=config.http_timeout,
        )
    )
    version = resolver.resolve(config.version)

    installer = Installer(
        platform,
        runner,
        cache=build_cache(config),
        install_root=config.install_root,
        session=session,
        lock=config.lock,
        http_timeout=config.http_timeout,
    )
    with runner.group("💾 Install DNSControl"):
        install_result = installer.install(version)

    with runner.group("🧪 Installation check"):
        binary_path = Verifier(runner).verify()

    return SetupResult(version=version, binary_path=binary_path, install=install_result)
