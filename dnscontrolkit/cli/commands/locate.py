"""
Locate command implementation.

Prints the release asset URL for a version and platform without
downloading anything.
"""

import logging
import os

import requests

from dnscontrolkit.cli.commands._common import config_from_args
from dnscontrolkit.core.exceptions import DnsControlKitError
from dnscontrolkit.core.platform import detect_platform, normalize_arch, normalize_os
from dnscontrolkit.tool.locator import artifact_url
from dnscontrolkit.tool.resolver import VersionResolver, build_strategy

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the locate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 on failure)
    """
    try:
        config = config_from_args(args, os.environ)

        if args.target_os is not None and args.target_arch is not None:
            target_os = normalize_os(args.target_os)
            target_arch = normalize_arch(args.target_arch)
        else:
            host = detect_platform()
            target_os = normalize_os(args.target_os or host.os)
            target_arch = normalize_arch(args.target_arch or host.arch)

        strategy = build_strategy(
            config.resolve_strategy,
            token=config.auth_token,
            session=requests.Session(),
            timeout=config.http_timeout,
        )
        version = VersionResolver(strategy).resolve(config.version)
        url = artifact_url(target_os, target_arch, version)
    except DnsControlKitError as e:
        logger.error(str(e))
        return 1

    print(url)
    return 0
