"""
Resolve command implementation.

Prints the version a setup run would install.
"""

import logging
import os

import requests

from dnscontrolkit.cli.commands._common import config_from_args
from dnscontrolkit.core.exceptions import DnsControlKitError
from dnscontrolkit.tool.resolver import VersionResolver, build_strategy

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 on failure)
    """
    try:
        config = config_from_args(args, os.environ)
        strategy = build_strategy(
            config.resolve_strategy,
            token=config.auth_token,
            session=requests.Session(),
            timeout=config.http_timeout,
        )
        version = VersionResolver(strategy).resolve(config.version)
    except DnsControlKitError as e:
        logger.error(str(e))
        return 1

    print(version)
    return 0
