"""
Install command implementation.

Runs the complete setup step: resolve, install, verify.
"""

import logging
import os

from dnscontrolkit.action import run_setup
from dnscontrolkit.ci.runner import Runner
from dnscontrolkit.cli.commands._common import config_from_args
from dnscontrolkit.core.exceptions import DnsControlKitError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 on failure)
    """
    runner = Runner(os.environ)

    try:
        config = config_from_args(args, os.environ)
        logger.debug(f"Configuration: {config}")
        result = run_setup(config, runner=runner)
    except DnsControlKitError as e:
        runner.fail(str(e))
        if args.verbose:
            logger.exception("Setup failed")
        return 1
    except Exception as e:
        runner.fail(f"Error: {e}")
        if args.verbose:
            logger.exception("Setup failed")
        return 1

    print(result.binary_path)
    return 0
