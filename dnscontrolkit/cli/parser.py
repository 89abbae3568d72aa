"""
dnscontrolkit CLI argument parser.

This module implements the command-line interface for dnscontrolkit using argparse.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dnscontrolkit.ci.runner import WorkflowCommandFormatter, is_github_actions
from dnscontrolkit.tool.resolver import STRATEGIES

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("dnscontrolkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """dnscontrolkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="dnscontrolkit",
            description="dnscontrolkit - install DNSControl in CI pipelines",
            epilog='Use "dnscontrolkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"dnscontrolkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./dnscontrolkit.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_locate_command(subparsers)

        return parser

    def _add_version_arguments(self, parser):
        parser.add_argument(
            "--tool-version",
            dest="tool_version",
            metavar="VERSION",
            help="DNSControl version to use: 'latest' or e.g. v4.2.0 (default: INPUT_VERSION)",
        )
        parser.add_argument(
            "--auth-token",
            metavar="TOKEN",
            help="GitHub token for the release API (default: INPUT_AUTH-TOKEN)",
        )
        parser.add_argument(
            "--resolve-strategy",
            choices=STRATEGIES,
            metavar="STRATEGY",
            help="How to resolve 'latest' (auto|api|redirect) [default: auto]",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install and verify DNSControl",
            description="Resolve, install, register on PATH and verify DNSControl",
        )
        self._add_version_arguments(parser)
        parser.add_argument(
            "--no-cache",
            dest="cache_enabled",
            action="store_const",
            const=False,
            help="Do not restore from or save to the install cache",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Install cache directory (default: ~/.dnscontrolkit/cache)",
        )
        parser.add_argument(
            "--install-root",
            type=Path,
            metavar="PATH",
            help="Directory holding version install directories (default: system temp)",
        )
        parser.add_argument(
            "--lock",
            action="store_const",
            const=True,
            help="Lock the install directory while installing",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Print the resolved DNSControl version",
            description="Resolve a version token ('latest' or explicit) and print it",
        )
        self._add_version_arguments(parser)

    def _add_locate_command(self, subparsers):
        """Add 'locate' subcommand."""
        parser = subparsers.add_parser(
            "locate",
            help="Print the release asset URL",
            description="Print the release asset URL for a version and platform",
        )
        self._add_version_arguments(parser)
        parser.add_argument(
            "--os",
            dest="target_os",
            metavar="OS",
            help="Target OS (linux|darwin|windows) [default: host]",
        )
        parser.add_argument(
            "--arch",
            dest="target_arch",
            metavar="ARCH",
            help="Target architecture (amd64|arm64) [default: host]",
        )

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (default: sys.argv[1:])

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                logger.exception("Unhandled error")
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        On GitHub Actions warnings and errors are emitted as workflow
        annotations.
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        # Workflow commands are only read from stdout
        if is_github_actions(os.environ):
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(WorkflowCommandFormatter("%(message)s"))
        else:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(format_str))

        logging.basicConfig(
            level=level,
            handlers=[handler],
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "dnscontrolkit.cli.commands.install",
            "resolve": "dnscontrolkit.cli.commands.resolve",
            "locate": "dnscontrolkit.cli.commands.locate",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        import importlib

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
