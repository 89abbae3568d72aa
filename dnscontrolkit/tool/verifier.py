"""
Installation check for DNSControl.

Confirms the installed binary is found on PATH and actually runs, which
catches corrupt downloads, wrong-architecture binaries and missing shared
libraries.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from dnscontrolkit.ci.runner import Runner
from dnscontrolkit.core.exceptions import VerificationError
from dnscontrolkit.tool.locator import TOOL_NAME

logger = logging.getLogger(__name__)

OUTPUT_NAME = "dnscontrol-bin"


class Verifier:
    """Verify the installed binary and publish its path as a step output."""

    def __init__(self, runner: Runner):
        self.runner = runner

    def locate(self, binary_name: str = TOOL_NAME) -> Path:
        """
        Find binary_name on the runner's PATH.

        Raises:
            VerificationError: If the binary is not on PATH
        """
        found = shutil.which(binary_name, path=self.runner.environ.get("PATH", ""))
        if not found:
            raise VerificationError(f"{binary_name} binary file not found in $PATH")
        return Path(found).resolve()

    def check_runs(self, binary_path: Path) -> None:
        """
        Run '<binary> version' with output suppressed.

        Raises:
            VerificationError: If the binary cannot be executed or exits non-zero
        """
        try:
            result = subprocess.run(
                [str(binary_path), "version"],
                capture_output=True,
                text=True,
                env=dict(self.runner.environ),
            )
        except OSError as e:
            raise VerificationError(f"Failed to execute {binary_path}: {e}") from e

        if result.returncode != 0:
            logger.debug(f"{binary_path} version stderr: {result.stderr[-2000:]}")
            raise VerificationError(
                f"{binary_path} version check failed with exit code {result.returncode}"
            )

        logger.debug(f"{binary_path} version: {result.stdout.strip()}")

    def verify(self, binary_name: str = TOOL_NAME) -> Path:
        """
        Locate and run the binary, then set the 'dnscontrol-bin' output.

        Returns:
            Absolute path of the verified binary
        """
        binary_path = self.locate(binary_name)
        self.check_runs(binary_path)

        self.runner.set_output(OUTPUT_NAME, str(binary_path))
        logger.info(f"DNSControl installed: {binary_path}")
        return binary_path
