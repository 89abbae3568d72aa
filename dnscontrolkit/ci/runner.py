"""
CI runner integration for dnscontrolkit.

This module is the seam between the setup logic and the pipeline that runs
it. On GitHub Actions it speaks the runner's file and workflow-command
protocol:
- PATH registration via the file named by GITHUB_PATH
- Step outputs via the file named by GITHUB_OUTPUT
- Collapsible log groups (::group:: / ::endgroup::)
- Warning/error annotations (::warning:: / ::error::) through logging

Outside GitHub Actions the same calls update the current process
environment and fall back to plain log lines.
"""

import logging
import os
import sys
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, MutableMapping, Optional, TextIO

logger = logging.getLogger(__name__)


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def is_github_actions(environ: Optional[MutableMapping[str, str]] = None) -> bool:
    environ = os.environ if environ is None else environ
    return environ.get("GITHUB_ACTIONS", "").lower() == "true"


class WorkflowCommandFormatter(logging.Formatter):
    """
    Render log records as GitHub Actions workflow commands.

    DEBUG records become ::debug::, WARNING ::warning::, ERROR and above
    ::error::. INFO records are printed as plain text.
    """

    LEVEL_COMMANDS = (
        (logging.ERROR, "error"),
        (logging.WARNING, "warning"),
        (logging.INFO, None),
        (logging.DEBUG, "debug"),
    )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for level, command in self.LEVEL_COMMANDS:
            if record.levelno >= level:
                if command is None:
                    return message
                return f"::{command}::{escape_data(message)}"
        return f"::debug::{escape_data(message)}"


class Runner:
    """
    Pipeline runner the setup step reports to.

    Attributes:
        environ: Environment of the current process (mutated by add_path)
        outputs: Step outputs set during this run
    """

    def __init__(
        self,
        environ: Optional[MutableMapping[str, str]] = None,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize runner.

        Args:
            environ: Environment mapping (default: os.environ)
            stream: Stream for workflow commands (default: sys.stdout)
        """
        self.environ = os.environ if environ is None else environ
        self.stream = stream
        self.outputs: Dict[str, str] = {}

    @property
    def github_actions(self) -> bool:
        return is_github_actions(self.environ)

    def _write_command(self, line: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def add_path(self, directory: Path) -> None:
        """
        Prepend directory to the executable search path.

        Affects the current process immediately and, on GitHub Actions, all
        later steps of the job.
        """
        directory = str(directory)
        current = self.environ.get("PATH", "")
        self.environ["PATH"] = (
            f"{directory}{os.pathsep}{current}" if current else directory
        )

        path_file = self.environ.get("GITHUB_PATH")
        if path_file:
            with open(path_file, "a", encoding="utf-8") as f:
                f.write(f"{directory}\n")

        logger.debug(f"Added to PATH: {directory}")

    def set_output(self, name: str, value: str) -> None:
        """Set a step output."""
        value = str(value)
        self.outputs[name] = value

        output_file = self.environ.get("GITHUB_OUTPUT")
        if not output_file:
            logger.debug(f"Output {name}={value}")
            return

        with open(output_file, "a", encoding="utf-8") as f:
            if "\n" in value:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                f.write(f"{name}={value}\n")

    @contextmanager
    def group(self, title: str):
        """Collapse the log lines emitted inside the block under title."""
        if not self.github_actions:
            logger.info(title)
            yield
            return

        self._write_command(f"::group::{escape_data(title)}")
        try:
            yield
        finally:
            self._write_command("::endgroup::")

    def fail(self, message: str) -> None:
        """Report the run's failure reason."""
        logger.error(message)
