"""Synchronous command execution for the OS tools."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import Final

from sleepshield.types.system import CommandResult

logger: Final = logging.getLogger(__name__)


class SubprocessRunner:
    """Runs commands with stdout and stderr merged, the way the tools are scraped."""

    def __init__(self, timeout: float = 10.0) -> None:
        """Initialize the runner.

        Args:
            timeout: Seconds to wait before giving up on a command
        """
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> CommandResult:
        """Run a command and capture its combined output.

        Launch failures and timeouts come back as a result whose output
        contains "error", so callers scraping the text treat them as failed.

        Args:
            args: Executable followed by its arguments

        Returns:
            CommandResult with output text and exit code (-1 if it never ran)
        """
        logger.debug("Executing: %s", " ".join(args))
        try:
            proc = subprocess.run(
                list(args),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out after %.0fs: %s", self.timeout, args[0])
            return CommandResult(output=f"Error running command: timed out after {self.timeout}s", returncode=-1)
        except OSError as exc:
            logger.warning("Command could not be started: %s", exc)
            return CommandResult(output=f"Error running command: {exc}", returncode=-1)

        output = proc.stdout or ""
        logger.debug("Output (exit %d): %s", proc.returncode, output.strip() or "(empty)")
        return CommandResult(output=output, returncode=proc.returncode)
