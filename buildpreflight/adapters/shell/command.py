"""
Command runner — execute a program and capture its output.

The preflight only needs "did it succeed" and "what was the first line
of stdout". Failures to spawn are reported in the result, never raised.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of running one command."""

    ok: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int | None = None

    @property
    def first_line(self) -> str | None:
        """First line of stdout, or None when there was no output."""
        lines = self.stdout.splitlines()
        return lines[0] if lines else None


class CommandRunner:
    """Run programs to completion.

    There is no timeout: a hung tool hangs the caller.
    """

    def run(self, program: str, *args: str) -> CommandResult:
        cmd = [program, *args]
        logger.debug("Executing: %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            logger.debug("Cannot run %s: %s", program, e)
            return CommandResult(ok=False, stderr=str(e))

        return CommandResult(
            ok=result.returncode == 0,
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
        )
