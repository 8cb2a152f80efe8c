"""
Preflight errors — the two ways a preflight run can fail.

Every error is fatal: the rule that raises it stops the whole run.
The driver in ``core.use_cases.preflight`` turns the first error into
a fatal outcome, and the CLI prints it and exits non-zero.
"""

from __future__ import annotations


class PreflightError(Exception):
    """Base class for fatal preflight failures.

    Args:
        message: One-line description of the problem.
        hint: Optional remediation text, shown after the message.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        self.message = message
        self.hint = hint
        super().__init__(self.describe())

    def describe(self) -> str:
        """Full human-readable diagnostic, including the hint."""
        if self.hint:
            return f"{self.message}\n\n{self.hint.strip()}\n"
        return self.message


class MissingCommandError(PreflightError):
    """A required program is not on the search path."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"couldn't find required command: {command!r}")


class ConfigInconsistencyError(PreflightError):
    """The environment or configuration cannot be reconciled automatically."""
