"""
Preflight use case — run every rule in order, stop at the first failure.

Overrides returned by a rule are merged into the configuration before
the next rule runs, so later rules see them. No rule after a fatal
outcome is executed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from buildpreflight.adapters.shell.command import CommandRunner
from buildpreflight.adapters.shell.filesystem import FileProbe
from buildpreflight.core.errors import PreflightError
from buildpreflight.core.models.config import BuildConfiguration
from buildpreflight.core.models.outcome import CheckOutcome, apply_overrides
from buildpreflight.core.observability.logging_config import check_scope
from buildpreflight.core.services.checks import CHECKS, CheckContext

logger = logging.getLogger(__name__)

Check = Callable[[CheckContext], CheckOutcome]


@dataclass
class PreflightReport:
    """Result of a preflight run."""

    config: BuildConfiguration
    outcomes: list[CheckOutcome] = field(default_factory=list)
    error: str | None = None
    failed_check: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error,
            "failed_check": self.failed_check,
            "checks": [o.to_dict() for o in self.outcomes],
            "config": self.config.model_dump(mode="json"),
        }


def run_preflight(
    config: BuildConfiguration,
    *,
    environ: Mapping[str, str] | None = None,
    runner: CommandRunner | None = None,
    probe: FileProbe | None = None,
    on_windows: bool | None = None,
    is_git_checkout: bool | None = None,
    checks: Sequence[tuple[str, Check]] = CHECKS,
) -> PreflightReport:
    """Validate the build environment and amend ``config`` in place.

    Args:
        config: Configuration to validate. Detected overrides are merged
            into it.
        environ: Environment snapshot (default: ``os.environ``).
        runner: Process runner for lldb / cmake / llvm-config.
        probe: Filesystem probe shared by the command resolver and the rules.
        on_windows: Override host OS detection.
        is_git_checkout: Override ``<src_dir>/.git`` detection.
        checks: Rules to run, in order.

    Returns:
        PreflightReport. ``report.error`` is set when a rule failed.
    """
    ctx = CheckContext.create(
        config,
        environ=environ,
        runner=runner,
        probe=probe,
        on_windows=on_windows,
        is_git_checkout=is_git_checkout,
    )
    report = PreflightReport(config=config)

    for name, check in checks:
        with check_scope(name):
            logger.debug("Running check: %s", name)
            try:
                outcome = check(ctx)
            except PreflightError as e:
                outcome = CheckOutcome.failure(name, e.describe())

        report.outcomes.append(outcome)

        if outcome.fatal:
            logger.info("Preflight check '%s' failed: %s", name, outcome.message)
            report.error = outcome.message
            report.failed_check = name
            break

        if outcome.status == "updated":
            apply_overrides(config, outcome.overrides)

    if report.ok:
        logger.info("Preflight passed (%d checks)", len(report.outcomes))
    return report
