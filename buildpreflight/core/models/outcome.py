"""
Check outcomes — the result contract between preflight rules and the driver.

Each rule returns a CheckOutcome. ``updated`` outcomes carry
ConfigOverrides which the driver merges into the configuration before
the next rule runs. A ``fatal`` outcome stops the run.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, Field

from buildpreflight.core.models.config import BuildConfiguration

logger = logging.getLogger(__name__)


class ConfigOverrides(BaseModel):
    """Configuration values detected by a rule.

    Only fields that are set (not None) are applied. ``targets`` maps a
    target triple to TargetConfig field values.
    """

    use_ninja: bool | None = None
    use_jemalloc: bool | None = None
    python_path: str | None = None
    node_path: str | None = None
    gdb_path: str | None = None
    lldb_version: str | None = None
    lldb_python_dir: str | None = None
    targets: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def set_target(self, triple: str, **values: Any) -> None:
        self.targets.setdefault(triple, {}).update(values)

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True, exclude_defaults=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True, exclude_defaults=True)


def apply_overrides(config: BuildConfiguration, overrides: ConfigOverrides) -> None:
    """Merge overrides into the configuration in place."""
    for name, value in overrides.model_dump(exclude={"targets"}, exclude_none=True).items():
        logger.info("Config override: %s = %r", name, value)
        setattr(config, name, value)

    for triple, values in overrides.targets.items():
        entry = config.target_entry(triple)
        for name, value in values.items():
            logger.info("Config override: target.%s.%s = %r", triple, name, value)
            setattr(entry, name, value)


class CheckOutcome(BaseModel):
    """Result of one preflight rule."""

    check: str
    status: Literal["passed", "updated", "fatal"] = "passed"
    message: str = ""
    overrides: ConfigOverrides = Field(default_factory=ConfigOverrides)

    @property
    def ok(self) -> bool:
        return self.status != "fatal"

    @property
    def fatal(self) -> bool:
        return self.status == "fatal"

    @classmethod
    def passed(cls, check: str, message: str = "") -> CheckOutcome:
        """Create a pass outcome."""
        return cls(check=check, status="passed", message=message)

    @classmethod
    def updated(
        cls,
        check: str,
        overrides: ConfigOverrides,
        message: str = "",
    ) -> CheckOutcome:
        """Create an outcome carrying overrides.

        Falls back to a plain pass when nothing was detected.
        """
        if overrides.is_empty():
            return cls.passed(check, message)
        return cls(check=check, status="updated", message=message, overrides=overrides)

    @classmethod
    def failure(cls, check: str, message: str) -> CheckOutcome:
        """Create a fatal outcome."""
        return cls(check=check, status="fatal", message=message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"check": self.check, "status": self.status}
        if self.message:
            data["message"] = self.message
        if not self.overrides.is_empty():
            data["overrides"] = self.overrides.to_dict()
        return data
