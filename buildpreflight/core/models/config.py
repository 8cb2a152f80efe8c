"""
Build configuration model — the structure the preflight reads and amends.

Loaded from preflight.yml by ``core.config.loader``. The preflight
never writes fields directly: rules return overrides which the driver
merges with ``apply_overrides`` (see ``core.models.outcome``).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator


class TargetConfig(BaseModel):
    """Per-target settings. Every field is optional."""

    llvm_config_path: Path | None = None   # prebuilt LLVM; None = build from source
    musl_root: Path | None = None
    no_std: bool | None = None             # tri-state: unset / true / false
    cc: str | None = None
    cxx: str | None = None
    ar: str | None = None


class BuildConfiguration(BaseModel):
    """Everything the preflight needs to know about the planned build.

    ``build`` is the platform the build runs on. ``hosts`` default to
    ``[build]`` and ``targets`` default to ``hosts``.
    """

    build: str = ""
    hosts: list[str] = Field(default_factory=list)
    targets: list[str] = Field(default_factory=list)

    src_dir: Path = Path(".")
    out_dir: Path | None = None

    target_config: dict[str, TargetConfig] = Field(default_factory=dict)

    # ── Flags ───────────────────────────────────────────────────
    sanitizers: bool = False
    use_ninja: bool = False
    dry_run: bool = False
    codegen_tests: bool = True
    channel: str = "dev"
    use_jemalloc: bool = True

    # ── External tools (user-supplied, or resolved by the preflight) ──
    python_path: str | None = None
    node_path: str | None = None
    gdb_path: str | None = None
    ccache_path: str | None = None

    musl_root: Path | None = None    # fallback for every musl target

    # ── Derived by the preflight ────────────────────────────────
    lldb_version: str | None = None
    lldb_python_dir: str | None = None

    @field_validator("hosts", "targets")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def _fill_defaults(self) -> BuildConfiguration:
        if not self.build:
            if not self.hosts:
                raise ValueError("either 'build' or 'hosts' must be set")
            self.build = self.hosts[0]
        if not self.hosts:
            self.hosts = [self.build]
        if not self.targets:
            self.targets = list(self.hosts)
        if self.out_dir is None:
            self.out_dir = self.src_dir / "build"
        return self

    # ── Lookups (never create records) ──────────────────────────

    def target(self, triple: str) -> TargetConfig | None:
        """Per-target record, or None if nothing was configured for it."""
        return self.target_config.get(triple)

    def llvm_config_for(self, triple: str) -> Path | None:
        tc = self.target(triple)
        return tc.llvm_config_path if tc else None

    def musl_root_for(self, triple: str) -> Path | None:
        """Per-target musl root, falling back to the global one."""
        tc = self.target(triple)
        if tc and tc.musl_root is not None:
            return tc.musl_root
        return self.musl_root

    def no_std_for(self, triple: str) -> bool | None:
        tc = self.target(triple)
        return tc.no_std if tc else None

    def target_entry(self, triple: str) -> TargetConfig:
        """Per-target record, created on first use."""
        return self.target_config.setdefault(triple, TargetConfig())
