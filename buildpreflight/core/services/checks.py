"""
Preflight rules — the ordered checks run before a build starts.

Each rule is a plain function taking a CheckContext and returning a
CheckOutcome. A rule either passes, passes with configuration
overrides, or raises a PreflightError. Rules never write to the
configuration themselves; the driver merges their overrides.

The order of ``CHECKS`` is part of the contract: the first failing rule
is the one reported.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from buildpreflight.adapters.shell.command import CommandRunner
from buildpreflight.adapters.shell.filesystem import FileProbe
from buildpreflight.core.errors import ConfigInconsistencyError
from buildpreflight.core.models.config import BuildConfiguration
from buildpreflight.core.models.outcome import CheckOutcome, ConfigOverrides
from buildpreflight.core.models.platform import PlatformFamily, host_is_windows
from buildpreflight.core.services.resolver import CommandResolver
from buildpreflight.core.services.stage0 import read_stage0
from buildpreflight.core.services.toolchain import Toolchain

logger = logging.getLogger(__name__)

# Set by the bootstrap wrapper script; trusted without validation.
PYTHON_OVERRIDE_ENV = "BOOTSTRAP_PYTHON"

_CMAKE_MSVC_HINT = """\
This is likely due to it being an msys/cygwin build of cmake,
rather than the required windows version, built using MinGW
or Visual Studio.

If you are building under msys2 try installing the mingw-w64-x86_64-cmake
package instead of cmake:

$ pacman -R cmake && pacman -S mingw-w64-x86_64-cmake
"""


@dataclass
class CheckContext:
    """Everything a rule may look at.

    ``config`` is read-only for rules. ``environ`` is a snapshot of the
    process environment taken when the context was created.
    """

    config: BuildConfiguration
    resolver: CommandResolver
    toolchain: Toolchain
    runner: CommandRunner
    probe: FileProbe = field(default_factory=FileProbe)
    environ: Mapping[str, str] = field(default_factory=dict)
    on_windows: bool = False
    is_git_checkout: bool = False

    @property
    def build_family(self) -> PlatformFamily:
        return PlatformFamily.from_triple(self.config.build)

    @classmethod
    def create(
        cls,
        config: BuildConfiguration,
        *,
        environ: Mapping[str, str] | None = None,
        runner: CommandRunner | None = None,
        probe: FileProbe | None = None,
        on_windows: bool | None = None,
        is_git_checkout: bool | None = None,
    ) -> CheckContext:
        env = dict(os.environ if environ is None else environ)
        runner = runner or CommandRunner()
        probe = probe or FileProbe()
        return cls(
            config=config,
            resolver=CommandResolver(env.get("PATH", ""), probe=probe),
            toolchain=Toolchain(config, runner),
            runner=runner,
            probe=probe,
            environ=env,
            on_windows=host_is_windows() if on_windows is None else on_windows,
            is_git_checkout=(
                (config.src_dir / ".git").exists()
                if is_git_checkout is None
                else is_git_checkout
            ),
        )


def building_llvm(config: BuildConfiguration) -> bool:
    """Whether LLVM is built from source for any target."""
    return any(config.llvm_config_for(t) is None for t in config.targets)


# ── Rules ───────────────────────────────────────────────────────


def check_search_path(ctx: CheckContext) -> CheckOutcome:
    # Quotes are invalid in Windows file names and break PATH splitting.
    if ctx.on_windows and '"' in ctx.environ.get("PATH", ""):
        raise ConfigInconsistencyError("PATH contains invalid character '\"'")
    return CheckOutcome.passed("search_path")


def check_vcs(ctx: CheckContext) -> CheckOutcome:
    if not ctx.is_git_checkout:
        return CheckOutcome.passed("vcs", "not a git checkout")
    git = ctx.resolver.require("git")
    return CheckOutcome.passed("vcs", f"git: {git}")


def check_cmake(ctx: CheckContext) -> CheckOutcome:
    if building_llvm(ctx.config) or ctx.config.sanitizers:
        cmake = ctx.resolver.require("cmake")
        return CheckOutcome.passed("cmake", f"cmake: {cmake}")
    return CheckOutcome.passed("cmake", "not needed")


def check_ninja(ctx: CheckContext) -> CheckOutcome:
    """Ninja is only used to build LLVM."""
    if not building_llvm(ctx.config):
        return CheckOutcome.passed("ninja", "not needed")

    if ctx.config.use_ninja:
        # Some distros ship ninja as ninja-build; cmake accepts either.
        ninja = ctx.resolver.query("ninja-build") or ctx.resolver.require("ninja")
        return CheckOutcome.passed("ninja", f"ninja: {ninja}")

    # The msbuild generator ignores options such as disabling LLVM
    # assertions, so prefer Ninja on MSVC whenever it is installed.
    if ctx.build_family.msvc and ctx.resolver.query("ninja") is not None:
        return CheckOutcome.updated(
            "ninja",
            ConfigOverrides(use_ninja=True),
            "ninja found, enabling it for MSVC",
        )
    return CheckOutcome.passed("ninja")


def check_interpreters(ctx: CheckContext) -> CheckOutcome:
    config = ctx.config
    resolver = ctx.resolver

    if config.python_path:
        python = resolver.require(config.python_path)
    elif ctx.environ.get(PYTHON_OVERRIDE_ENV):
        python = Path(ctx.environ[PYTHON_OVERRIDE_ENV])
    else:
        python = (
            resolver.query("python2.7")
            or resolver.query("python2")
            or resolver.require("python")
        )

    if config.node_path:
        node = resolver.require(config.node_path)
    else:
        node = resolver.query("node") or resolver.query("nodejs")

    if config.gdb_path:
        gdb = resolver.require(config.gdb_path)
    else:
        gdb = resolver.query("gdb")

    overrides = ConfigOverrides(
        python_path=str(python),
        node_path=str(node) if node else None,
        gdb_path=str(gdb) if gdb else None,
    )
    return CheckOutcome.updated("interpreters", overrides, f"python: {python}")


def check_c_toolchain(ctx: CheckContext) -> CheckOutcome:
    if ctx.config.dry_run:
        return CheckOutcome.passed("c_toolchain", "skipped (dry run)")

    for target in ctx.config.targets:
        # Emscripten only needs a C compiler for its own tests.
        if PlatformFamily.from_triple(target).emscripten:
            continue
        ctx.resolver.require(ctx.toolchain.cc(target))
        ar = ctx.toolchain.ar(target)
        if ar:
            ctx.resolver.require(ar)
    return CheckOutcome.passed("c_toolchain")


def check_cxx_toolchain(ctx: CheckContext) -> CheckOutcome:
    overrides = ConfigOverrides()
    for host in ctx.config.hosts:
        if not ctx.config.dry_run:
            ctx.resolver.require(ctx.toolchain.cxx(host))

        # jemalloc is not packaged for MSVC hosts.
        if PlatformFamily.from_triple(host).msvc:
            overrides.use_jemalloc = False
    return CheckOutcome.updated("cxx_toolchain", overrides)


def check_filecheck(ctx: CheckContext) -> CheckOutcome:
    """An external LLVM must ship FileCheck when codegen tests run."""
    config = ctx.config
    if not config.codegen_tests:
        return CheckOutcome.passed("filecheck", "codegen tests disabled")

    filecheck = ctx.toolchain.llvm_filecheck(config.build)
    assert config.out_dir is not None
    if not filecheck.is_relative_to(config.out_dir) and not filecheck.exists():
        raise ConfigInconsistencyError(
            f"FileCheck executable {str(filecheck)!r} does not exist"
        )
    return CheckOutcome.passed("filecheck", f"FileCheck: {filecheck}")


def check_target_constraints(ctx: CheckContext) -> CheckOutcome:
    config = ctx.config
    overrides = ConfigOverrides()

    for target in config.targets:
        family = PlatformFamily.from_triple(target)

        if family.ios and not ctx.build_family.macos:
            raise ConfigInconsistencyError(
                f"the iOS target {target} is only supported on macOS"
            )

        if family.bare_metal:
            no_std = config.no_std_for(target)
            if no_std is None:
                overrides.set_target(target, no_std=True)
            elif no_std is False:
                raise ConfigInconsistencyError(
                    f"target {target}: all the *-none-* targets are no-std targets"
                )

        if family.musl:
            _check_musl_root(ctx, target, overrides)

        if family.msvc:
            _check_cmake_generators(ctx)

    return CheckOutcome.updated("target_constraints", overrides)


def _check_musl_root(ctx: CheckContext, target: str, overrides: ConfigOverrides) -> None:
    root = ctx.config.musl_root_for(target)

    # A native musl build can fall back to the system toolchain.
    if root is None and target == ctx.config.build:
        root = Path("/usr")
        overrides.set_target(target, musl_root=root)

    if root is None:
        raise ConfigInconsistencyError(
            f"target {target}: when targeting MUSL either the global musl_root "
            f"option or the target_config.{target}.musl_root option must be "
            "specified in the configuration"
        )

    for archive in ("libc.a", "libunwind.a"):
        path = root / "lib" / archive
        if not ctx.probe.exists(path):
            raise ConfigInconsistencyError(
                f"couldn't find {path} (musl root: {root})"
            )


def _check_cmake_generators(ctx: CheckContext) -> None:
    # cmake comes in MSVC, MinGW and Cygwin builds; only the Cygwin one
    # lacks the Visual Studio generators.
    result = ctx.runner.run("cmake", "--help")
    if not result.ok:
        raise ConfigInconsistencyError(
            f"failed to run cmake --help: {result.stderr.strip() or 'no output'}"
        )
    if "Visual Studio" not in result.stdout:
        raise ConfigInconsistencyError(
            "cmake does not support Visual Studio generators.",
            hint=_CMAKE_MSVC_HINT,
        )


def check_lldb(ctx: CheckContext) -> CheckOutcome:
    """Best effort: any failure leaves the lldb fields unset."""
    version = ctx.runner.run("lldb", "--version")
    if not version.ok or not version.first_line:
        return CheckOutcome.passed("lldb", "lldb not available")

    overrides = ConfigOverrides(lldb_version=version.first_line)
    python_dir = ctx.runner.run("lldb", "-P")
    if python_dir.ok and python_dir.first_line:
        overrides.lldb_python_dir = python_dir.first_line
    return CheckOutcome.updated("lldb", overrides, version.first_line)


def check_ccache(ctx: CheckContext) -> CheckOutcome:
    if ctx.config.ccache_path:
        ccache = ctx.resolver.require(ctx.config.ccache_path)
        return CheckOutcome.passed("ccache", f"ccache: {ccache}")
    return CheckOutcome.passed("ccache", "not configured")


def check_stage0(ctx: CheckContext) -> CheckOutcome:
    """A stable release must bootstrap from a released compiler."""
    if ctx.config.channel != "stable":
        return CheckOutcome.passed("stage0", f"channel {ctx.config.channel}")

    stage0 = read_stage0(ctx.config.src_dir)
    if stage0.is_dev_bootstrap:
        raise ConfigInconsistencyError(
            "bootstrapping from a dev compiler in a stable release, but "
            "should only be bootstrapping from a released compiler!"
        )
    return CheckOutcome.passed("stage0")


CHECKS: tuple[tuple[str, Callable[[CheckContext], CheckOutcome]], ...] = (
    ("search_path", check_search_path),
    ("vcs", check_vcs),
    ("cmake", check_cmake),
    ("ninja", check_ninja),
    ("interpreters", check_interpreters),
    ("c_toolchain", check_c_toolchain),
    ("cxx_toolchain", check_cxx_toolchain),
    ("filecheck", check_filecheck),
    ("target_constraints", check_target_constraints),
    ("lldb", check_lldb),
    ("ccache", check_ccache),
    ("stage0", check_stage0),
)
