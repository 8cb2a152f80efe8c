"""
Toolchain lookup — which compiler, archiver and FileCheck a target uses.

Explicit per-target settings in the configuration always win. Otherwise
names follow the usual conventions: ``cl.exe`` for MSVC, the emscripten
wrappers, plain ``cc``/``c++``/``ar`` for the build platform itself and
``<triple>-gcc`` style names for cross targets.
"""

from __future__ import annotations

from pathlib import Path

from buildpreflight.adapters.shell.command import CommandRunner
from buildpreflight.core.errors import ConfigInconsistencyError
from buildpreflight.core.models.config import BuildConfiguration
from buildpreflight.core.models.platform import PlatformFamily


class Toolchain:
    """Compiler-driver view of a BuildConfiguration."""

    def __init__(
        self,
        config: BuildConfiguration,
        runner: CommandRunner | None = None,
    ) -> None:
        self.config = config
        self.runner = runner or CommandRunner()

    def _native(self, triple: str) -> bool:
        return triple == self.config.build

    def cc(self, target: str) -> str:
        """C compiler for ``target``."""
        tc = self.config.target(target)
        if tc and tc.cc:
            return tc.cc
        family = PlatformFamily.from_triple(target)
        if family.msvc:
            return "cl.exe"
        if family.emscripten:
            return "emcc"
        return "cc" if self._native(target) else f"{target}-gcc"

    def cxx(self, host: str) -> str:
        """C++ compiler for ``host``."""
        tc = self.config.target(host)
        if tc and tc.cxx:
            return tc.cxx
        family = PlatformFamily.from_triple(host)
        if family.msvc:
            return "cl.exe"
        if family.emscripten:
            return "em++"
        return "c++" if self._native(host) else f"{host}-g++"

    def ar(self, target: str) -> str | None:
        """Archiver for ``target``; None when the compiler does its own archiving."""
        tc = self.config.target(target)
        if tc and tc.ar:
            return tc.ar
        family = PlatformFamily.from_triple(target)
        if family.msvc:
            return None
        if family.emscripten:
            return "emar"
        return "ar" if self._native(target) else f"{target}-ar"

    def llvm_out(self, target: str) -> Path:
        """Output directory of the in-tree LLVM build for ``target``."""
        assert self.config.out_dir is not None  # filled in by the model
        return self.config.out_dir / target / "llvm"

    def llvm_filecheck(self, target: str) -> Path:
        """Expected location of LLVM's FileCheck for ``target``.

        With an external LLVM, asks ``llvm-config --bindir``. Otherwise
        points into the in-tree LLVM build of the build platform.

        Raises:
            ConfigInconsistencyError: If llvm-config cannot be run.
        """
        family = PlatformFamily.from_triple(target)
        exe = family.exe("FileCheck")

        llvm_config = self.config.llvm_config_for(target)
        if llvm_config is not None:
            result = self.runner.run(str(llvm_config), "--bindir")
            if not result.ok or not result.first_line:
                raise ConfigInconsistencyError(
                    f"failed to run {llvm_config} --bindir: "
                    f"{result.stderr.strip() or 'no output'}"
                )
            return Path(result.first_line.strip()) / exe

        base = self.llvm_out(self.config.build) / "build"
        build_family = PlatformFamily.from_triple(self.config.build)
        if not self.config.use_ninja and build_family.msvc:
            return base / "Release" / "bin" / exe
        return base / "bin" / exe
