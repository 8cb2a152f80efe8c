"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from buildpreflight.core.models.config import BuildConfiguration, TargetConfig
from tests.fakes import FakeRunner

LINUX = "x86_64-unknown-linux-gnu"


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """An empty directory used as the whole search path."""
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture
def add_tool(bin_dir: Path):
    """Create fake executables in ``bin_dir``."""

    def _add(*names: str) -> Path:
        for name in names:
            exe = bin_dir / name
            exe.write_text("#!/bin/sh\n")
            exe.chmod(0o755)
        return bin_dir

    return _add


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_config(tmp_path: Path):
    """Build a configuration that passes with only a C toolchain and python.

    LLVM is prebuilt and codegen tests are off, so neither cmake nor
    FileCheck is needed unless a test asks for them.
    """

    def _make(**overrides) -> BuildConfiguration:
        data = {
            "build": LINUX,
            "src_dir": tmp_path / "src-tree",
            "codegen_tests": False,
            "target_config": {
                LINUX: TargetConfig(llvm_config_path=Path("/opt/llvm/bin/llvm-config")),
            },
        }
        data.update(overrides)
        return BuildConfiguration(**data)

    return _make
