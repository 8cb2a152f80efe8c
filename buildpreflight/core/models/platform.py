"""
Platform classification — derive platform traits from a target triple once.

Rules ask ``PlatformFamily.from_triple(t).msvc`` instead of matching
substrings of the triple at every call site.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformFamily:
    """Traits of a platform identifier such as ``x86_64-pc-windows-msvc``."""

    triple: str
    windows: bool = False
    macos: bool = False
    ios: bool = False
    msvc: bool = False
    musl: bool = False
    bare_metal: bool = False     # *-none-* targets, no OS runtime
    emscripten: bool = False

    @classmethod
    def from_triple(cls, triple: str) -> PlatformFamily:
        return cls(
            triple=triple,
            windows="windows" in triple,
            macos="apple-darwin" in triple,
            ios="apple-ios" in triple,
            msvc="msvc" in triple,
            musl="musl" in triple,
            bare_metal="-none-" in triple,
            emscripten="emscripten" in triple,
        )

    def exe(self, name: str) -> str:
        """Executable file name for this platform (``.exe`` on Windows)."""
        return f"{name}.exe" if self.windows else name


def host_is_windows() -> bool:
    """Whether the validator itself is running on Windows."""
    return os.name == "nt"
