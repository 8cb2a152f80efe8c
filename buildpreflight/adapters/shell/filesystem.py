"""
Filesystem probe — how the command resolver and the rules stat paths.

Kept as a tiny class so tests can substitute a counting or fake probe.
"""

from __future__ import annotations

from pathlib import Path


class FileProbe:
    """Stat-only filesystem access."""

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def exists(self, path: Path) -> bool:
        return path.exists()
