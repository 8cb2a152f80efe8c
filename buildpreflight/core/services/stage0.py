"""
Bootstrap metadata — the stage0 file naming the compiler used to bootstrap.

Format: ``key: value`` lines, ``#`` starts a comment line::

    date: 2018-02-27
    rustc: beta
    cargo: beta
    dev: 1

A ``dev:`` line means the bootstrap compiler is an unreleased build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from buildpreflight.core.errors import ConfigInconsistencyError

logger = logging.getLogger(__name__)

STAGE0_FILE = Path("src") / "stage0.txt"


class Stage0Error(ConfigInconsistencyError):
    """The bootstrap metadata file is missing or unreadable."""


@dataclass
class Stage0:
    """Parsed bootstrap metadata."""

    entries: dict[str, str] = field(default_factory=dict)

    @property
    def date(self) -> str | None:
        return self.entries.get("date")

    @property
    def rustc(self) -> str | None:
        return self.entries.get("rustc")

    @property
    def cargo(self) -> str | None:
        return self.entries.get("cargo")

    @property
    def is_dev_bootstrap(self) -> bool:
        """Whether a development compiler is used to bootstrap."""
        return "dev" in self.entries


def parse_stage0(text: str) -> Stage0:
    """Parse stage0 text. Lines without a ``:`` are ignored."""
    stage0 = Stage0()
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, value = line.split(":", 1)
        stage0.entries[key.strip()] = value.strip()
    return stage0


def stage0_path(src_dir: Path) -> Path:
    return src_dir / STAGE0_FILE


def read_stage0(src_dir: Path) -> Stage0:
    """Read and parse ``<src_dir>/src/stage0.txt``.

    Raises:
        Stage0Error: If the file cannot be read.
    """
    path = stage0_path(src_dir)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise Stage0Error(f"cannot read bootstrap metadata {path}: {e}") from e

    stage0 = parse_stage0(text)
    logger.debug("Loaded stage0 from %s: %s", path, stage0.entries)
    return stage0
