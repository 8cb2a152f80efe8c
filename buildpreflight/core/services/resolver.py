"""
Command resolver — memoized search-path lookup for executables.

The search path is captured once when the resolver is created, so a
single preflight run always sees the same answers even if ``PATH``
changes underneath it. Every name is probed at most once.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from buildpreflight.adapters.shell.filesystem import FileProbe
from buildpreflight.core.errors import MissingCommandError

logger = logging.getLogger(__name__)

EXE_SUFFIX = ".exe"


class CommandResolver:
    """Answer "is program X available, and where?".

    Args:
        search_path: Search path string (``os.pathsep``-separated).
            Defaults to the ``PATH`` environment variable at construction.
        probe: Filesystem probe (default: real filesystem).
    """

    def __init__(
        self,
        search_path: str | None = None,
        probe: FileProbe | None = None,
    ) -> None:
        if search_path is None:
            search_path = os.environ.get("PATH", "")
        # An empty entry, including an empty PATH, is the current directory.
        self._search_path: tuple[Path, ...] = tuple(
            Path(entry or os.curdir) for entry in search_path.split(os.pathsep)
        )
        self._probe = probe or FileProbe()
        self._cache: dict[str, Path | None] = {}

    @property
    def search_path(self) -> tuple[Path, ...]:
        """The directories searched, in order."""
        return self._search_path

    def query(self, name: str) -> Path | None:
        """Locate ``name`` on the search path, or return None.

        A directory matches when it holds ``name`` as a regular file,
        ``name.exe``, or a ``name/name.exe`` bundle. The returned path is
        always ``<dir>/<name>``. Results, including misses, are cached
        under the exact string given.
        """
        if name in self._cache:
            return self._cache[name]

        found: Path | None = None
        for directory in self._search_path:
            candidate = directory / name
            if (
                self._probe.is_file(candidate)                                    # dir/git
                or self._probe.exists(directory / f"{name}{EXE_SUFFIX}")          # dir/git.exe
                or self._probe.exists(candidate / f"{Path(name).name}{EXE_SUFFIX}")  # dir/git/git.exe
            ):
                found = candidate
                break

        if found is not None:
            logger.debug("Resolved %s → %s", name, found)
        else:
            logger.debug("Command not found on search path: %s", name)
        self._cache[name] = found
        return found

    def require(self, name: str) -> Path:
        """Locate ``name`` or raise MissingCommandError."""
        found = self.query(name)
        if found is None:
            raise MissingCommandError(name)
        return found
