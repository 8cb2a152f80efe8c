"""
Test doubles for the host system: a scripted process runner and
filesystem probes that record every path they are asked about.
"""

from __future__ import annotations

from pathlib import Path

from buildpreflight.adapters.shell.command import CommandResult, CommandRunner
from buildpreflight.adapters.shell.filesystem import FileProbe


class FakeRunner(CommandRunner):
    """Returns canned results keyed by ``(program, *args)``.

    Unknown commands behave like a program that is not installed.
    """

    def __init__(self, responses: dict[tuple[str, ...], CommandResult] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, ...]] = []

    def set_output(self, *cmd: str, stdout: str, ok: bool = True) -> None:
        self.responses[cmd] = CommandResult(ok=ok, stdout=stdout, returncode=0 if ok else 1)

    def run(self, program: str, *args: str) -> CommandResult:
        self.calls.append((program, *args))
        return self.responses.get(
            (program, *args),
            CommandResult(ok=False, stderr=f"{program}: not found"),
        )


class CountingProbe(FileProbe):
    """Real filesystem access, with a record of every path probed."""

    def __init__(self) -> None:
        self.probed: list[Path] = []

    def is_file(self, path: Path) -> bool:
        self.probed.append(path)
        return super().is_file(path)

    def exists(self, path: Path) -> bool:
        self.probed.append(path)
        return super().exists(path)


class StubProbe(CountingProbe):
    """Counting probe that pretends some paths exist and others do not.

    Paths in neither set fall through to the real filesystem.
    """

    def __init__(self, present=(), absent=()) -> None:
        super().__init__()
        self.present = {Path(p) for p in present}
        self.absent = {Path(p) for p in absent}

    def is_file(self, path: Path) -> bool:
        if path in self.present or path in self.absent:
            self.probed.append(path)
            return path in self.present
        return super().is_file(path)

    def exists(self, path: Path) -> bool:
        if path in self.present or path in self.absent:
            self.probed.append(path)
            return path in self.present
        return super().exists(path)
