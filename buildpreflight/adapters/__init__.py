"""
Adapters — the boundary between the validator and the host system.
"""

from buildpreflight.adapters.shell.command import CommandResult, CommandRunner

__all__ = ["CommandResult", "CommandRunner"]
