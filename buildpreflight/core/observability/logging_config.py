"""
Logging configuration — set up once by the CLI entry point.

Every module logs through ``logging.getLogger(__name__)``. Records
emitted while a preflight rule runs are tagged with that rule's name
(``%(check)s``), so ``--debug`` output reads as a per-rule trace::

    12:01:07 DEBUG [interpreters] buildpreflight.core.services.resolver:74 Resolved python2.7 → /usr/bin/python2.7
    12:01:07 DEBUG [lldb] buildpreflight.adapters.shell.command:51 Cannot run lldb: ...

Console level precedence:
    --debug / -v / -q  >  PREFLIGHT_LOG_LEVEL  >  WARNING

PREFLIGHT_LOG_FILE adds a file handler (level PREFLIGHT_LOG_FILE_LEVEL,
default: the console level). The file always gets the detailed format.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

NO_CHECK = "-"

_current_check: ContextVar[str] = ContextVar("preflight_check", default=NO_CHECK)

_CONSOLE_FORMATS = {
    logging.DEBUG: "%(asctime)s %(levelname)-5s [%(check)s] %(name)s:%(lineno)d %(message)s",
    logging.INFO: "%(asctime)s [%(check)s] %(message)s",
}
_FMT_PLAIN = "%(message)s"
_FMT_FILE = "%(asctime)s %(levelname)-5s [%(check)s] %(name)s:%(lineno)d %(message)s"


class CheckNameFilter(logging.Filter):
    """Stamp each record with the rule running when it was emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.check = _current_check.get()
        return True


@contextmanager
def check_scope(name: str) -> Iterator[None]:
    """Attribute log records emitted inside the block to rule ``name``."""
    token = _current_check.set(name)
    try:
        yield
    finally:
        _current_check.reset(token)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with the preflight ones.

    Args:
        level: Console level name.
        log_file: Optional path to a log file.
        log_file_level: Level for the log file, defaults to ``level``.
    """
    console_level = parse_level(level)
    handlers = [
        _handler(
            logging.StreamHandler(sys.stderr),
            console_level,
            _console_format(console_level),
            "%H:%M:%S",
        )
    ]
    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_handler(
            logging.FileHandler(log_file, encoding="utf-8"),
            file_level,
            _FMT_FILE,
            "%Y-%m-%d %H:%M:%S",
        ))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))
    logging.raiseExceptions = False


def _console_format(level: int) -> str:
    for threshold in sorted(_CONSOLE_FORMATS):
        if level <= threshold:
            return _CONSOLE_FORMATS[threshold]
    return _FMT_PLAIN


def _handler(
    handler: logging.Handler, level: int, fmt: str, datefmt: str
) -> logging.Handler:
    handler.setLevel(level)
    handler.addFilter(CheckNameFilter())
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def parse_level(level: str | None) -> int:
    """Numeric value of a level name; WARNING for blank or unknown names."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
