"""
Tests for observability — logging setup.
"""

import logging
from pathlib import Path

import pytest

from buildpreflight.core.models.outcome import CheckOutcome
from buildpreflight.core.observability.logging_config import (
    NO_CHECK,
    CheckNameFilter,
    check_scope,
    parse_level,
    setup_logging,
)
from buildpreflight.core.use_cases.preflight import run_preflight
from tests.fakes import FakeRunner


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseLevel:
    """Tests for level name parsing."""

    def test_names(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("ERROR") == logging.ERROR

    def test_unknown_falls_back_to_warning(self):
        assert parse_level("chatty") == logging.WARNING
        assert parse_level(None) == logging.WARNING
        assert parse_level("") == logging.WARNING


class TestSetupLogging:
    """Tests for root logger setup."""

    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_file_handler_lowers_root_level(self, tmp_path: Path):
        log_file = tmp_path / "preflight.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("buildpreflight.test").debug("resolved cmake")
        for handler in root.handlers:
            handler.flush()
        assert "resolved cmake" in log_file.read_text(encoding="utf-8")

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(logging.getLogger().handlers) == 1


class TestCheckScope:
    """Tests for tagging log records with the running rule."""

    def _record(self) -> logging.LogRecord:
        record = logging.LogRecord("buildpreflight.test", logging.INFO, __file__, 1, "msg", None, None)
        CheckNameFilter().filter(record)
        return record

    def test_outside_any_rule(self):
        assert self._record().check == NO_CHECK

    def test_inside_rule(self):
        with check_scope("interpreters"):
            assert self._record().check == "interpreters"
        assert self._record().check == NO_CHECK

    def test_scope_reset_after_error(self):
        with pytest.raises(RuntimeError):
            with check_scope("lldb"):
                raise RuntimeError("boom")
        assert self._record().check == NO_CHECK

    def test_rule_name_in_log_file(self, tmp_path: Path):
        log_file = tmp_path / "preflight.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        with check_scope("cmake"):
            logging.getLogger("buildpreflight.test").debug("resolved cmake")
        logging.getLogger("buildpreflight.test").debug("after the rules")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "[cmake] buildpreflight.test" in text
        assert f"[{NO_CHECK}] buildpreflight.test" in text

    def test_driver_tags_each_rule(self, tmp_path: Path, make_config, bin_dir):
        log_file = tmp_path / "preflight.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        def noisy(ctx):
            logging.getLogger("buildpreflight.test").debug("inside noisy")
            return CheckOutcome.passed("noisy")

        run_preflight(
            make_config(), environ={"PATH": str(bin_dir)}, runner=FakeRunner(),
            on_windows=False, is_git_checkout=False, checks=[("noisy", noisy)],
        )
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "[noisy] buildpreflight.test:" in log_file.read_text(encoding="utf-8")
