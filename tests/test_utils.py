"""
Tests for the logging and error helpers.
"""

import json
import logging

from cleansweep.utils.exceptions import (
    CleanSweepError,
    ErrorCode,
    FileOperationError,
    SweepLogError,
)
from cleansweep.utils.logging_config import (
    ConsoleFormatter,
    JSONFormatter,
    LoggingConfig,
    Timer,
    current_run_id,
    get_logger,
    run_context,
    setup_logging,
)


def make_record(message="hello", **extra):
    record = logging.LogRecord(
        "cleansweep.actions.planner", logging.INFO, __file__, 1, message, None, None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestExceptions:
    """Tests for the error hierarchy."""

    def test_default_codes(self):
        assert CleanSweepError("x").error_code == ErrorCode.UNKNOWN_ERROR
        assert FileOperationError("x").error_code == ErrorCode.OPERATION_FAILED
        assert SweepLogError("x").error_code == ErrorCode.LOG_WRITE_FAILED

    def test_context_goes_into_details(self):
        error = FileOperationError(
            "Cannot move",
            file_path="/tmp/a.txt",
            error_code=ErrorCode.NAME_COLLISION,
        )

        assert error.details == {"file_path": "/tmp/a.txt"}
        assert error.error_code == ErrorCode.NAME_COLLISION

    def test_none_context_is_dropped(self):
        assert SweepLogError("x", filename=None).details == {}

    def test_to_dict(self):
        cause = OSError("disk full")
        error = SweepLogError("Could not save", filename="sweep-1.json", cause=cause)

        data = error.to_dict()

        assert data["error_type"] == "SweepLogError"
        assert data["error_code"] == 1300
        assert data["details"] == {"filename": "sweep-1.json"}
        assert data["cause"] == "disk full"

    def test_str_mentions_code_and_context(self):
        text = str(FileOperationError("Missing", file_path="a.txt"))

        assert text.startswith("[OPERATION_FAILED] Missing")
        assert "file_path=a.txt" in text


class TestRunContext:
    """Tests for the per-run id."""

    def test_sets_and_restores(self):
        assert current_run_id() is None
        with run_context("abc") as run_id:
            assert run_id == "abc"
            assert current_run_id() == "abc"
        assert current_run_id() is None

    def test_generated_id(self):
        with run_context() as run_id:
            assert len(run_id) == 8


class TestFormatters:
    """Tests for the log formatters."""

    def test_json_includes_extra_fields(self):
        record = make_record(file_path="/x/a.pdf", sniffer="pdf")

        with run_context("r1"):
            entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "hello"
        assert entry["run_id"] == "r1"
        assert entry["file_path"] == "/x/a.pdf"
        assert entry["sniffer"] == "pdf"
        assert "duration_ms" not in entry

    def test_console_strips_root_name(self):
        line = ConsoleFormatter().format(make_record())

        assert line.startswith("INFO")
        assert "actions.planner: hello" in line
        assert "\033[" not in line

    def test_console_shows_run_id(self):
        with run_context("r2"):
            line = ConsoleFormatter().format(make_record())

        assert "[r2]" in line


class TestSetup:
    """Tests for logger setup."""

    def test_get_logger_prefixes_root(self):
        assert get_logger("planner").name == "cleansweep.planner"
        assert get_logger("cleansweep.main").name == "cleansweep.main"

    def test_log_file_receives_json(self, tmp_path):
        log_file = tmp_path / "logs" / "cleansweep.log"
        root = setup_logging(LoggingConfig(level="DEBUG", console=False, log_file=log_file))
        try:
            get_logger("tests").info("written", extra={"operation": "scan"})
            for handler in root.handlers:
                handler.flush()
        finally:
            setup_logging(LoggingConfig(level="WARNING", console=False))

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "written"
        assert entry["operation"] == "scan"

    def test_timer_records_duration(self):
        logger = get_logger("tests")
        with Timer(logger, "sniff") as timer:
            pass

        assert timer.duration_ms >= 0
