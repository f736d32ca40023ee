"""
Logging Configuration
=====================

Console and rotating JSON-file logging for CleanSweep. Every record
carries the id of the run it belongs to, so the lines of one sweep can be
picked out of a shared log file.
"""

import json
import logging
import logging.handlers
import sys
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

ROOT_LOGGER_NAME = "cleansweep"

# Structured fields passed through ``extra=`` that end up in JSON output
EXTRA_FIELDS = ("file_path", "operation", "duration_ms", "sniffer", "error_code")

_run_state = threading.local()


def current_run_id() -> Optional[str]:
    """Id of the run active on this thread, if any."""
    return getattr(_run_state, "run_id", None)


@contextmanager
def run_context(run_id: Optional[str] = None) -> Iterator[str]:
    """Tag every record logged on this thread with a run id.

    Args:
        run_id: Id to use; a short random one is generated if omitted.

    Yields:
        The active run id.
    """
    previous = current_run_id()
    _run_state.run_id = run_id or uuid.uuid4().hex[:8]
    try:
        yield _run_state.run_id
    finally:
        _run_state.run_id = previous


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "run_id": current_run_id(),
            "message": record.getMessage(),
        }
        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Compact single-line formatter, colored on terminals."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<8}"
        if self.use_color and record.levelname in self.COLORS:
            level = f"{self.COLORS[record.levelname]}{level}{self.RESET}"

        name = record.name
        if name.startswith(ROOT_LOGGER_NAME + "."):
            name = name[len(ROOT_LOGGER_NAME) + 1:]

        run_id = current_run_id()
        prefix = f"{level} [{run_id}] " if run_id else f"{level} "
        line = f"{prefix}{name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


@dataclass
class LoggingConfig:
    """Settings for ``setup_logging``.

    Attributes:
        level: Threshold for the ``cleansweep`` logger tree.
        console: Write to stderr.
        json_console: Use JSON lines on the console too.
        log_file: Rotating JSON log file; None disables file logging.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.
    """
    level: str = "INFO"
    console: bool = True
    json_console: bool = False
    log_file: Optional[Path] = None
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 3


def setup_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """Configure the ``cleansweep`` logger tree, replacing earlier handlers.

    Console output goes to stderr so that command output on stdout stays
    machine-readable.

    Args:
        config: Logging settings. Uses defaults if not provided.

    Returns:
        The configured root ``cleansweep`` logger.
    """
    config = config or LoggingConfig()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if config.console:
        console = logging.StreamHandler(sys.stderr)
        if config.json_console:
            console.setFormatter(JSONFormatter())
        else:
            console.setFormatter(ConsoleFormatter(use_color=sys.stderr.isatty()))
        root.addHandler(console)

    if config.log_file is not None:
        log_file = Path(config.log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(JSONFormatter())
        root.addHandler(file_handler)

    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, always inside the ``cleansweep`` tree."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class Timer:
    """Measures a block and logs how long it took.

    Example:
        with Timer(logger, "sweep") as timer:
            ...
        timer.duration_ms
    """

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.duration_ms = 0.0
        self._started = 0.0

    def __enter__(self) -> "Timer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.duration_ms = round((time.perf_counter() - self._started) * 1000, 2)
        outcome = "failed" if exc_type else "finished"
        self.logger.info(
            f"{self.operation} {outcome} in {self.duration_ms} ms",
            extra={"operation": self.operation, "duration_ms": self.duration_ms},
        )
        return False
