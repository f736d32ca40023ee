"""Utilities module for CleanSweep."""

from .logging_config import setup_logging, get_logger, run_context, LoggingConfig, Timer
from .exceptions import (
    ErrorCode,
    CleanSweepError,
    ConfigurationError,
    FileOperationError,
    ExtractionError,
    SweepLogError,
)
from .formatting import human_size

__all__ = [
    "setup_logging",
    "get_logger",
    "run_context",
    "LoggingConfig",
    "Timer",
    "ErrorCode",
    "CleanSweepError",
    "ConfigurationError",
    "FileOperationError",
    "ExtractionError",
    "SweepLogError",
    "human_size",
]
