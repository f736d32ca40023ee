"""
Exceptions
==========

Error types raised by CleanSweep. Each carries an ``ErrorCode`` and a
``details`` dict with the path, log name or config key involved, so the
CLI can print the message while logs keep the structured context.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Numeric error codes, grouped by the layer that raises them."""

    # General (1000s)
    UNKNOWN_ERROR = 1000
    CONFIGURATION_ERROR = 1001
    FILE_NOT_FOUND = 1002
    PERMISSION_DENIED = 1003
    DANGEROUS_PATH = 1004

    # File operations (1100s)
    OPERATION_FAILED = 1100
    NAME_COLLISION = 1101
    LISTING_FAILED = 1102

    # Extraction (1200s)
    EXTRACTION_FAILED = 1200
    UNREADABLE_FILE = 1201

    # Sweep logs (1300s)
    LOG_WRITE_FAILED = 1300
    LOG_INVALID_NAME = 1301
    LOG_CORRUPTED = 1302


class CleanSweepError(Exception):
    """Base class for CleanSweep errors.

    Keyword arguments beyond the named ones (``file_path=``,
    ``filename=``, ``config_key=`` ...) are merged into ``details`` when
    they are not None.

    Attributes:
        message: Text shown to the user.
        error_code: Code identifying the failure.
        details: Structured context.
        cause: Lower-level exception, if any.
    """

    default_code = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        **context: Any
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = dict(details or {})
        self.details.update({k: v for k, v in context.items() if v is not None})
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.error_code.name}] {self.message}"]
        if self.details:
            parts.append(", ".join(f"{k}={v}" for k, v in self.details.items()))
        if self.cause is not None:
            parts.append(f"caused by {type(self.cause).__name__}: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for JSON logs."""
        return {
            "error_type": type(self).__name__,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "message": self.message,
            "details": self.details,
            "cause": None if self.cause is None else str(self.cause),
        }


class ConfigurationError(CleanSweepError):
    """Bad YAML or a value of the wrong type in config.yaml.

    Context: ``config_key``, ``expected_type``.
    """

    default_code = ErrorCode.CONFIGURATION_ERROR


class FileOperationError(CleanSweepError):
    """A scan, move, copy, delete or space query failed, or the folder is protected.

    Context: ``file_path``.
    """

    default_code = ErrorCode.OPERATION_FAILED


class ExtractionError(CleanSweepError):
    """A sniffer could not run on a file.

    Only raised inside the dispatcher, which turns it into the ``error``
    field of the metadata. Context: ``file_path``, ``sniffer``.
    """

    default_code = ErrorCode.EXTRACTION_FAILED


class SweepLogError(CleanSweepError):
    """A sweep log could not be written, found or parsed.

    Context: ``filename``.
    """

    default_code = ErrorCode.LOG_WRITE_FAILED
