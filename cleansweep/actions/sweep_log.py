"""
Sweep Log
=========

Persists one JSON log per completed sweep and replays a log
onto the filesystem to undo it.
"""

import json
import os
import re
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from cleansweep.utils.exceptions import ErrorCode, SweepLogError
from cleansweep.utils.logging_config import get_logger

logger = get_logger(__name__)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class SweepMove:
    """One file placed by a sweep.

    Attributes:
        name: File name at the source.
        src: Original absolute path.
        dest: Absolute path the file ended up at.
        deleted_from_source: True for moves, False for copies.
    """
    name: str
    src: str
    dest: str
    deleted_from_source: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted form."""
        return {
            "name": self.name,
            "src": self.src,
            "dest": self.dest,
            "deletedFromSource": self.deleted_from_source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SweepMove":
        """Create from the persisted form."""
        return cls(
            name=data.get("name") or Path(data["src"]).name,
            src=data["src"],
            dest=data["dest"],
            deleted_from_source=bool(data.get("deletedFromSource", True)),
        )


@dataclass
class SweepLog:
    """Record of one completed sweep."""
    root_folder: str
    destination: str
    mode: str = "move"
    moves: List[SweepMove] = field(default_factory=list)
    created_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "createdAt": self.created_at,
            "rootFolder": self.root_folder,
            "destination": self.destination,
            "mode": self.mode,
            "moves": [move.to_dict() for move in self.moves],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SweepLog":
        """Create from dictionary."""
        return cls(
            root_folder=data.get("rootFolder", ""),
            destination=data.get("destination", data.get("rootFolder", "")),
            mode=data.get("mode", "move"),
            moves=[SweepMove.from_dict(m) for m in data.get("moves", [])],
            created_at=data.get("createdAt", ""),
        )


@dataclass
class UndoResult:
    """Outcome of reverting a single move."""
    file: str
    success: bool
    error: Optional[str] = None


def undo(moves: List[SweepMove]) -> List[UndoResult]:
    """Revert moves in the order they were made.

    A moved file is copied back to its source and then removed from its
    destination; a copied file only has its destination removed. A
    failure on one file is reported and the rest continue.

    Args:
        moves: Moves from a sweep log.

    Returns:
        One result per move.
    """
    results = []
    for move in moves:
        dest = Path(move.dest)
        src = Path(move.src)
        if not dest.exists():
            logger.warning(f"Cannot undo {move.name}: {dest} not found")
            results.append(UndoResult(move.name, False, "Not found"))
            continue
        try:
            if move.deleted_from_source:
                src.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(str(dest), str(src))
            os.unlink(dest)
        except OSError as e:
            logger.warning(f"Cannot undo {move.name}: {e}")
            results.append(UndoResult(move.name, False, str(e)))
            continue
        logger.debug(f"Undone: {dest.name} -> {src}")
        results.append(UndoResult(move.name, True))

    restored = sum(1 for r in results if r.success)
    logger.info(f"Undo restored {restored}/{len(results)} files")
    return results


class SweepLogStore:
    """Directory of sweep logs, one JSON file per sweep."""

    PREFIX = "sweep-"
    SUFFIX = ".json"
    # "<stamp>Z-<n>" marks the n-th log saved in the same millisecond
    COLLISION = re.compile(r"^(?P<stem>.*Z)-(?P<counter>\d+)$")

    def __init__(self, log_dir: Union[str, Path]):
        """Initialize the store.

        Args:
            log_dir: Directory holding the logs; created on first save.
        """
        self.log_dir = Path(log_dir)

    def _path(self, filename: str) -> Path:
        if not filename or Path(filename).name != filename or filename in (".", ".."):
            raise SweepLogError(
                "Log name must be a plain file name",
                filename=filename,
                error_code=ErrorCode.LOG_INVALID_NAME
            )
        return self.log_dir / filename

    def _sort_key(self, filename: str):
        stem = filename[:-len(self.SUFFIX)]
        match = self.COLLISION.match(stem)
        if match:
            return match.group("stem"), int(match.group("counter"))
        return stem, 0

    def filename_for(self, log: SweepLog) -> str:
        """File name a log is stored under."""
        stamp = log.created_at.replace(":", "-").replace(".", "-")
        return f"{self.PREFIX}{stamp}{self.SUFFIX}"

    def save(self, log: SweepLog) -> str:
        """Write a log and return its file name.

        Raises:
            SweepLogError: If the log cannot be written.
        """
        filename = self.filename_for(log)
        path = self.log_dir / filename
        counter = 1
        while path.exists():
            filename = f"{Path(self.filename_for(log)).stem}-{counter}{self.SUFFIX}"
            path = self.log_dir / filename
            counter += 1

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(log.to_dict(), f, indent=2)
        except OSError as e:
            raise SweepLogError(
                f"Failed to write sweep log: {e}",
                filename=filename,
                cause=e
            )

        logger.info(f"Saved sweep log {filename} ({len(log.moves)} moves)")
        return filename

    def list_logs(self) -> List[Dict[str, Any]]:
        """Summaries of all logs, newest first.

        Unreadable logs are listed with ``error: True``.
        """
        if not self.log_dir.is_dir():
            return []

        names = sorted(
            (p.name for p in self.log_dir.iterdir() if p.name.endswith(self.SUFFIX)),
            key=self._sort_key,
            reverse=True
        )
        summaries = []
        for name in names:
            try:
                with open(self.log_dir / name, "r", encoding="utf-8") as f:
                    data = json.load(f)
                summaries.append({"filename": name, **data})
            except (OSError, ValueError, TypeError) as e:
                logger.debug(f"Unreadable sweep log {name}: {e}")
                summaries.append({"filename": name, "error": True})
        return summaries

    def load(self, filename: str) -> Optional[SweepLog]:
        """Read a log back, or None if it is missing or corrupted."""
        path = self._path(filename)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return SweepLog.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Error loading sweep log {filename}: {e}")
            return None

    def latest(self) -> Optional[str]:
        """File name of the newest log, if any."""
        for summary in self.list_logs():
            if not summary.get("error"):
                return summary["filename"]
        return None

    def delete(self, filename: str) -> bool:
        """Remove a log; False if it did not exist or could not be removed."""
        path = self._path(filename)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.warning(f"Failed to delete sweep log {filename}: {e}")
            return False
        logger.info(f"Deleted sweep log {filename}")
        return True

    def undo(self, filename: str) -> List[UndoResult]:
        """Undo the sweep recorded in ``filename``.

        Raises:
            SweepLogError: If the log is missing or unreadable.
        """
        log = self.load(filename)
        if log is None:
            raise SweepLogError(
                "Sweep log not found or unreadable",
                filename=filename,
                error_code=ErrorCode.LOG_CORRUPTED
            )
        return undo(log.moves)
