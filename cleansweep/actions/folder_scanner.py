"""
Folder Scanner
==============

Lists the files of a folder as immutable snapshots and optionally
enriches each one with sniffed metadata.
"""

import os
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from cleansweep.extraction.base import ExtractedMetadata
from cleansweep.extraction.dispatcher import MetadataExtractor
from cleansweep.utils.exceptions import ErrorCode, FileOperationError
from cleansweep.utils.formatting import human_size
from cleansweep.utils.logging_config import get_logger

logger = get_logger(__name__)

NO_EXTENSION = "(no ext)"


@dataclass(frozen=True)
class FileListingEntry:
    """Snapshot of one file in a listed folder.

    Attributes:
        name: File name.
        path: Absolute path.
        type: Lower-cased extension, or "(no ext)".
        size: Size in bytes.
        size_human: Size rendered by human_size.
        modified: Modification time, ISO-8601 UTC.
        created: Creation time (birth time where available), ISO-8601 UTC.
    """
    name: str
    path: str
    type: str
    size: int
    size_human: str
    modified: str
    created: str

    @property
    def extension(self) -> str:
        """Extension, or "" for files without one."""
        return "" if self.type == NO_EXTENSION else self.type

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


def _iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def build_entry(file_path: Path, stat_info: os.stat_result) -> FileListingEntry:
    """Create a listing entry from a path and its stat result."""
    created = getattr(stat_info, "st_birthtime", None) or stat_info.st_ctime
    return FileListingEntry(
        name=file_path.name,
        path=str(file_path.absolute()),
        type=file_path.suffix.lower() or NO_EXTENSION,
        size=stat_info.st_size,
        size_human=human_size(stat_info.st_size),
        modified=_iso(stat_info.st_mtime),
        created=_iso(created),
    )


class FolderScanner:
    """Lists the top level of a folder for a sweep."""

    def __init__(
        self,
        reserved_name: str = "CleanUp",
        skip_hidden: bool = True,
        extractor: Optional[MetadataExtractor] = None
    ):
        """Initialize the scanner.

        Args:
            reserved_name: Output folder name that is never listed.
            skip_hidden: Skip names starting with a dot.
            extractor: Metadata extractor used by deep scans.
        """
        self.reserved_name = reserved_name
        self.skip_hidden = skip_hidden
        self.extractor = extractor or MetadataExtractor()

    def scan(self, folder: Union[str, Path]) -> List[FileListingEntry]:
        """List the regular files directly inside ``folder``.

        Args:
            folder: Folder to list.

        Returns:
            Entries sorted by name.

        Raises:
            FileOperationError: If the folder cannot be listed.
        """
        folder = Path(folder)
        try:
            children = list(os.scandir(folder))
        except FileNotFoundError as e:
            raise FileOperationError(
                "Folder does not exist",
                file_path=str(folder),
                error_code=ErrorCode.FILE_NOT_FOUND,
                cause=e
            )
        except OSError as e:
            raise FileOperationError(
                f"Cannot list folder: {e}",
                file_path=str(folder),
                error_code=ErrorCode.LISTING_FAILED,
                cause=e
            )

        entries = []
        for child in children:
            if child.name == self.reserved_name:
                continue
            if self.skip_hidden and child.name.startswith('.'):
                continue
            try:
                if not child.is_file(follow_symlinks=False):
                    continue
                entries.append(build_entry(Path(child.path), child.stat(follow_symlinks=False)))
            except OSError as e:
                logger.debug(f"Skipping unreadable entry {child.name}: {e}")

        entries.sort(key=lambda entry: entry.name.lower())
        logger.info(f"Listed {len(entries)} files in {folder}")
        return entries

    def inspect(self, entry: FileListingEntry) -> ExtractedMetadata:
        """Sniff metadata for one listed file."""
        return self.extractor.extract(entry.path, entry.extension)

    def deep_scan(
        self,
        folder: Union[str, Path]
    ) -> List[Tuple[FileListingEntry, ExtractedMetadata]]:
        """List ``folder`` and sniff every file.

        Extraction failures show up as an ``error`` field on the
        affected file; the scan always continues.
        """
        scanned = [(entry, self.inspect(entry)) for entry in self.scan(folder)]
        failures = sum(1 for _, meta in scanned if "error" in meta)
        if failures:
            logger.warning(f"Metadata extraction failed for {failures} file(s)")
        return scanned

    def enrich(self, entry: FileListingEntry) -> Dict[str, Any]:
        """Return the entry as a dictionary with a ``metadata`` key."""
        record = entry.to_dict()
        record["metadata"] = self.inspect(entry)
        return record
