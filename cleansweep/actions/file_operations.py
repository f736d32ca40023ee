"""
File Operations
===============

Safe file operations for carrying out a sweep: move or copy with
collision-safe renaming, delete, folder creation, subfolder listing and
free-space queries, plus protection against sweeping system folders.
"""

import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from cleansweep.utils.exceptions import ErrorCode, FileOperationError
from cleansweep.utils.logging_config import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

WINDOWS_PROTECTED = (
    'c:/', 'c:/windows', 'c:/windows/system32', 'c:/windows/syswow64',
    'c:/program files', 'c:/program files (x86)', 'c:/programdata', 'c:/users',
    'c:/$recycle.bin', 'c:/recovery', 'c:/boot', 'c:/system volume information',
)
UNIX_PROTECTED = (
    '/', '/bin', '/sbin', '/usr', '/usr/bin', '/usr/sbin', '/usr/lib',
    '/usr/local', '/etc', '/var', '/sys', '/proc', '/dev', '/boot', '/lib',
    '/lib64', '/opt', '/root', '/tmp',
)
DRIVE_ROOT = re.compile(r"^[a-z]:/?$")

MAX_COLLISION_SUFFIX = 10000


@dataclass(frozen=True)
class PathCheck:
    """Result of a dangerous-path check."""
    dangerous: bool
    reason: str = ""


def _normalize(path: PathLike) -> str:
    normalized = os.path.abspath(str(path)).replace("\\", "/").lower()
    if len(normalized) > 1 and normalized.endswith("/") and not DRIVE_ROOT.match(normalized):
        normalized = normalized.rstrip("/")
    return normalized


def check_path(folder: PathLike, home: Optional[PathLike] = None) -> PathCheck:
    """Check whether a folder is too dangerous to sweep.

    Args:
        folder: Folder chosen by the user.
        home: Home directory to protect; defaults to the current user's.

    Returns:
        PathCheck describing the verdict.
    """
    normalized = _normalize(folder)
    label = Path(str(folder)).name or str(folder)

    for protected in WINDOWS_PROTECTED + UNIX_PROTECTED:
        if normalized == protected or normalized + "/" == protected:
            return PathCheck(True, f'"{label}" is a protected system directory.')

    home_dir = _normalize(home if home is not None else Path.home())
    if normalized == home_dir:
        return PathCheck(
            True,
            "Your user profile root is protected. Choose a subfolder like Desktop or Downloads."
        )

    if DRIVE_ROOT.match(normalized):
        return PathCheck(True, "Drive roots are protected. Choose a subfolder.")

    return PathCheck(False)


class FileOperations:
    """Move/copy/delete primitives with automatic conflict resolution."""

    def __init__(self, log_folder_name: str = "CleanUpLog"):
        """Initialize file operations.

        Args:
            log_folder_name: Folder hidden from subfolder listings.
        """
        self.log_folder_name = log_folder_name

    def move_or_copy(self, source: PathLike, dest: PathLike, copy: bool = False) -> Path:
        """Move or copy a file to ``dest``.

        If ``dest`` exists, the first free ``"<stem> (N)<suffix>"`` is
        used instead. A move that cannot be done by rename (for example
        across filesystems) falls back to copy then delete.

        Args:
            source: File to move or copy.
            dest: Desired destination file path.
            copy: Copy instead of move.

        Returns:
            Final destination path.

        Raises:
            FileOperationError: If the operation fails.
        """
        source = Path(source)
        dest = Path(dest)

        if not source.is_file():
            raise FileOperationError(
                "Source file does not exist",
                file_path=str(source),
                error_code=ErrorCode.FILE_NOT_FOUND
            )

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(
                f"Cannot create destination folder: {e}",
                file_path=str(dest.parent),
                cause=e
            )

        final_dest = self.resolve_conflict(dest)

        try:
            if copy:
                shutil.copy2(str(source), str(final_dest))
                logger.info(f"Copied: {source.name} -> {final_dest}")
            else:
                self._move(source, final_dest)
                logger.info(f"Moved: {source.name} -> {final_dest}")
        except OSError as e:
            raise FileOperationError(
                f"Failed to {'copy' if copy else 'move'} file: {e}",
                file_path=str(source),
                cause=e
            )

        return final_dest

    def _move(self, source: Path, dest: Path) -> None:
        try:
            os.rename(source, dest)
        except OSError as e:
            logger.debug(f"Rename failed ({e}), copying {source.name} instead")
            shutil.copy2(str(source), str(dest))
            os.unlink(source)

    def resolve_conflict(self, dest_path: PathLike) -> Path:
        """Return ``dest_path`` or the first free ``"<stem> (N)<suffix>"``.

        Raises:
            FileOperationError: If no free name is found.
        """
        dest_path = Path(dest_path)
        if not dest_path.exists():
            return dest_path

        stem = dest_path.stem
        suffix = dest_path.suffix
        parent = dest_path.parent

        for counter in range(1, MAX_COLLISION_SUFFIX):
            candidate = parent / f"{stem} ({counter}){suffix}"
            if not candidate.exists():
                return candidate

        raise FileOperationError(
            "Too many files with same name",
            file_path=str(dest_path),
            error_code=ErrorCode.NAME_COLLISION
        )

    def delete_file(self, file_path: PathLike) -> None:
        """Delete a file.

        Raises:
            FileOperationError: If the file is missing or cannot be removed.
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            raise FileOperationError(
                "File not found",
                file_path=str(file_path),
                error_code=ErrorCode.FILE_NOT_FOUND
            )
        try:
            file_path.unlink()
            logger.info(f"Deleted: {file_path}")
        except OSError as e:
            raise FileOperationError(
                f"Failed to delete file: {e}",
                file_path=str(file_path),
                cause=e
            )

    def create_folder(self, folder: PathLike) -> Path:
        """Create a folder and its parents if missing."""
        folder = Path(folder)
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(
                f"Failed to create folder: {e}",
                file_path=str(folder),
                cause=e
            )
        return folder

    def list_subfolders(self, folder: PathLike) -> List[str]:
        """Names of the subfolders of ``folder``, without the log folder.

        A missing folder has no subfolders.
        """
        folder = Path(folder)
        if not folder.exists():
            return []
        try:
            return sorted(
                child.name for child in folder.iterdir()
                if child.is_dir() and child.name != self.log_folder_name
            )
        except OSError as e:
            raise FileOperationError(
                f"Cannot list folder: {e}",
                file_path=str(folder),
                error_code=ErrorCode.LISTING_FAILED,
                cause=e
            )

    def free_space(self, path: PathLike) -> int:
        """Free bytes on the filesystem holding ``path``.

        Walks up to the nearest existing ancestor so a destination that
        has not been created yet can be checked.
        """
        target = Path(path).absolute()
        while not target.exists() and target.parent != target:
            target = target.parent
        try:
            return shutil.disk_usage(str(target)).free
        except OSError as e:
            raise FileOperationError(
                f"Cannot query free space: {e}",
                file_path=str(path),
                cause=e
            )
