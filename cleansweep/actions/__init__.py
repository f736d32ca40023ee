"""Actions module for scanning folders and placing files."""

from .file_operations import FileOperations, PathCheck, check_path
from .folder_scanner import FileListingEntry, FolderScanner
from .planner import PlannedMove, SweepPlan, SweepPlanner
from .sweep_log import SweepLog, SweepLogStore, SweepMove, UndoResult, undo

__all__ = [
    "FileOperations",
    "PathCheck",
    "check_path",
    "FileListingEntry",
    "FolderScanner",
    "PlannedMove",
    "SweepPlan",
    "SweepPlanner",
    "SweepLog",
    "SweepLogStore",
    "SweepMove",
    "UndoResult",
    "undo",
]
