"""
CleanSweep - Main Application
=============================

Command-line entry point and orchestration: list and inspect folders,
sweep them into category folders, and browse or undo past sweeps.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from cleansweep.actions import (
    FileOperations,
    FolderScanner,
    SweepLog,
    SweepLogStore,
    SweepPlanner,
    UndoResult,
    check_path,
)
from cleansweep.config import Config
from cleansweep.extraction import MetadataExtractor
from cleansweep.extraction.base import ExtractedMetadata
from cleansweep.utils.exceptions import CleanSweepError, ErrorCode, FileOperationError
from cleansweep.utils.formatting import human_size
from cleansweep.utils.logging_config import (
    LoggingConfig,
    get_logger,
    run_context,
    setup_logging,
)

logger = get_logger(__name__)


class CleanSweep:
    """Main orchestrator tying scanning, extraction and sweeping together."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize CleanSweep.

        Args:
            config: Application configuration. Uses defaults if not provided.
        """
        self.config = config or Config()
        self._init_components()

    def _init_components(self) -> None:
        """Initialize all components from the configuration."""
        organization = self.config.organization

        self.extractor = MetadataExtractor(self.config.extraction)
        self.scanner = FolderScanner(
            reserved_name=self.config.scan.reserved_folder_name,
            skip_hidden=self.config.scan.skip_hidden,
            extractor=self.extractor
        )
        self.file_ops = FileOperations(organization.log_folder_name)
        self.log_store = SweepLogStore(organization.log_directory)
        self.planner = SweepPlanner(
            self.config,
            file_ops=self.file_ops,
            log_store=self.log_store
        )

        logger.debug("All components initialized")

    def scan(self, folder: Path, deep: bool = False) -> List[Dict[str, Any]]:
        """List a folder, optionally with metadata for every file."""
        if deep:
            return [self.scanner.enrich(entry) for entry in self.scanner.scan(folder)]
        return [entry.to_dict() for entry in self.scanner.scan(folder)]

    def inspect(self, file_path: Path) -> ExtractedMetadata:
        """Sniff metadata for a single file."""
        if not Path(file_path).is_file():
            raise FileOperationError(
                "File not found",
                file_path=str(file_path),
                error_code=ErrorCode.FILE_NOT_FOUND
            )
        return self.extractor.extract(file_path)

    def sweep(
        self,
        folder: Path,
        destination: Optional[Path] = None,
        copy: Optional[bool] = None,
        dry_run: bool = False,
        force: bool = False
    ) -> SweepLog:
        """Sort the files of ``folder`` into category folders.

        Args:
            folder: Folder to sweep.
            destination: Where the output folder is created; defaults to
                ``folder``.
            copy: Copy instead of move; defaults to the configured mode.
            dry_run: Plan only, touch nothing.
            force: Sweep even a protected folder.

        Returns:
            Log of the sweep.

        Raises:
            FileOperationError: If the folder is protected or unreadable.
        """
        verdict = check_path(folder)
        if verdict.dangerous and not force:
            raise FileOperationError(
                verdict.reason,
                file_path=str(folder),
                error_code=ErrorCode.DANGEROUS_PATH
            )
        if verdict.dangerous:
            logger.warning(f"Sweeping protected folder {folder}: {verdict.reason}")

        if copy is None:
            copy = self.config.organization.copy_mode

        scanned = self.scanner.deep_scan(folder)
        plan = self.planner.plan(folder, scanned, destination)
        return self.planner.execute(plan, copy=copy, dry_run=dry_run)

    def undo(self, filename: Optional[str] = None) -> List[UndoResult]:
        """Undo a sweep, the most recent one by default.

        Raises:
            CleanSweepError: If there is no sweep to undo.
        """
        if filename is None:
            filename = self.log_store.latest()
            if filename is None:
                raise CleanSweepError("Nothing to undo", error_code=ErrorCode.FILE_NOT_FOUND)
        return self.log_store.undo(filename)

    def free_space(self, path: Path) -> int:
        """Free bytes available at ``path``."""
        return self.file_ops.free_space(path)


# =====================
# Commands
# =====================

def cmd_scan(app: CleanSweep, args) -> int:
    """List a folder."""
    records = app.scan(args.folder, deep=args.deep)

    if args.json:
        print(json.dumps(records, indent=2))
        return 0

    if not records:
        print("No files found.")
        return 0

    print(f"\n📂 {Path(args.folder).absolute()} ({len(records)} files):\n")
    for record in records:
        print(f"  {record['name']}  [{record['type']}, {record['size_human']}]")
        for key, value in record.get("metadata", {}).items():
            text = str(value).replace("\n", " ")
            if len(text) > 70:
                text = text[:67] + "..."
            print(f"      {key}: {text}")
    return 0


def cmd_inspect(app: CleanSweep, args) -> int:
    """Print the metadata of individual files."""
    status = 0
    for file_path in args.files:
        try:
            meta = app.inspect(file_path)
        except FileOperationError as e:
            print(f"✗ {file_path}: {e.message}", file=sys.stderr)
            status = 1
            continue
        print(json.dumps({"file": str(file_path), "metadata": meta}, indent=2))
    return status


def cmd_sweep(app: CleanSweep, args) -> int:
    """Sweep a folder."""
    log = app.sweep(
        args.folder,
        destination=args.dest,
        copy=True if args.copy else None,
        dry_run=args.dry_run,
        force=args.force
    )

    if not log.moves:
        print("Nothing to sweep.")
        return 0

    verb = "copied" if log.mode == "copy" else "moved"
    if args.dry_run:
        print(f"\n🔍 Dry run, {len(log.moves)} files would be {verb}:\n")
    else:
        print(f"\n✓ {len(log.moves)} files {verb}:\n")
    for move in log.moves:
        print(f"  {move.name}")
        print(f"      → {move.dest}")
    return 0


def cmd_logs(app: CleanSweep, args) -> int:
    """List, show, or delete sweep logs."""
    store = app.log_store

    if args.delete:
        if store.delete(args.delete):
            print(f"✓ Deleted {args.delete}")
            return 0
        print(f"✗ No such log: {args.delete}", file=sys.stderr)
        return 1

    if args.show:
        log = store.load(args.show)
        if log is None:
            print(f"✗ No such log: {args.show}", file=sys.stderr)
            return 1
        print(f"\n📋 {args.show} ({log.mode}, {len(log.moves)} files)")
        print(f"   Folder: {log.root_folder}\n")
        for move in log.moves:
            print(f"  {move.src}")
            print(f"      → {move.dest}")
        return 0

    summaries = store.list_logs()
    if not summaries:
        print("No sweeps yet.")
        return 0

    print(f"\n📋 Sweep logs ({len(summaries)}):\n")
    for summary in summaries:
        if summary.get("error"):
            print(f"  ✗ {summary['filename']} (unreadable)")
            continue
        count = len(summary.get("moves", []))
        print(f"  {summary['filename']}  {summary.get('mode', 'move')}, {count} files")
        print(f"      {summary.get('rootFolder', '')}")
    return 0


def cmd_undo(app: CleanSweep, args) -> int:
    """Undo a sweep."""
    results = app.undo(args.name)
    restored = [r for r in results if r.success]
    failed = [r for r in results if not r.success]

    print(f"✓ Restored {len(restored)} of {len(results)} files")
    for result in failed:
        print(f"  ✗ {result.file}: {result.error}")
    return 0 if not failed else 1


def cmd_space(app: CleanSweep, args) -> int:
    """Show free disk space."""
    print(f"{human_size(app.free_space(args.path))} free at {args.path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cleansweep",
        description="CleanSweep - Sort a messy folder into category folders"
    )
    parser.add_argument('--config', '-c', type=Path, help='Path to config.yaml')
    parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: WARNING)'
    )
    parser.add_argument('--log-file', type=Path, help='Also write JSON log lines to this file')
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    scan_parser = subparsers.add_parser("scan", help="List the files of a folder")
    scan_parser.add_argument("folder", type=Path, help="Folder to list")
    scan_parser.add_argument("--deep", action="store_true", help="Also extract metadata")
    scan_parser.add_argument("--json", action="store_true", help="Print JSON")
    scan_parser.set_defaults(func=cmd_scan)

    inspect_parser = subparsers.add_parser("inspect", help="Show metadata of files")
    inspect_parser.add_argument("files", type=Path, nargs="+", help="Files to inspect")
    inspect_parser.set_defaults(func=cmd_inspect)

    sweep_parser = subparsers.add_parser("sweep", help="Sort a folder into category folders")
    sweep_parser.add_argument("folder", type=Path, help="Folder to sweep")
    sweep_parser.add_argument("--dest", type=Path, help="Put the output folder here instead")
    sweep_parser.add_argument("--copy", action="store_true", help="Copy instead of move")
    sweep_parser.add_argument("--dry-run", action="store_true",
                              help="Show what would happen without touching files")
    sweep_parser.add_argument("--force", action="store_true",
                              help="Allow sweeping a protected folder")
    sweep_parser.set_defaults(func=cmd_sweep)

    logs_parser = subparsers.add_parser("logs", help="List past sweeps")
    logs_group = logs_parser.add_mutually_exclusive_group()
    logs_group.add_argument("--show", metavar="NAME", help="Show one sweep log")
    logs_group.add_argument("--delete", metavar="NAME", help="Delete one sweep log")
    logs_parser.set_defaults(func=cmd_logs)

    undo_parser = subparsers.add_parser("undo", help="Undo a sweep (latest by default)")
    undo_parser.add_argument("name", nargs="?", help="Sweep log file name")
    undo_parser.set_defaults(func=cmd_undo)

    space_parser = subparsers.add_parser("space", help="Show free disk space")
    space_parser.add_argument("path", type=Path, help="Any path on the disk")
    space_parser.set_defaults(func=cmd_space)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with CLI support."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging(LoggingConfig(level=args.log_level, log_file=args.log_file))

    try:
        with run_context() as run_id:
            logger.info(f"Running {args.command} as run {run_id}")
            app = CleanSweep(Config.load(args.config))
            return args.func(app, args)
    except CleanSweepError as e:
        logger.debug(f"Command failed: {e.to_dict()}")
        print(f"✗ {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled")
        return 130


if __name__ == "__main__":
    sys.exit(main())
