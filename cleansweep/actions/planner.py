"""
Sweep Planner
=============

Decides a category folder for every scanned file and carries the
resulting plan out, recording each placement in a sweep log.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from cleansweep.actions.file_operations import FileOperations
from cleansweep.actions.folder_scanner import FileListingEntry
from cleansweep.actions.sweep_log import SweepLog, SweepLogStore, SweepMove
from cleansweep.config.categories import (
    CATEGORY_MAPPING,
    CategoryMapping,
    FileCategory,
    ImageSubcategory,
)
from cleansweep.config.settings import Config
from cleansweep.extraction.base import ExtractedMetadata
from cleansweep.utils.exceptions import CleanSweepError, ErrorCode, FileOperationError
from cleansweep.utils.formatting import human_size
from cleansweep.utils.logging_config import Timer, get_logger

logger = get_logger(__name__)


@dataclass
class PlannedMove:
    """A scanned file and the folder it will be placed in."""
    entry: FileListingEntry
    metadata: ExtractedMetadata
    target_dir: Path
    category: str
    subcategory: Optional[str] = None

    @property
    def target(self) -> Path:
        """Intended destination before collision renaming."""
        return self.target_dir / self.entry.name


@dataclass
class SweepPlan:
    """Ordered moves for one sweep."""
    root_folder: Path
    destination: Path
    moves: List[PlannedMove] = field(default_factory=list)

    @property
    def total_bytes(self) -> int:
        return sum(move.entry.size for move in self.moves)

    def by_category(self) -> Dict[str, int]:
        """Number of planned files per category folder."""
        counts: Dict[str, int] = {}
        for move in self.moves:
            counts[move.category] = counts.get(move.category, 0) + 1
        return counts


class SweepPlanner:
    """Turns a folder listing into a sweep and executes it."""

    def __init__(
        self,
        config: Optional[Config] = None,
        category_mapping: Optional[CategoryMapping] = None,
        file_ops: Optional[FileOperations] = None,
        log_store: Optional[SweepLogStore] = None
    ):
        """Initialize the planner.

        Args:
            config: Application configuration. Uses defaults if not provided.
            category_mapping: Extension to category table.
            file_ops: File operations used to place files.
            log_store: Where completed sweeps are recorded.
        """
        self.config = config or Config()
        self.category_mapping = category_mapping or CATEGORY_MAPPING
        organization = self.config.organization
        self.file_ops = file_ops or FileOperations(organization.log_folder_name)
        self.log_store = log_store or SweepLogStore(organization.log_directory)

    def categorize(
        self,
        entry: FileListingEntry,
        metadata: ExtractedMetadata
    ) -> Tuple[str, Optional[str]]:
        """Pick the category and subcategory folder names for a file."""
        if metadata.get("isScreenshot") or metadata.get("likelyScreenshot"):
            return FileCategory.IMAGES.value, ImageSubcategory.SCREENSHOT.value

        category, subcategory = self.category_mapping.get_category(entry.extension)
        if not self.config.organization.use_subcategories:
            subcategory = None
        return category.value, subcategory

    def plan(
        self,
        folder: Union[str, Path],
        scanned: Sequence[Tuple[FileListingEntry, ExtractedMetadata]],
        destination: Optional[Union[str, Path]] = None
    ) -> SweepPlan:
        """Build the plan for a scanned folder.

        Args:
            folder: The swept folder.
            scanned: Entries with their metadata, as from a deep scan.
            destination: Folder that receives the output folder; defaults
                to the swept folder itself.

        Returns:
            Plan with one move per scanned file.
        """
        folder = Path(folder).absolute()
        destination = Path(destination).absolute() if destination else folder
        output_root = destination / self.config.organization.output_folder_name

        plan = SweepPlan(root_folder=folder, destination=destination)
        for entry, metadata in scanned:
            category, subcategory = self.categorize(entry, metadata)
            target_dir = output_root / category
            if subcategory:
                target_dir = target_dir / subcategory
            plan.moves.append(PlannedMove(entry, metadata, target_dir, category, subcategory))

        logger.info(f"Planned {len(plan.moves)} files from {folder}")
        return plan

    def execute(
        self,
        plan: SweepPlan,
        copy: bool = False,
        dry_run: bool = False
    ) -> SweepLog:
        """Carry out a plan.

        Files that fail to move are skipped and logged. The resulting log
        is saved unless this is a dry run or nothing was placed.

        Args:
            plan: Plan from ``plan``.
            copy: Copy files instead of moving them.
            dry_run: Only report the intended destinations.

        Returns:
            Log of the placements that happened (or would happen).

        Raises:
            FileOperationError: If a copy would not fit on the destination.
        """
        log = SweepLog(
            root_folder=str(plan.root_folder),
            destination=str(plan.destination),
            mode="copy" if copy else "move"
        )

        if dry_run:
            log.moves = [
                SweepMove(m.entry.name, m.entry.path, str(m.target), not copy)
                for m in plan.moves
            ]
            logger.info(f"Dry run: {len(log.moves)} files would be placed")
            return log

        if copy:
            self._check_space(plan)

        with Timer(logger, "sweep"):
            for move in plan.moves:
                try:
                    final = self.file_ops.move_or_copy(move.entry.path, move.target, copy=copy)
                except CleanSweepError as e:
                    logger.error(f"Skipping {move.entry.name}: {e.message}")
                    continue
                log.moves.append(
                    SweepMove(move.entry.name, move.entry.path, str(final), not copy)
                )

        skipped = len(plan.moves) - len(log.moves)
        if skipped:
            logger.warning(f"{skipped} file(s) could not be placed")

        if log.moves:
            self.log_store.save(log)
        return log

    def _check_space(self, plan: SweepPlan) -> None:
        needed = plan.total_bytes
        free = self.file_ops.free_space(plan.destination)
        if needed > free:
            raise FileOperationError(
                f"Not enough free space: need {human_size(needed)}, have {human_size(free)}",
                file_path=str(plan.destination),
                error_code=ErrorCode.OPERATION_FAILED
            )
