"""
Command orchestrator for deduplication.
Wires scanner → deduplicator → resolver for one DeduplicationParams object.
"""
from typing import List, Optional, Callable, Tuple
from dedup.core.models import DuplicateGroup, DeduplicationStats, DeduplicationParams, FileRecord, ResolutionReport
from dedup.core.scanner import FileScannerImpl
from dedup.core.deduplicator import DeduplicatorImpl
from dedup.services.duplicate_service import DuplicateResolver


class DeduplicationCommand:
    """
    Orchestrates the entire deduplication workflow:
    1. Enumerate files under every root
    2. Find duplicate groups
    3. Apply the selected action to each group

    Usage:
        params = DeduplicationParams(roots=["./photos"], action=DedupAction.SYMLINK)
        command = DeduplicationCommand()
        groups, stats = command.execute(params, progress_callback=cli_progress_printer)
        report = command.resolve(groups, params)
    """

    def __init__(self, resolver: Optional[DuplicateResolver] = None):
        self._resolver = resolver or DuplicateResolver()
        self._files: List[FileRecord] = []

    def execute(
            self,
            params: DeduplicationParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        """
        Scan the roots and find duplicates. Nothing is modified on disk.

        Args:
            params: Validated deduplication parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            Tuple of (duplicate_groups, statistics)

        Raises:
            RuntimeError: If a root path does not exist
        """
        scanner = FileScannerImpl(roots=params.roots, max_depth=params.max_depth)
        self._files = scanner.scan(progress_callback=progress_callback)

        groups, stats = DeduplicatorImpl().find_duplicates(
            self._files,
            params,
            progress_callback=progress_callback
        )
        stats.scan_errors = scanner.errors
        return groups, stats

    def resolve(
            self,
            groups: List[DuplicateGroup],
            params: DeduplicationParams,
            group_callback: Optional[Callable[[int, DuplicateGroup, ResolutionReport], None]] = None,
    ) -> ResolutionReport:
        """Apply params.action to every group."""
        return self._resolver.apply_all(
            groups, params.action, verbose=params.verbose, group_callback=group_callback)

    def get_files(self) -> List[FileRecord]:
        """Get scanned files after execution."""
        return self._files.copy()
