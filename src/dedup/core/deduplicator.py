"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Pipeline-based duplicate detection over FileRecords:
    size index → (on collision) partial-hash index → (on collision) full-content matcher
"""
import time
import logging
from typing import List, Tuple, Optional, Callable

from dedup.core.models import FileRecord, DuplicateGroup, DeduplicationStats, DeduplicationParams, Stage
from dedup.core.interfaces import Deduplicator, Hasher
from dedup.core.hasher import HasherImpl, get_algorithm
from dedup.core.stages import SizeIndex, PartialHashIndex, FullContentMatcher

logger = logging.getLogger(__name__)


class DeduplicatorImpl(Deduplicator):
    """
    Owns the stage indexes for one run and collects detailed statistics.
    A fresh DeduplicatorImpl (or a fresh call) must be used per run.
    """
    def __init__(self, hasher: Hasher = None):
        self.hasher = hasher

    def find_duplicates(
        self,
        files: List[FileRecord],
        params: DeduplicationParams,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        """
        Main deduplication pipeline.
        Args:
            files: FileRecords in traversal order
            params: run parameters (minimum size and hash algorithm are used here)
            progress_callback: reports progress per stage (stage, current, total)
        Returns:
            Tuple[List[DuplicateGroup], DeduplicationStats]
        """
        stats = DeduplicationStats()
        total_start_time = time.time()

        hasher = self.hasher or HasherImpl(get_algorithm(params.algorithm))
        size_index = SizeIndex(min_size=params.min_size_bytes)
        partial_index = PartialHashIndex(hasher)
        matcher = FullContentMatcher(hasher)

        # Size and partial stages run incrementally while records stream in
        size_time = 0.0
        partial_time = 0.0
        total = len(files)
        for processed, record in enumerate(files, 1):
            start_time = time.time()
            collision = size_index.insert(record)
            size_time += time.time() - start_time

            if collision:
                start_time = time.time()
                partial_index.register(collision)
                partial_time += time.time() - start_time

            if progress_callback and (processed % 1000 == 0 or processed == total):
                progress_callback(Stage.SIZE.value, processed, total)

        size_groups = size_index.collisions()
        stats.update_stage(
            "size",
            groups_found=len(size_groups),
            files_processed=sum(len(g) for g in size_groups.values()),
            duration=size_time
        )
        partial_groups = partial_index.collisions()
        stats.update_stage(
            "partial",
            groups_found=len(partial_groups),
            files_processed=sum(len(g) for g in partial_groups.values()),
            duration=partial_time
        )

        # Full-content confirmation runs once per converged partial bucket
        start_time = time.time()
        duplicates: List[DuplicateGroup] = []
        candidates_total = sum(len(g) for g in partial_groups.values())
        candidates_done = 0
        for candidates in partial_groups.values():
            duplicates.extend(matcher.resolve(candidates))
            candidates_done += len(candidates)
            if progress_callback:
                progress_callback(Stage.FULL.value, candidates_done, candidates_total)

        duplicates.sort(key=lambda g: g.keeper.order)
        stats.update_stage(
            "full",
            groups_found=len(duplicates),
            files_processed=sum(len(g.files) for g in duplicates),
            duration=time.time() - start_time
        )

        stats.files_processed = len(size_index)
        stats.files_skipped = size_index.skipped
        stats.read_errors = len(partial_index.failures) + len(matcher.failures)
        stats.total_time = time.time() - total_start_time

        logger.info(
            f"{len(duplicates)} duplicate groups among {stats.files_processed} files "
            f"({stats.read_errors} unreadable)"
        )
        return duplicates, stats
