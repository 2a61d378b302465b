"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Duplicate detection stages: size index, partial-hash index, full-content matcher.

STAGE CONTRACTS
---------------
SizeIndex          : insert(record) -> bucket copy once a size is seen twice, else None
PartialHashIndex   : register(members) -> buckets keyed by (size, partial digest)
                     that reached 2+ members during this call
FullContentMatcher : resolve(candidates) -> DuplicateGroups of byte-identical files

Each stage owns its own mapping and is passed explicitly by the orchestrator,
so every stage can be exercised in isolation.

ERRORS
------
Read failures (OSError) in the hashing stages exclude the affected record,
are logged as warnings and collected in `failures`. They never propagate.
"""

import logging
from collections import defaultdict
from typing import List, Dict, Optional, Set

from dedup.core.models import FileRecord, DuplicateGroup, ReadFailure, PartialKey, Stage
from dedup.core.interfaces import Hasher

logger = logging.getLogger(__name__)


class SizeIndex:
    """
    Maps file size to the records of that size, in insertion order.
    Records below `min_size` are counted and dropped before insertion.
    """

    def __init__(self, min_size: int = 0):
        self.min_size = min_size
        self.buckets: Dict[int, List[FileRecord]] = {}
        self.skipped = 0

    def insert(self, record: FileRecord) -> Optional[List[FileRecord]]:
        if record.size < self.min_size:
            self.skipped += 1
            return None

        bucket = self.buckets.setdefault(record.size, [])
        bucket.append(record)
        if len(bucket) >= 2:
            return list(bucket)
        return None

    def collisions(self) -> Dict[int, List[FileRecord]]:
        """Size buckets holding two or more records."""
        return {size: files for size, files in self.buckets.items() if len(files) >= 2}

    def __len__(self):
        return sum(len(files) for files in self.buckets.values())


class PartialHashIndex:
    """
    Maps (size, partial digest) to records. Only files whose size collided are
    ever hashed here, and each of them at most once.
    """

    def __init__(self, hasher: Hasher):
        self.hasher = hasher
        self.buckets: Dict[PartialKey, List[FileRecord]] = {}
        self.failures: List[ReadFailure] = []
        self._registered: Set[str] = set()

    def register(self, members: List[FileRecord]) -> List[List[FileRecord]]:
        """
        Hash every member not registered yet and file it under (size, digest).
        Returns the buckets touched by this call that now hold 2+ records.
        """
        touched: List[PartialKey] = []
        for record in members:
            if record.path in self._registered:
                continue
            self._registered.add(record.path)

            try:
                digest = self.hasher.compute_partial_hash(record)
            except OSError as e:
                logger.warning(f"Skipping {record.path}: cannot read for partial hash ({e})")
                self.failures.append(ReadFailure(record.path, Stage.PARTIAL.value, str(e)))
                continue

            key = (record.size, digest)
            self.buckets.setdefault(key, []).append(record)
            if key not in touched:
                touched.append(key)

        return [list(self.buckets[key]) for key in touched if len(self.buckets[key]) >= 2]

    def collisions(self) -> Dict[PartialKey, List[FileRecord]]:
        """Partial-hash buckets holding two or more records."""
        return {key: files for key, files in self.buckets.items() if len(files) >= 2}


class FullContentMatcher:
    """
    Confirms duplicates by full-content digest. Digests are cached by the
    hasher, so resolving a grown candidate set only reads the new files.
    """

    def __init__(self, hasher: Hasher):
        self.hasher = hasher
        self.failures: List[ReadFailure] = []
        self._failed: Set[str] = set()

    def resolve(self, candidates: List[FileRecord]) -> List[DuplicateGroup]:
        by_digest: Dict[bytes, List[FileRecord]] = defaultdict(list)

        for record in sorted(candidates, key=lambda f: f.order):
            if record.path in self._failed:
                continue
            try:
                digest = self.hasher.compute_full_hash(record)
            except OSError as e:
                logger.warning(f"Skipping {record.path}: cannot read for full hash ({e})")
                self.failures.append(ReadFailure(record.path, Stage.FULL.value, str(e)))
                self._failed.add(record.path)
                continue
            by_digest[digest].append(record)

        groups = []
        for digest, files in by_digest.items():
            if len(files) >= 2:
                groups.append(DuplicateGroup(size=files[0].size, files=files, digest=digest))

        # Keep group order stable: by keeper position in traversal
        groups.sort(key=lambda g: g.keeper.order)
        return groups
