"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deduplication system.

Key Components:
---------------
- HashAlgorithm: Standardized interface for hash functions (SHA-256, xxHash).
- Hasher: Interface for computing partial and full digests of files.
- FileScanner: Interface for walking root paths and returning FileRecords.
- Deduplicator: Interface for the engine coordinating size → partial → full stages.
"""

from typing import Protocol, List, Tuple, Optional, Callable
from dedup.core.models import (
    FileRecord,
    DeduplicationParams,
    DuplicateGroup,
    DeduplicationStats,
)


class HashState(Protocol):
    """Incremental hash object, as returned by hashlib and xxhash constructors."""
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like SHA-256 or xxHash
    without affecting the rest of the deduplication logic.
    """

    name: str

    @staticmethod
    def new() -> HashState:
        """Returns a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    """Interface for hashing files. Read errors propagate as OSError."""
    def compute_partial_hash(self, file: FileRecord) -> bytes: ...
    def compute_full_hash(self, file: FileRecord) -> bytes: ...


class FileScanner(Protocol):
    def scan(
        self,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[FileRecord]:
        """
        Walk the configured roots.

        Returns:
            FileRecords in traversal order, each carrying its `order` index.
        """
        ...


class Deduplicator(Protocol):
    """
    Interface for the main deduplication engine.

    Feeds records through the size index, the partial-hash index and the
    full-content matcher, and collects statistics about each stage.
    """
    def find_duplicates(
        self,
        files: List[FileRecord],
        params: DeduplicationParams,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        ...
