"""
Core deduplication engine: scanner, hasher, stage indexes and pipeline orchestrator.

- FileScannerImpl: multi-root directory traversal with depth limit
- HasherImpl + Sha256AlgorithmImpl / XXHashAlgorithmImpl: bounded partial/full content hashing
- SizeIndex, PartialHashIndex, FullContentMatcher: the three refinement stages
- DeduplicatorImpl: runs records through the stages (size → partial hash → full hash)
- Models: FileRecord, DuplicateGroup and configuration objects

Nothing here mutates the filesystem; see dedup.services for that.
"""

from .scanner import FileScannerImpl
from .hasher import HasherImpl, Sha256AlgorithmImpl, XXHashAlgorithmImpl, DeduplicationConfig, get_algorithm
from .stages import SizeIndex, PartialHashIndex, FullContentMatcher
from .deduplicator import DeduplicatorImpl
from .models import (
    FileRecord, DuplicateGroup, DedupAction, HashAlgorithmName, DeduplicationParams,
    DeduplicationStats, ResolutionReport, FileHashes)

__all__ = [
    "FileScannerImpl",
    "HasherImpl",
    "Sha256AlgorithmImpl",
    "XXHashAlgorithmImpl",
    "DeduplicationConfig",
    "get_algorithm",
    "SizeIndex",
    "PartialHashIndex",
    "FullContentMatcher",
    "DeduplicatorImpl",
    "FileRecord",
    "DuplicateGroup",
    "DedupAction",
    "HashAlgorithmName",
    "DeduplicationParams",
    "DeduplicationStats",
    "ResolutionReport",
    "FileHashes",
]
