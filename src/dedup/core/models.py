"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for file enumeration, duplicate detection and resolution.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union, Tuple
from enum import Enum

from dedup.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class DedupAction(Enum):
    """
    What to do with the non-keeper members of a duplicate group.
    """
    REPORT = "report"
    SYMLINK = "symlink"
    REMOVE = "remove"
    TRASH = "trash"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            DedupAction.REPORT: "Report only",
            DedupAction.SYMLINK: "Replace by symlink",
            DedupAction.REMOVE: "Remove",
            DedupAction.TRASH: "Move to trash",
        }
        return mapping.get(self, self.value)

    @property
    def is_mutating(self) -> bool:
        return self is not DedupAction.REPORT

    def __repr__(self) -> str:
        return self.value


class HashAlgorithmName(Enum):
    SHA256 = "sha256"
    XXHASH = "xxhash"

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    SIZE = "Size grouping"
    PARTIAL = "Partial Hash"
    FULL = "Full Hash"


# ======================
#  Core Data Models
# ======================

@dataclass
class FileHashes:
    partial: Optional[bytes] = None
    full: Optional[bytes] = None

    def __post_init__(self):
        fields = getattr(self, '__dataclass_fields__', {})
        for key in fields:
            value = getattr(self, key)
            if value is not None and not isinstance(value, bytes):
                raise ValueError(f"Field '{key}' must be bytes or None")


@dataclass(frozen=True)
class FileRecord:
    """
    A single regular file discovered during enumeration.
    `order` is the position in traversal order and decides which file is kept.
    """
    path: str
    size: int  # in bytes
    depth: int = 1
    order: int = 0
    mtime_ns: Optional[int] = None

    def __post_init__(self):
        if self.size < 0:
            raise ValueError("File size cannot be negative")

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass
class DuplicateGroup:
    """
    Files verified to have byte-identical content.
    Members are kept in enumeration order, so the first one is the keeper.
    """
    size: int
    files: List[FileRecord]
    digest: Optional[bytes] = None

    def __post_init__(self):
        self.files = sorted(self.files, key=lambda f: f.order)

    @property
    def keeper(self) -> FileRecord:
        return self.files[0]

    @property
    def duplicates(self) -> List[FileRecord]:
        return self.files[1:]

    @property
    def wasted_space(self) -> int:
        """Bytes that removing every duplicate would free."""
        return self.size * len(self.duplicates)

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}>"


@dataclass
class ReadFailure:
    path: str
    stage: str
    message: str


@dataclass
class ResolutionFailure:
    path: str
    message: str


@dataclass
class ResolutionReport:
    """
    Outcome of applying an action to one or more duplicate groups.
    """
    action: DedupAction = DedupAction.REPORT
    groups_processed: int = 0
    actions_performed: int = 0
    bytes_saved: int = 0
    lines: List[str] = field(default_factory=list)
    failures: List[ResolutionFailure] = field(default_factory=list)

    def merge(self, other: "ResolutionReport") -> None:
        self.groups_processed += other.groups_processed
        self.actions_performed += other.actions_performed
        self.bytes_saved += other.bytes_saved
        self.lines.extend(other.lines)
        self.failures.extend(other.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


class DeduplicationStats:
    """
    Statistics collected during the deduplication process.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_processed: int = 0
        self.files_skipped: int = 0
        self.read_errors: int = 0
        self.scan_errors: int = 0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def print_summary(self) -> str:
        labels = {
            "size": "Size Groups",
            "partial": "Partial Hash Groups",
            "full": "Full Content Hash Groups",
        }

        lines = [
            "Deduplication Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Files: {self.files_processed} processed / {self.files_skipped} below minimum size"
            f" / {self.read_errors} unreadable",
            f"Scan errors (unreadable directories or entries): {self.scan_errors}\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


# =============================
# Run configuration
# =============================

@dataclass
class DeduplicationParams:
    """Parameters for a deduplication run with validation."""
    roots: List[str]
    min_size_bytes: int = 0
    max_depth: Optional[int] = None
    action: DedupAction = DedupAction.REPORT
    algorithm: HashAlgorithmName = HashAlgorithmName.SHA256
    verbose: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.roots:
            raise ValueError("At least one path is required")

        if any(not root for root in self.roots):
            raise ValueError("Path cannot be empty")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError("Maximum depth must be at least 1")

    @staticmethod
    def from_human_readable(
            roots: List[str],
            min_size_str: str = "0",
            max_depth: Optional[int] = None,
            action: DedupAction = DedupAction.REPORT,
            algorithm: HashAlgorithmName = HashAlgorithmName.SHA256,
            verbose: bool = False,
    ) -> 'DeduplicationParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing.
        """
        return DeduplicationParams(
            roots=list(roots),
            min_size_bytes=ConvertUtils.human_to_bytes(min_size_str),
            max_depth=max_depth,
            action=action,
            algorithm=algorithm,
            verbose=verbose,
        )


PartialKey = Tuple[int, bytes]
