"""
dedup — find byte-identical files across directory trees and deduplicate them.

Core features:
- Progressive matching: size → partial hash (first 64 KiB) → full content hash
- SHA-256 by default, xxHash64 on request
- Replace duplicates by relative symlinks, remove them, or move them to the system trash (via send2trash)
- CLI interface for headless/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("dedup")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API — only what users should import directly
from dedup.commands import DeduplicationCommand
from dedup.core import (
    DeduplicationParams, DedupAction, HashAlgorithmName, FileRecord, DuplicateGroup, ResolutionReport)
from dedup.utils.convert_utils import ConvertUtils
from dedup.services import DuplicateResolver
from dedup.services.file_service import FileService

__all__ = [
    "DeduplicationCommand",
    "DeduplicationParams",
    "DedupAction",
    "HashAlgorithmName",
    "FileRecord",
    "DuplicateGroup",
    "ResolutionReport",
    "ConvertUtils",
    "DuplicateResolver",
    "FileService",
    "__version__",
]
