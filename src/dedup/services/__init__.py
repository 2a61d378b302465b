from .duplicate_service import DuplicateResolver
from .file_service import FileService

__all__ = ["DuplicateResolver", "FileService"]
