"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Single-file filesystem operations used to resolve duplicates:
relative link targets, atomic symlink replacement, removal and trashing.
"""
import os
import uuid
import logging
from contextlib import suppress
from pathlib import Path
from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    Filesystem mutations, one file at a time.
    Every method either completes or leaves the target file as it was.
    """

    @staticmethod
    def relative_path(from_dir: str, to_path: str) -> str:
        """
        Path of `to_path` relative to the directory `from_dir`.
        Pure string computation: both arguments must be absolute, nothing is resolved on disk.
        """
        if not os.path.isabs(from_dir) or not os.path.isabs(to_path):
            raise ValueError(f"Absolute paths required: {from_dir!r}, {to_path!r}")
        return os.path.relpath(os.path.normpath(to_path), os.path.normpath(from_dir))

    @staticmethod
    def link_target(duplicate_path: str, keeper_path: str) -> str:
        """Relative target from the duplicate's canonical directory to the canonical keeper."""
        dup_dir = os.path.realpath(os.path.dirname(os.path.abspath(duplicate_path)))
        return FileService.relative_path(dup_dir, os.path.realpath(keeper_path))

    @staticmethod
    def replace_with_symlink(duplicate_path: str, keeper_path: str) -> str:
        """
        Replaces `duplicate_path` with a relative symlink to `keeper_path`.

        The link is created under a temporary name next to the duplicate, checked
        to resolve to the keeper, then renamed over the duplicate in one step.
        On any failure the temporary link is removed and the duplicate is left alone.

        Returns:
            The relative link target.
        Raises:
            OSError: if the link cannot be created, verified or moved into place.
        """
        target = FileService.link_target(duplicate_path, keeper_path)
        # Temporary name must not grow with the duplicate's own name
        directory = os.path.dirname(os.path.abspath(duplicate_path))
        temp_link = os.path.join(directory, f".dedup-{uuid.uuid4().hex}")

        os.symlink(target, temp_link)
        try:
            if not os.path.samefile(temp_link, keeper_path):
                raise OSError(f"Symlink {temp_link} -> {target} does not resolve to {keeper_path}")
            os.replace(temp_link, duplicate_path)
        except BaseException:
            with suppress(OSError):
                os.unlink(temp_link)
            raise

        logger.debug(f"Linked {duplicate_path} -> {target}")
        return target

    @staticmethod
    def remove_file(file_path: str) -> None:
        """Deletes a file permanently."""
        os.remove(file_path)
        logger.debug(f"Removed {file_path}")

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).absolute()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
