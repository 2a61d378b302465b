"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements file enumeration over one or more root paths.
Features:
- Walks each root with os.walk in sorted order, so traversal order is stable between runs
- Honors an optional maximum depth (files directly inside a root are depth 1)
- Skips symbolic links and anything that is not a regular file
- Returns FileRecords numbered in traversal order
"""

import os
import stat
import time
import logging
from typing import List, Optional, Callable, Set

from dedup.core.models import FileRecord
from dedup.core.interfaces import FileScanner

logger = logging.getLogger(__name__)


class FileScannerImpl(FileScanner):
    """
    Scans root paths recursively and collects regular files.

    Attributes:
        roots: Directories (or single files) to scan
        max_depth: Deepest level to collect files from, None for unlimited
    """

    def __init__(self, roots: List[str], max_depth: Optional[int] = None):
        if isinstance(roots, str):
            roots = [roots]
        self.roots = [os.path.abspath(r) for r in roots]
        self.max_depth = max_depth
        self.errors: int = 0
        self._seen: Set[str] = set()
        self._order = 0

    def scan(self,
             progress_callback: Optional[Callable[[str, int, object], None]] = None) -> List[FileRecord]:
        """
        Single-pass scanner with progress updates and debug logging.
        Returns the regular files found under every root, in traversal order.
        """
        logger.debug("Starting scan operation")
        logger.debug(f"Roots: {self.roots}, max_depth={self.max_depth}")

        # Validate all roots before touching any of them
        for root in self.roots:
            if not os.path.lexists(root):
                error_msg = f"Path does not exist: {root}"
                logger.error(error_msg)
                raise RuntimeError(error_msg)

        found_files: List[FileRecord] = []
        self._seen = set()
        self._order = 0
        start_time = time.time()

        # Progress throttling: update every N files to reduce output overhead
        progress_interval = 5000
        progress_counter = 0

        for root in self.roots:
            for record in self._scan_root(root):
                found_files.append(record)
                progress_counter += 1
                if progress_callback and progress_counter >= progress_interval:
                    progress_callback('scanning', len(found_files), None)
                    progress_counter = 0

        # Final update for small datasets
        if progress_callback and progress_counter > 0:
            progress_callback('scanning', len(found_files), None)

        elapsed_time = time.time() - start_time
        logger.debug(f"Total scan time: {elapsed_time:.2f} seconds")
        logger.debug(f"Scan completed. Found {len(found_files)} files.")
        return found_files

    def _scan_root(self, root: str):
        if not os.path.isdir(root):
            record = self._process_file(root, depth=1)
            if record:
                yield record
            return

        for dirpath, dirs, files in os.walk(root, onerror=self._on_walk_error):
            rel = os.path.relpath(dirpath, root)
            dir_depth = 0 if rel == os.curdir else rel.count(os.sep) + 1

            # Files in a subdirectory would sit at dir_depth + 2
            if self.max_depth is not None and dir_depth + 2 > self.max_depth:
                dirs[:] = []
            else:
                dirs.sort()

            for filename in sorted(files):
                record = self._process_file(os.path.join(dirpath, filename), depth=dir_depth + 1)
                if record:
                    yield record

    def _on_walk_error(self, error: OSError) -> None:
        self.errors += 1
        logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

    def _process_file(self, path: str, depth: int) -> Optional[FileRecord]:
        """
        Stat an individual path and return a FileRecord if it is a regular file
        that has not been seen through another root.
        """
        try:
            st = os.lstat(path)
        except OSError as e:
            self.errors += 1
            logger.warning(f"Could not stat {path}: {e}")
            return None

        if stat.S_ISLNK(st.st_mode):
            logger.debug(f"Skipping symbolic link: {path}")
            return None
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        # Overlapping roots must not report a file as a duplicate of itself
        real = os.path.realpath(path)
        if real in self._seen:
            logger.debug(f"Skipping already enumerated file: {path}")
            return None
        self._seen.add(real)

        record = FileRecord(
            path=path,
            size=st.st_size,
            depth=depth,
            order=self._order,
            mtime_ns=st.st_mtime_ns,
        )
        self._order += 1
        return record
