"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/duplicate_service.py
Applies the selected action to every non-keeper member of a duplicate group.
"""
import os
import stat
import logging
from typing import List, Optional, Callable

from dedup.core.models import DuplicateGroup, DedupAction, FileRecord, ResolutionReport, ResolutionFailure
from dedup.services.file_service import FileService
from dedup.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class DuplicateResolver:
    """
    Resolves duplicate groups: report, symlink, remove or trash.

    The keeper (first file in traversal order) is never touched. A failure on one
    member is recorded and logged; the remaining members and groups still run.
    Before mutating, keeper and duplicate are re-checked against their scan-time
    size and mtime. This narrows, but cannot close, the window for outside changes.
    """

    def __init__(self, file_service=FileService):
        self.file_service = file_service

    def apply(self, group: DuplicateGroup, action: DedupAction = DedupAction.REPORT,
              verbose: bool = False) -> ResolutionReport:
        report = ResolutionReport(action=action, groups_processed=1)
        keeper = group.keeper
        size_str = f" [{ConvertUtils.bytes_to_human(group.size)}]" if verbose else ""

        if not action.is_mutating:
            report.lines.append(f"keep {keeper.path}{size_str}")
            for dup in group.duplicates:
                report.lines.append(f"dup  {dup.path}{size_str}")
            report.actions_performed = len(group.duplicates)
            report.bytes_saved = group.wasted_space
            return report

        keeper_problem = self._changed_since_scan(keeper)
        for dup in group.duplicates:
            if keeper_problem:
                self._fail(report, dup.path, f"keeper {keeper.path} {keeper_problem}, skipped")
                continue
            problem = self._changed_since_scan(dup)
            if problem:
                self._fail(report, dup.path, f"{problem}, skipped")
                continue

            prefix = f"({ConvertUtils.bytes_to_human(group.size)}) " if verbose else ""
            try:
                if action is DedupAction.SYMLINK:
                    target = self.file_service.replace_with_symlink(dup.path, keeper.path)
                    line = f"{prefix}link {dup.path} -> {target}"
                elif action is DedupAction.REMOVE:
                    self.file_service.remove_file(dup.path)
                    line = f"{prefix}remove {dup.path}"
                elif action is DedupAction.TRASH:
                    self.file_service.move_to_trash(dup.path)
                    line = f"{prefix}trash {dup.path}"
                else:
                    raise ValueError(f"Unsupported action: {action!r}")
            except (OSError, RuntimeError) as e:
                self._fail(report, dup.path, str(e))
                continue

            report.lines.append(line)
            report.actions_performed += 1
            report.bytes_saved += group.size

        return report

    def apply_all(self, groups: List[DuplicateGroup], action: DedupAction = DedupAction.REPORT,
                  verbose: bool = False,
                  group_callback: Optional[Callable[[int, DuplicateGroup, ResolutionReport], None]] = None
                  ) -> ResolutionReport:
        """
        Applies `action` to every group in order and merges the per-group reports.
        `group_callback(index, group, report)` is invoked after each group.
        """
        total = ResolutionReport(action=action)
        for idx, group in enumerate(groups, 1):
            report = self.apply(group, action, verbose)
            if group_callback:
                group_callback(idx, group, report)
            total.merge(report)
        return total

    @staticmethod
    def _changed_since_scan(record: FileRecord) -> Optional[str]:
        """Returns why `record` no longer matches the scanned file, or None."""
        try:
            st = os.lstat(record.path)
        except OSError as e:
            return f"is no longer accessible ({e.strerror})"
        if not stat.S_ISREG(st.st_mode):
            return "is no longer a regular file"
        if st.st_size != record.size:
            return "changed size since scan"
        if record.mtime_ns is not None and st.st_mtime_ns != record.mtime_ns:
            return "was modified since scan"
        return None

    @staticmethod
    def _fail(report: ResolutionReport, path: str, message: str) -> None:
        logger.warning(f"{path}: {message}")
        report.failures.append(ResolutionFailure(path=path, message=message))

