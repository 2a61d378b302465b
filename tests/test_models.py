"""
Tests for data models: validation, keeper selection and report bookkeeping.
"""
import pytest
from dedup.core.models import (
    FileRecord, FileHashes, DuplicateGroup, DeduplicationParams, DeduplicationStats,
    ResolutionReport, ResolutionFailure, DedupAction, HashAlgorithmName)


class TestFileRecord:

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            FileRecord(path="/x", size=-1)

    def test_is_immutable(self):
        record = FileRecord(path="/x", size=1)
        with pytest.raises(AttributeError):
            record.size = 2

    def test_file_hashes_require_bytes(self):
        with pytest.raises(ValueError):
            FileHashes(partial="not bytes")


class TestDuplicateGroup:

    def test_members_sorted_by_order(self):
        group = DuplicateGroup(size=10, files=[
            FileRecord(path="/c", size=10, order=7),
            FileRecord(path="/a", size=10, order=1),
            FileRecord(path="/b", size=10, order=4),
        ])

        assert group.keeper.path == "/a"
        assert [f.path for f in group.duplicates] == ["/b", "/c"]
        assert group.wasted_space == 20


class TestDeduplicationParams:

    def test_defaults(self):
        params = DeduplicationParams(roots=["/data"])
        assert params.action is DedupAction.REPORT
        assert params.algorithm is HashAlgorithmName.SHA256
        assert params.min_size_bytes == 0
        assert params.max_depth is None

    @pytest.mark.parametrize("kwargs, message", [
        (dict(roots=[]), "At least one path"),
        (dict(roots=[""]), "cannot be empty"),
        (dict(roots=["/d"], min_size_bytes=-1), "cannot be negative"),
        (dict(roots=["/d"], max_depth=0), "at least 1"),
    ])
    def test_validation(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            DeduplicationParams(**kwargs)

    def test_from_human_readable(self):
        params = DeduplicationParams.from_human_readable(
            roots=("/a", "/b"), min_size_str="1.5K", action=DedupAction.SYMLINK)

        assert params.roots == ["/a", "/b"]
        assert params.min_size_bytes == 1536
        assert params.action is DedupAction.SYMLINK


class TestStatsAndReports:

    def test_stage_updates_accumulate(self):
        stats = DeduplicationStats()

        stats.update_stage("size", groups_found=2, files_processed=5, duration=0.5)
        stats.update_stage("size", groups_found=1, files_processed=2, duration=0.25)

        assert stats.stage_stats["size"] == {"groups": 3, "files": 7, "time": 0.75}

    def test_summary_separates_scan_errors_from_read_errors(self):
        stats = DeduplicationStats()
        stats.read_errors = 1
        stats.scan_errors = 4

        summary = stats.print_summary()

        assert "/ 1 unreadable" in summary
        assert "Scan errors (unreadable directories or entries): 4" in summary

    def test_report_merge(self):
        total = ResolutionReport(action=DedupAction.REMOVE)
        total.merge(ResolutionReport(action=DedupAction.REMOVE, groups_processed=1, actions_performed=2,
                                     bytes_saved=10, lines=["remove /b", "remove /c"]))
        total.merge(ResolutionReport(action=DedupAction.REMOVE, groups_processed=1,
                                     failures=[ResolutionFailure("/e", "denied")]))

        assert total.groups_processed == 2
        assert total.actions_performed == 2
        assert total.bytes_saved == 10
        assert total.lines == ["remove /b", "remove /c"]
        assert not total.ok

    def test_action_properties(self):
        assert not DedupAction.REPORT.is_mutating
        assert all(a.is_mutating for a in (DedupAction.SYMLINK, DedupAction.REMOVE, DedupAction.TRASH))
        assert DedupAction.TRASH.display_name == "Move to trash"
