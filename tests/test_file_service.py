"""
Tests for file service — the only place where files are replaced or deleted.
These tests verify that a failed operation never leaves a file missing or a link dangling.
"""
import os
from unittest import mock

import pytest
from dedup.services.file_service import FileService


class TestRelativePath:
    """relative_path is pure: no filesystem access."""

    @pytest.mark.parametrize("from_dir, to_path, expected", [
        ("/a/b", "/a/b/file.txt", "file.txt"),
        ("/a/b", "/a/file.txt", "../file.txt"),
        ("/a/b/c/d", "/a/x/file.txt", "../../../x/file.txt"),
        ("/a", "/a/b/c/file.txt", "b/c/file.txt"),
        ("/", "/etc/hosts", "etc/hosts"),
        ("/a/./b/", "/a/b/../c/f", "../c/f"),
    ])
    def test_computes_relative_target(self, from_dir, to_path, expected):
        with mock.patch("os.stat", side_effect=AssertionError("filesystem accessed")), \
                mock.patch("os.lstat", side_effect=AssertionError("filesystem accessed")):
            assert FileService.relative_path(from_dir, to_path) == expected

    def test_rejects_relative_arguments(self):
        with pytest.raises(ValueError):
            FileService.relative_path("a/b", "/a/file")
        with pytest.raises(ValueError):
            FileService.relative_path("/a/b", "file")


class TestReplaceWithSymlink:

    def test_replaces_file_with_relative_link(self, tmp_path):
        keeper = tmp_path / "a" / "1.txt"
        dup = tmp_path / "b" / "c" / "2.txt"
        keeper.parent.mkdir()
        dup.parent.mkdir(parents=True)
        keeper.write_bytes(b"hello")
        dup.write_bytes(b"hello")

        target = FileService.replace_with_symlink(str(dup), str(keeper))

        assert target == os.path.join("..", "..", "a", "1.txt")
        assert dup.is_symlink()
        assert os.readlink(dup) == target
        assert dup.read_bytes() == b"hello"
        assert keeper.read_bytes() == b"hello"
        assert not keeper.is_symlink()

    def test_link_in_same_directory(self, tmp_path):
        (tmp_path / "keep").write_bytes(b"x")
        (tmp_path / "dup").write_bytes(b"x")

        assert FileService.replace_with_symlink(str(tmp_path / "dup"), str(tmp_path / "keep")) == "keep"

    def test_link_survives_moving_the_whole_tree(self, tmp_path):
        tree = tmp_path / "tree"
        (tree / "x").mkdir(parents=True)
        (tree / "keep").write_bytes(b"data")
        (tree / "x" / "dup").write_bytes(b"data")
        FileService.replace_with_symlink(str(tree / "x" / "dup"), str(tree / "keep"))

        moved = tmp_path / "moved"
        tree.rename(moved)

        assert (moved / "x" / "dup").read_bytes() == b"data"

    def test_leaves_no_temporary_files(self, tmp_path):
        (tmp_path / "keep").write_bytes(b"x")
        (tmp_path / "dup").write_bytes(b"x")
        FileService.replace_with_symlink(str(tmp_path / "dup"), str(tmp_path / "keep"))

        assert sorted(os.listdir(tmp_path)) == ["dup", "keep"]

    def test_duplicate_with_name_near_filesystem_limit(self, tmp_path):
        long_name = "b" * 245
        (tmp_path / "a.txt").write_bytes(b"hello")
        (tmp_path / long_name).write_bytes(b"hello")

        target = FileService.replace_with_symlink(str(tmp_path / long_name), str(tmp_path / "a.txt"))

        assert target == "a.txt"
        assert (tmp_path / long_name).is_symlink()
        assert os.path.samefile(tmp_path / long_name, tmp_path / "a.txt")
        assert sorted(os.listdir(tmp_path)) == ["a.txt", long_name]

    def test_failed_link_creation_leaves_original(self, tmp_path):
        (tmp_path / "keep").write_bytes(b"x")
        (tmp_path / "dup").write_bytes(b"x")

        with mock.patch("os.symlink", side_effect=PermissionError("denied")):
            with pytest.raises(PermissionError):
                FileService.replace_with_symlink(str(tmp_path / "dup"), str(tmp_path / "keep"))

        assert not (tmp_path / "dup").is_symlink()
        assert (tmp_path / "dup").read_bytes() == b"x"

    def test_failed_rename_cleans_up_and_leaves_original(self, tmp_path):
        (tmp_path / "keep").write_bytes(b"x")
        (tmp_path / "dup").write_bytes(b"x")

        with mock.patch("os.replace", side_effect=OSError("read-only file system")):
            with pytest.raises(OSError):
                FileService.replace_with_symlink(str(tmp_path / "dup"), str(tmp_path / "keep"))

        assert sorted(os.listdir(tmp_path)) == ["dup", "keep"]
        assert (tmp_path / "dup").read_bytes() == b"x"

    def test_refuses_when_keeper_is_missing(self, tmp_path):
        (tmp_path / "dup").write_bytes(b"x")

        with pytest.raises(OSError):
            FileService.replace_with_symlink(str(tmp_path / "dup"), str(tmp_path / "gone"))

        assert sorted(os.listdir(tmp_path)) == ["dup"]
        assert not (tmp_path / "dup").is_symlink()


class TestRemoveFile:

    def test_removes_file(self, tmp_path):
        target = tmp_path / "f"
        target.write_text("x")
        FileService.remove_file(str(target))
        assert not target.exists()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileService.remove_file(str(tmp_path / "missing"))


class TestMoveToTrash:
    """send2trash is mocked: tests must not depend on a desktop trash being available."""

    def test_moves_file_via_send2trash(self, tmp_path):
        target = tmp_path / "f.txt"
        target.write_text("x")

        with mock.patch("dedup.services.file_service.send2trash") as trash:
            FileService.move_to_trash(str(target))

        trash.assert_called_once_with(str(target))

    def test_raises_for_nonexistent_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="File not found"):
            FileService.move_to_trash(str(tmp_path / "missing"))

    def test_wraps_trash_errors(self, tmp_path):
        target = tmp_path / "f.txt"
        target.write_text("x")

        with mock.patch("dedup.services.file_service.send2trash", side_effect=OSError("no trash")):
            with pytest.raises(RuntimeError, match="Failed to move to trash"):
                FileService.move_to_trash(str(target))
        assert target.exists()
