"""
Shared fixtures for dedup tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so the 'dedup' package is importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from dedup.core.models import FileRecord


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for deduplication scenarios:
    - 2 identical files (duplicates) plus a third copy in a subdirectory
    - another identical pair of a different size
    - 2 unique files (different content)
    - 1 empty file
    """
    files = {}

    # Duplicate set #1 (1KB of 'A')
    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    # Duplicate pair #2 (2KB of 'B')
    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Unique files, one sharing its size with pair #1
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1024)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    # Subdirectory with another copy of pair #1
    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    return files


@pytest.fixture
def make_record():
    """Builds a FileRecord for an existing file, numbering records in call order."""
    counter = {"order": 0}

    def _make(path, order=None):
        path = Path(path)
        st = path.stat()
        if order is None:
            order = counter["order"]
        counter["order"] = order + 1
        return FileRecord(path=str(path), size=st.st_size, order=order, mtime_ns=st.st_mtime_ns)

    return _make
