"""Tests for filesystem helpers."""

import pytest

from svcutils import io
from svcutils.errors import FileOpenError, IoError


class TestReadWrite:
    """Tests for whole-file reads and writes."""

    def test_write_creates_parents(self, tmp_path):
        """Test that missing directories are created."""
        path = tmp_path / "a" / "b" / "note.txt"

        io.write_string_to_file(path, "привет")

        assert io.read_file_to_string(path) == "привет"

    def test_windows_1251_fallback(self, tmp_path):
        """Test decoding of legacy Cyrillic files."""
        path = tmp_path / "legacy.txt"
        path.write_bytes("отчёт".encode("windows-1251"))

        assert io.detect_encoding(path.read_bytes()) == "windows-1251"
        assert io.read_file_to_string(path) == "отчёт"

    def test_explicit_encoding_mismatch(self, tmp_path):
        """Test that a wrong explicit encoding raises IoError."""
        path = tmp_path / "legacy.txt"
        path.write_bytes("отчёт".encode("windows-1251"))

        with pytest.raises(IoError):
            io.read_file_to_string(path, encoding="utf-8")

    def test_missing_file(self, tmp_path):
        """Test that opening a missing file raises FileOpenError."""
        with pytest.raises(FileOpenError) as exc_info:
            io.read_file_to_binary(tmp_path / "missing.bin")

        assert exc_info.value.path.endswith("missing.bin")
        assert isinstance(exc_info.value, OSError)


class TestCopy:
    """Tests for copy_recursive."""

    def test_copy_tree(self, tmp_path):
        """Test copying a directory tree over an existing destination."""
        source = tmp_path / "src"
        (source / "nested").mkdir(parents=True)
        (source / "nested" / "f.txt").write_text("x")
        destination = tmp_path / "dst"
        destination.mkdir()

        io.copy_recursive(source, destination)

        assert (destination / "nested" / "f.txt").read_text() == "x"

    def test_copy_file(self, tmp_path):
        """Test copying a single file into a new directory."""
        source = tmp_path / "f.txt"
        source.write_text("y")

        result = io.copy_recursive(source, tmp_path / "out" / "g.txt")

        assert result.read_text() == "y"

    def test_copy_missing(self, tmp_path):
        """Test that a missing source raises IoError."""
        with pytest.raises(IoError):
            io.copy_recursive(tmp_path / "missing", tmp_path / "dst")


class TestListing:
    """Tests for directory listings and masks."""

    @pytest.fixture
    def tree(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "a.csv").write_text("")
        (tmp_path / "b.txt").write_text("")
        (tmp_path / "sub" / "c.csv").write_text("")
        return tmp_path

    def test_files(self, tree):
        """Test flat and recursive file listings."""
        assert [p.name for p in io.get_files(tree)] == ["a.csv", "b.txt"]
        assert sorted(p.name for p in io.get_files(tree, recursive=True)) == [
            "a.csv",
            "b.txt",
            "c.csv",
        ]

    def test_dirs(self, tree):
        """Test the directory listing."""
        assert [p.name for p in io.get_dirs(tree)] == ["sub"]

    def test_not_a_directory(self, tree):
        """Test listing a file path."""
        with pytest.raises(IoError):
            io.get_files(tree / "a.csv")

    def test_files_by_mask(self, tree):
        """Test single wildcard masks."""
        assert [p.name for p in io.get_files_by_mask(tree, "*.csv", recursive=True)] == [
            "a.csv",
            "c.csv",
        ]

    @pytest.mark.parametrize(
        "name, mask, expected",
        [
            ("report.csv", "*.csv", True),
            ("report.csv", "report*", True),
            ("report.csv", "re*.csv", True),
            ("report.csv", "report.csv", True),
            ("report.csv", "*.txt", False),
            ("ab", "ab*b", False),
        ],
    )
    def test_mask_matches(self, name, mask, expected):
        """Test the mask matcher."""
        assert io.mask_matches(name, mask) is expected
