"""Tests for directory listing."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from check_dir.errors import DirectoryScanError
from check_dir.scanner import list_entries, list_subdirectories


class TestListEntries:
    """Tests for list_entries."""

    @pytest.mark.unit
    def test_empty_directory(self, tmp_path: Path) -> None:
        """An empty directory has no entries."""
        assert list_entries(tmp_path) == []

    @pytest.mark.unit
    def test_counts_files_and_directories(self, make_dir: Callable[..., Path]) -> None:
        """Files and subdirectories are both entries."""
        target = make_dir("mixed", files=3, subdirs=2)

        entries = list_entries(target)

        assert len(entries) == 5
        assert set(entries) == {
            "file_000.txt",
            "file_001.txt",
            "file_002.txt",
            "sub_000",
            "sub_001",
        }

    @pytest.mark.unit
    def test_hidden_entries_are_counted(self, tmp_path: Path) -> None:
        """Dotfiles count; only the self and parent entries are excluded."""
        (tmp_path / ".hidden").write_text("x")
        (tmp_path / "visible").write_text("x")

        entries = list_entries(tmp_path)

        assert set(entries) == {".hidden", "visible"}
        assert "." not in entries
        assert ".." not in entries

    @pytest.mark.unit
    def test_does_not_descend(self, make_dir: Callable[..., Path]) -> None:
        """Only immediate entries are listed."""
        target = make_dir("top", files=1, subdirs=1)
        (target / "sub_000" / "nested.txt").write_text("x")

        assert len(list_entries(target)) == 2

    @pytest.mark.unit
    @pytest.mark.skipif(sys.platform == "win32", reason="Symlink tests not supported on Windows")
    def test_broken_symlink_is_an_entry(self, tmp_path: Path) -> None:
        """Dangling links are still directory entries."""
        os.symlink(tmp_path / "nowhere", tmp_path / "dangling")

        assert list_entries(tmp_path) == ["dangling"]

    @pytest.mark.unit
    def test_missing_directory_raises_scan_error(self, tmp_path: Path) -> None:
        """Failing to open the directory is a fatal scan error."""
        with pytest.raises(DirectoryScanError) as exc_info:
            list_entries(tmp_path / "missing")

        assert exc_info.value.code == "CHKDIR-SCN001"
        assert exc_info.value.original_error_type == "FileNotFoundError"
        assert isinstance(exc_info.value.original_exception, FileNotFoundError)

    @pytest.mark.unit
    def test_oserror_during_listing_raises_scan_error(self, tmp_path: Path) -> None:
        """Any OSError from the directory handle becomes a DirectoryScanError."""
        with patch("check_dir.scanner.os.scandir", side_effect=PermissionError(13, "denied")):
            with pytest.raises(DirectoryScanError) as exc_info:
                list_entries(tmp_path)

        assert "denied" in exc_info.value.message

    @pytest.mark.unit
    def test_handle_closed_after_listing(self, tmp_path: Path) -> None:
        """The scandir iterator is used as a context manager and closed."""
        (tmp_path / "a").write_text("x")
        real_scandir = os.scandir
        handles = []

        def _tracking_scandir(path: Path):
            it = real_scandir(path)
            handles.append(it)
            return it

        with patch("check_dir.scanner.os.scandir", side_effect=_tracking_scandir):
            list_entries(tmp_path)

        assert len(handles) == 1
        # A closed iterator yields nothing more
        assert list(handles[0]) == []


class TestListSubdirectories:
    """Tests for list_subdirectories."""

    @pytest.mark.unit
    def test_only_directories_returned(self, make_dir: Callable[..., Path]) -> None:
        """Regular files are ignored."""
        target = make_dir("top", files=2, subdirs=2)

        subdirs = list_subdirectories(target, list_entries(target))

        assert {p.name for p in subdirs} == {"sub_000", "sub_001"}
        assert all(p.parent == target for p in subdirs)

    @pytest.mark.unit
    def test_preserves_entry_order(self, make_dir: Callable[..., Path]) -> None:
        """Subdirectories come back in the order of the entries given."""
        target = make_dir("top", subdirs=3)

        subdirs = list_subdirectories(target, ["sub_002", "sub_000", "sub_001"])

        assert [p.name for p in subdirs] == ["sub_002", "sub_000", "sub_001"]

    @pytest.mark.unit
    @pytest.mark.skipif(sys.platform == "win32", reason="Symlink tests not supported on Windows")
    def test_symlinked_directory_counts(self, tmp_path: Path) -> None:
        """A link to a directory is treated as a directory."""
        real = tmp_path / "real"
        real.mkdir()
        os.symlink(real, tmp_path / "link")

        subdirs = list_subdirectories(tmp_path, ["real", "link"])

        assert [p.name for p in subdirs] == ["real", "link"]
