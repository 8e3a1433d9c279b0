"""Tests for the directory permission precheck."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from check_dir.errors import (
    DirectoryNotReadableError,
    DirectoryNotTraversableError,
    NotADirectoryCheckError,
)
from check_dir.precheck import check_directory_access, require_directory_access

running_as_root = hasattr(os, "geteuid") and os.geteuid() == 0


def _deny(mode: int):
    """Build an os.access replacement that refuses one permission bit."""

    def _access(path: os.PathLike[str] | str, requested: int) -> bool:
        return requested != mode

    return _access


class TestCheckDirectoryAccess:
    """Tests for check_directory_access ordering and results."""

    @pytest.mark.unit
    def test_accessible_directory_passes(self, tmp_path: Path) -> None:
        """A normal directory returns no error."""
        assert check_directory_access(tmp_path) is None

    @pytest.mark.unit
    def test_missing_path_is_not_a_directory(self, tmp_path: Path) -> None:
        """A path that does not exist fails the directory check."""
        err = check_directory_access(tmp_path / "missing")

        assert isinstance(err, NotADirectoryCheckError)
        assert err.path == str(tmp_path / "missing")

    @pytest.mark.unit
    def test_regular_file_is_not_a_directory(self, tmp_path: Path) -> None:
        """A regular file fails the directory check."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        err = check_directory_access(target)

        assert isinstance(err, NotADirectoryCheckError)
        assert "is not a directory" in err.message

    @pytest.mark.unit
    def test_unreadable_directory(self, tmp_path: Path) -> None:
        """A directory without read permission fails the read check."""
        with patch("check_dir.precheck.os.access", side_effect=_deny(os.R_OK)):
            err = check_directory_access(tmp_path)

        assert isinstance(err, DirectoryNotReadableError)
        assert "is not readable" in err.message

    @pytest.mark.unit
    def test_untraversable_directory(self, tmp_path: Path) -> None:
        """A directory without execute permission fails the traverse check."""
        with patch("check_dir.precheck.os.access", side_effect=_deny(os.X_OK)):
            err = check_directory_access(tmp_path)

        assert isinstance(err, DirectoryNotTraversableError)
        assert "is not executable" in err.message

    @pytest.mark.unit
    def test_directory_check_comes_first(self, tmp_path: Path) -> None:
        """Checks short-circuit: a file is reported as not a directory."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        with patch("check_dir.precheck.os.access", return_value=False) as access:
            err = check_directory_access(target)

        assert isinstance(err, NotADirectoryCheckError)
        access.assert_not_called()

    @pytest.mark.unit
    def test_read_checked_before_traverse(self, tmp_path: Path) -> None:
        """With both bits missing, the read failure is reported."""
        with patch("check_dir.precheck.os.access", return_value=False):
            err = check_directory_access(tmp_path)

        assert isinstance(err, DirectoryNotReadableError)


@pytest.mark.unit
@pytest.mark.skipif(sys.platform == "win32", reason="Permission tests not supported on Windows")
@pytest.mark.skipif(running_as_root, reason="root bypasses permission bits")
class TestRealPermissions:
    """Tests against real mode bits."""

    def test_mode_without_execute(self, tmp_path: Path) -> None:
        """chmod 0o644 on a directory fails the traverse check."""
        target = tmp_path / "no_exec"
        target.mkdir()
        os.chmod(target, 0o644)

        try:
            assert isinstance(check_directory_access(target), DirectoryNotTraversableError)
        finally:
            os.chmod(target, 0o755)

    def test_mode_without_read(self, tmp_path: Path) -> None:
        """chmod 0o311 on a directory fails the read check."""
        target = tmp_path / "no_read"
        target.mkdir()
        os.chmod(target, 0o311)

        try:
            assert isinstance(check_directory_access(target), DirectoryNotReadableError)
        finally:
            os.chmod(target, 0o755)


class TestRequireDirectoryAccess:
    """Tests for the raising variant."""

    @pytest.mark.unit
    def test_passes_silently(self, tmp_path: Path) -> None:
        """No exception for an accessible directory."""
        require_directory_access(tmp_path)

    @pytest.mark.unit
    def test_raises_the_check_error(self, tmp_path: Path) -> None:
        """The error from check_directory_access is raised."""
        with pytest.raises(NotADirectoryCheckError) as exc_info:
            require_directory_access(tmp_path / "missing")

        assert exc_info.value.code == "CHKDIR-PRM001"
