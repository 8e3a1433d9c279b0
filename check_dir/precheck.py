"""Permission precheck for directories about to be scanned.

A directory must exist as a directory, be readable and be traversable
before it is listed or descended into. The checks run in that order and
stop at the first failure.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from check_dir.errors import (
    DirectoryNotReadableError,
    DirectoryNotTraversableError,
    NotADirectoryCheckError,
    PermissionCheckError,
)

logger = logging.getLogger(__name__)


def check_directory_access(path: Path) -> PermissionCheckError | None:
    """Validate that path is a readable, traversable directory.

    Args:
        path: Directory to check.

    Returns:
        The error for the first failed check, or None if all checks pass.
    """
    if not path.is_dir():
        return NotADirectoryCheckError(str(path))
    if not os.access(path, os.R_OK):
        return DirectoryNotReadableError(str(path))
    if not os.access(path, os.X_OK):
        return DirectoryNotTraversableError(str(path))
    return None


def require_directory_access(path: Path) -> None:
    """Raise the precheck error for path, if any."""
    err = check_directory_access(path)
    if err is not None:
        logger.debug("Precheck failed for %s: %s", path, err.message)
        raise err
