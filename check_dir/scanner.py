"""Directory listing.

Lists the immediate entries of one directory. The directory handle is
always released before returning, and any OS failure while opening,
reading or closing it is fatal for the run.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from check_dir.errors import DirectoryScanError

logger = logging.getLogger(__name__)

# Pseudo-entries for the directory itself and its parent
PSEUDO_ENTRIES: frozenset[str] = frozenset({".", ".."})


def list_entries(path: Path) -> list[str]:
    """List entry names in a directory, excluding "." and "..".

    Order follows the underlying enumeration and is not sorted.

    Args:
        path: Directory to list.

    Returns:
        Entry names (files, directories, links and anything else).

    Raises:
        DirectoryScanError: If the directory cannot be opened, read or closed.
    """
    try:
        with os.scandir(path) as it:
            names = [entry.name for entry in it if entry.name not in PSEUDO_ENTRIES]
    except OSError as e:
        raise DirectoryScanError(str(path), e) from e

    logger.debug("Listed %d entries in %s", len(names), path)
    return names


def list_subdirectories(path: Path, entries: list[str]) -> list[Path]:
    """Return the entries of path that are directories.

    Symlinks to directories count as directories.

    Args:
        path: Directory the entries were listed from.
        entries: Names returned by list_entries(path).

    Returns:
        Child directory paths, in the order of entries.
    """
    children = (path / name for name in entries)
    return [child for child in children if child.is_dir()]
