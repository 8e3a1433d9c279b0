"""Run driver: visit target directories and fold their statuses.

Each visited directory is counted and classified on its own against the
shared Threshold. The run status is the worst individual status, never a
sum of counts. Any CheckDirError aborts the whole run; no partial result
is returned.

Usage:
    from pathlib import Path

    from check_dir.aggregate import run_check
    from check_dir.thresholds import Threshold

    result = run_check([Path("/var/spool/mail")], Threshold.from_strings("10", "20"))
    print(result.status.label, result.summary)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from check_dir.errors import DirectoryScanError
from check_dir.precheck import require_directory_access
from check_dir.scanner import list_entries, list_subdirectories
from check_dir.thresholds import Status, Threshold

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryMeasurement:
    """Entry count and classification for one visited directory."""

    path: Path
    count: int
    status: Status

    @property
    def fragment(self) -> str:
        """Summary fragment in path=count form."""
        return f"{self.path}={self.count}"


@dataclass(frozen=True)
class PerfData:
    """One performance-data record for the plugin output.

    Attributes:
        label: Metric label (the directory path).
        value: Entry count.
        threshold: Threshold the value was judged against.
        uom: Unit of measure; entry counts have none.
        minimum: Lowest possible value.
    """

    label: str
    value: int
    threshold: Threshold
    uom: str = ""
    minimum: int = 0


@dataclass
class RunResult:
    """Run-wide accumulator, finalized once all targets are visited.

    Attributes:
        status: Worst status seen so far.
        measurements: Per-directory measurements in visitation order.
        perfdata: Performance-data records, parallel to measurements.
    """

    status: Status = Status.OK
    measurements: list[DirectoryMeasurement] = field(default_factory=list)
    perfdata: list[PerfData] = field(default_factory=list)

    @property
    def summary(self) -> str:
        """Human-readable summary: dir1=n1, dir2=n2, ..."""
        return ", ".join(m.fragment for m in self.measurements)

    @property
    def directories_checked(self) -> int:
        """Number of directories visited."""
        return len(self.measurements)

    def record(self, measurement: DirectoryMeasurement, threshold: Threshold) -> None:
        """Fold one measurement into the run."""
        self.status = Status.worst(self.status, measurement.status)
        self.measurements.append(measurement)
        self.perfdata.append(
            PerfData(label=str(measurement.path), value=measurement.count, threshold=threshold)
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "status": self.status.label,
            "exit_code": self.status.exit_code,
            "summary": self.summary,
            "directories": [
                {
                    "path": str(m.path),
                    "count": m.count,
                    "status": m.status.label,
                    **p.threshold.to_dict(),
                }
                for m, p in zip(self.measurements, self.perfdata)
            ],
        }


@dataclass
class RunContext:
    """State for a single run, passed explicitly through the visit chain."""

    threshold: Threshold
    recursive: bool = False
    detect_cycles: bool = False
    result: RunResult = field(default_factory=RunResult)
    # (st_dev, st_ino) of directories visited under the current target
    visited: set[tuple[int, int]] = field(default_factory=set)


def _already_visited(ctx: RunContext, path: Path) -> bool:
    """Track directory identity; True if path was seen under this target."""
    try:
        stat_info = path.stat()
    except OSError as e:
        raise DirectoryScanError(str(path), e) from e
    key = (stat_info.st_dev, stat_info.st_ino)
    if key in ctx.visited:
        return True
    ctx.visited.add(key)
    return False


def _visit(ctx: RunContext, path: Path) -> None:
    """Scan, classify and record one directory, then descend if recursive."""
    if ctx.detect_cycles and _already_visited(ctx, path):
        logger.debug("Skipping %s: directory already visited", path)
        return

    entries = list_entries(path)
    count = len(entries)
    status = ctx.threshold.classify(count)
    logger.debug("%s has %d entries: %s", path, count, status.label)

    ctx.result.record(DirectoryMeasurement(path=path, count=count, status=status), ctx.threshold)

    if not ctx.recursive:
        return

    for child in list_subdirectories(path, entries):
        require_directory_access(child)
        _visit(ctx, child)


def run_check(
    targets: Sequence[Path],
    threshold: Threshold,
    *,
    recursive: bool = False,
    detect_cycles: bool = False,
) -> RunResult:
    """Check every target directory and return the aggregate result.

    All targets are prechecked before any of them is scanned. Targets are
    then visited in input order; duplicates are visited independently.

    Args:
        targets: Directories to check.
        threshold: Warning/critical ranges applied to every directory.
        recursive: Also check every subdirectory, each on its own count.
        detect_cycles: Skip directories already visited under the same
            target (guards against symlink loops when recursive).

    Returns:
        RunResult with the worst status, measurements and perfdata.

    Raises:
        PermissionCheckError: If a target or a subdirectory fails the precheck.
        DirectoryScanError: If a directory cannot be listed.
    """
    for target in targets:
        require_directory_access(target)

    ctx = RunContext(threshold=threshold, recursive=recursive, detect_cycles=detect_cycles)
    for target in targets:
        ctx.visited.clear()
        _visit(ctx, target)

    logger.info(
        "Checked %d directories: %s", ctx.result.directories_checked, ctx.result.status.label
    )
    return ctx.result
