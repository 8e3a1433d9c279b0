"""check_dir - Monitoring plugin for the number of entries in directories."""

from check_dir.aggregate import RunResult, run_check
from check_dir.cli import cli
from check_dir.thresholds import Range, Status, Threshold

__all__ = [
    "Range",
    "RunResult",
    "Status",
    "Threshold",
    "cli",
    "run_check",
]
