"""Monitoring-plugin text output.

A run is reported as a single line on stdout:

    CHECK_DIR <STATUS> - <summary> | <perfdata>

Example:
    CHECK_DIR CRITICAL - /srv/a=3, /srv/b=15 | /srv/a=3;5;10;0 /srv/b=15;5;10;0

Fatal errors are reported without performance data:

    CHECK_DIR UNKNOWN - /var/spool/a is not readable
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TextIO

import click

from check_dir.aggregate import PerfData, RunResult
from check_dir.thresholds import Status

# Short name shown at the start of every status line
PLUGIN_NAME = "CHECK_DIR"

# Labels matching this pattern must be single-quoted in perfdata
_NEEDS_QUOTING: re.Pattern[str] = re.compile(r"[\s='\"]")

# '|' separates text from perfdata, so it may not appear anywhere else
_PERFDATA_SEPARATOR = "|"
_SEPARATOR_REPLACEMENT = "_"


def sanitize(text: str) -> str:
    """Replace perfdata separators in free text or labels."""
    return text.replace(_PERFDATA_SEPARATOR, _SEPARATOR_REPLACEMENT)


def format_label(label: str) -> str:
    """Quote a perfdata label when it contains spaces, '=' or quotes."""
    label = sanitize(label)
    if not _NEEDS_QUOTING.search(label):
        return label
    escaped = label.replace("'", "''")
    return f"'{escaped}'"


def format_perfdata(perf: PerfData) -> str:
    """Render one record as label=value[uom];warn;crit;min."""
    fields = [
        f"{perf.value}{perf.uom}",
        str(perf.threshold.warning),
        str(perf.threshold.critical),
        str(perf.minimum),
    ]
    return f"{format_label(perf.label)}={';'.join(fields)}"


def format_status_line(
    status: Status,
    message: str,
    perfdata: Iterable[PerfData] = (),
) -> str:
    """Build the plugin status line.

    Args:
        status: Status to report.
        message: Human-readable text after the status; any '|' is replaced.
        perfdata: Records appended after a '|' separator (omitted if empty).

    Returns:
        The complete line, without trailing newline.
    """
    line = f"{PLUGIN_NAME} {status.label} - {sanitize(message)}"
    rendered = " ".join(format_perfdata(p) for p in perfdata)
    if rendered:
        line = f"{line} | {rendered}"
    return line


def report(result: RunResult, *, file: TextIO | None = None) -> None:
    """Print the status line for a completed run.

    Args:
        result: Finalized run result.
        file: File to write to (default: stdout).
    """
    click.echo(format_status_line(result.status, result.summary, result.perfdata), file=file)


def report_unknown(message: str, *, file: TextIO | None = None) -> None:
    """Print an UNKNOWN status line for a fatal error.

    Args:
        message: Description of what went wrong.
        file: File to write to (default: stdout).
    """
    click.echo(format_status_line(Status.UNKNOWN, message), file=file)
