"""check_dir - monitoring plugin counting the entries of directories.

The CLI is a thin wrapper around the Python API (see aggregate.py).
It resolves settings, runs the check, prints one status line (or a JSON
envelope) and exits with the status as exit code.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource

from check_dir.aggregate import run_check
from check_dir.config import get_config_path, resolve_settings
from check_dir.errors import CheckDirError
from check_dir.json_output import ErrorDetail, OutputEnvelope, error_envelope, success_envelope
from check_dir.output import report, report_unknown
from check_dir.thresholds import Status, Threshold

logger = logging.getLogger(__name__)

# Command name used in JSON envelopes
COMMAND_NAME = "check_dir"


def _wants_json(args: list[str]) -> bool:
    """Tell from raw arguments whether --format json was requested."""
    for i, arg in enumerate(args):
        if arg == "--format=json":
            return True
        if arg == "--format" and args[i + 1 : i + 2] == ["json"]:
            return True
    return False


class PluginCommand(click.Command):
    """Click command whose usage errors exit UNKNOWN.

    Click exits 2 on bad usage, which a monitoring system reads as CRITICAL.
    With --format json the usage error is printed as an error envelope.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        # click consumes args while parsing
        use_json = _wants_json(args)
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as err:
            if use_json:
                output_unknown_envelope(
                    ErrorDetail(type=type(err).__name__, message=err.format_message())
                )
                ctx.exit(Status.UNKNOWN.exit_code)
            report_unknown(err.format_message())
            err.exit_code = Status.UNKNOWN.exit_code
            raise


def output_json_envelope(envelope: OutputEnvelope) -> None:
    """Output a JSON envelope to stdout."""
    click.echo(envelope.to_json())


def output_unknown_envelope(detail: ErrorDetail) -> None:
    """Output an error envelope for a run that ended UNKNOWN."""
    envelope = error_envelope(
        COMMAND_NAME,
        [detail],
        data={"status": Status.UNKNOWN.label, "exit_code": Status.UNKNOWN.exit_code},
    )
    output_json_envelope(envelope)


def _configure_logging(verbose: int) -> None:
    """Send log records to stderr; stdout is reserved for the status line."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.INFO if verbose == 1 else logging.DEBUG,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _flag_value(ctx: click.Context, name: str, value: bool) -> bool | None:
    """Return a flag only if it was given on the command line."""
    if ctx.get_parameter_source(name) == ParameterSource.COMMANDLINE:
        return value
    return None


def _fail(err: CheckDirError, *, use_json: bool) -> None:
    """Report a fatal error as UNKNOWN and exit."""
    logger.debug("Check aborted: %s", err)
    if use_json:
        output_unknown_envelope(
            ErrorDetail(type=type(err).__name__, message=err.message, code=err.code)
        )
    else:
        report_unknown(err.message)
    raise SystemExit(Status.UNKNOWN.exit_code) from err


@click.command(cls=PluginCommand, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option()
@click.option(
    "-d",
    "--dir",
    "dirs",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Directory to check (repeatable).",
)
@click.option("-w", "--warning", metavar="RANGE", help="Warning range for the entry count.")
@click.option("-c", "--critical", metavar="RANGE", help="Critical range for the entry count.")
@click.option(
    "-r/-R",
    "--recursive/--no-recursive",
    default=False,
    help="Also check every subdirectory, each against the same thresholds.",
)
@click.option(
    "--detect-cycles/--no-detect-cycles",
    default=False,
    help="Skip directories already visited (protects against symlink loops).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with default settings.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (json for machine parsing, text for the monitoring system).",
)
@click.option("-v", "--verbose", count=True, help="Log progress to stderr (-vv for debug).")
@click.pass_context
def cli(
    ctx: click.Context,
    dirs: tuple[Path, ...],
    warning: str | None,
    critical: str | None,
    recursive: bool,
    detect_cycles: bool,
    config_path: Path | None,
    output_format: str,
    verbose: int,
) -> None:
    """Check the number of entries in one or more directories.

    Each directory's entry count (excluding . and ..) is compared against the
    warning and critical ranges. The worst status across all directories is
    reported and used as exit code: 0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN.

    RANGE follows the usual plugin syntax: "10" (0..10), "10:" (at least 10),
    "~:10" (at most 10), "10:20", and "@10:20" to alert inside the range.
    """
    _configure_logging(verbose)
    use_json = output_format == "json"

    cli_values: dict[str, Any] = {
        "dirs": dirs or None,
        "warning": warning,
        "critical": critical,
        "recursive": _flag_value(ctx, "recursive", recursive),
        "detect_cycles": _flag_value(ctx, "detect_cycles", detect_cycles),
    }

    try:
        settings = resolve_settings(cli_values, get_config_path(config_path))
        threshold = Threshold.from_strings(settings.warning, settings.critical)
        result = run_check(
            settings.dirs,
            threshold,
            recursive=settings.recursive,
            detect_cycles=settings.detect_cycles,
        )
    except CheckDirError as err:
        _fail(err, use_json=use_json)
        return

    if use_json:
        output_json_envelope(success_envelope(COMMAND_NAME, result.to_dict()))
    else:
        report(result)

    raise SystemExit(result.status.exit_code)
