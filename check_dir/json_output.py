"""JSON output for --format json.

    {"success": true, "command": "check_dir", "data": {...}}
    {"success": false, "command": "check_dir", "data": {...}, "errors": [...]}

WARNING and CRITICAL runs are successful checks: success is false only
when the run ended UNKNOWN because of an error.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorDetail:
    """One entry of the errors array; code is the CHKDIR-* code when known."""

    type: str
    message: str
    code: str | None = None

    def to_dict(self) -> dict[str, str]:
        d = {"type": self.type, "message": self.message}
        if self.code is not None:
            d["code"] = self.code
        return d


@dataclass
class OutputEnvelope:
    """Wrapper around a check_dir result or the errors that stopped it."""

    success: bool
    command: str
    data: dict[str, Any] | None
    errors: list[ErrorDetail] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "success": self.success,
            "command": self.command,
            "data": self.data,
        }
        if self.errors is not None:
            result["errors"] = [e.to_dict() for e in self.errors]
        return result

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def success_envelope(command: str, data: dict[str, Any]) -> OutputEnvelope:
    """Envelope for a completed run, whatever its status."""
    return OutputEnvelope(success=True, command=command, data=data)


def error_envelope(
    command: str,
    errors: list[ErrorDetail],
    *,
    data: dict[str, Any] | None = None,
) -> OutputEnvelope:
    """Envelope for a run that ended UNKNOWN; data defaults to an empty dict."""
    return OutputEnvelope(
        success=False,
        command=command,
        data=data if data is not None else {},
        errors=errors,
    )
