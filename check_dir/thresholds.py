"""Plugin statuses, threshold ranges and classification.

Range strings use the usual monitoring-plugin syntax:

    10        alert if value < 0 or value > 10
    10:       alert if value < 10
    ~:10      alert if value > 10
    10:20     alert if value < 10 or value > 20
    @10:20    alert if 10 <= value <= 20

Both endpoints are inclusive. A string that does not follow this syntax
parses to Range.UNSET, which never alerts.

Example:
    >>> threshold = Threshold.from_strings("10", "20")
    >>> threshold.classify(5)
    <Status.OK: 0>
    >>> threshold.classify(25)
    <Status.CRITICAL: 2>
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from check_dir.errors import InvalidThresholdError

# Characters allowed anywhere in a range string
_RANGE_CHARS: re.Pattern[str] = re.compile(r"^[\d.+\-:~@]+$")

# A signed decimal number, optionally fractional
_NUMBER: re.Pattern[str] = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


class Status(Enum):
    """Plugin status. The value doubles as the process exit code."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def exit_code(self) -> int:
        """Process exit code for this status."""
        return self.value

    @property
    def label(self) -> str:
        """Upper-case name shown in the plugin status line."""
        return self.name

    @classmethod
    def worst(cls, *statuses: Status) -> Status:
        """Return the most severe status (OK < WARNING < CRITICAL < UNKNOWN)."""
        return max(statuses, key=lambda s: s.value, default=cls.OK)


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Range:
    """A numeric interval with optional open ends.

    Attributes:
        start: Lower bound, or None for negative infinity.
        end: Upper bound, or None for positive infinity.
        inverted: Alert when the value is inside the interval instead of outside.
        is_set: False only for Range.UNSET, the result of a failed parse.
    """

    start: float | None = 0.0
    end: float | None = None
    inverted: bool = False
    is_set: bool = True

    UNSET: ClassVar[Range]

    @classmethod
    def parse(cls, spec: str | None) -> Range:
        """Parse a range string.

        Args:
            spec: Range specification, e.g. "10", "5:", "~:3", "@1:2".

        Returns:
            The parsed Range, or Range.UNSET if spec is None or malformed.
        """
        if spec is None:
            return cls.UNSET

        text = spec.strip()
        if not text or not _RANGE_CHARS.match(text):
            return cls.UNSET

        inverted = text.startswith("@")
        if inverted:
            text = text[1:]

        start: float | None
        end: float | None
        if ":" in text:
            low_text, _, high_text = text.partition(":")
            if low_text == "~":
                start = None
            elif low_text == "":
                start = 0.0
            elif _NUMBER.match(low_text):
                start = float(low_text)
            else:
                return cls.UNSET

            if high_text == "":
                end = None
            elif _NUMBER.match(high_text):
                end = float(high_text)
            else:
                return cls.UNSET
        else:
            # Bare number: 0..number
            if not _NUMBER.match(text):
                return cls.UNSET
            start = 0.0
            end = float(text)

        if start is not None and end is not None and start > end:
            return cls.UNSET

        return cls(start=start, end=end, inverted=inverted)

    def contains(self, value: float) -> bool:
        """True if value lies within the bounds, endpoints included."""
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True

    def is_alert(self, value: float) -> bool:
        """True if value should raise an alert for this range.

        A normal range alerts when the value is outside it, an inverted one
        when the value is inside. Range.UNSET never alerts.
        """
        if not self.is_set:
            return False
        return self.contains(value) == self.inverted

    def __str__(self) -> str:
        if not self.is_set:
            return ""

        prefix = "@" if self.inverted else ""
        if self.start is None:
            low = "~:"
        elif self.start == 0:
            low = "" if self.end is not None else "0:"
        else:
            low = f"{_format_number(self.start)}:"
        high = _format_number(self.end) if self.end is not None else ""
        return f"{prefix}{low}{high}"


Range.UNSET = Range(start=None, end=None, is_set=False)


@dataclass(frozen=True)
class Threshold:
    """Warning and critical ranges shared by every directory in a run.

    Attributes:
        warning: Range that raises WARNING when it alerts.
        critical: Range that raises CRITICAL when it alerts; wins over warning.
    """

    warning: Range
    critical: Range

    @classmethod
    def from_strings(cls, warning: str | None, critical: str | None) -> Threshold:
        """Build a Threshold from two range strings.

        Each string is validated against its own parse result. None means
        the range was not given and yields Range.UNSET.

        Raises:
            InvalidThresholdError: If a given string cannot be parsed.
        """
        ranges: dict[str, Range] = {}
        for option, spec in (("warning", warning), ("critical", critical)):
            parsed = Range.parse(spec)
            if spec is not None and not parsed.is_set:
                raise InvalidThresholdError(option, spec)
            ranges[option] = parsed
        return cls(warning=ranges["warning"], critical=ranges["critical"])

    def classify(self, value: float) -> Status:
        """Classify a measurement. Critical is checked before warning."""
        if self.critical.is_alert(value):
            return Status.CRITICAL
        if self.warning.is_alert(value):
            return Status.WARNING
        return Status.OK

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "warning": str(self.warning) if self.warning.is_set else None,
            "critical": str(self.critical) if self.critical.is_set else None,
        }
