"""Structured error codes for check_dir.

All errors follow the format CHKDIR-{category}{number}:
- CHKDIR-CFG*: Configuration errors (thresholds, settings, config file)
- CHKDIR-PRM*: Permission/validation errors on a target directory
- CHKDIR-SCN*: Scan errors while listing a directory

Every CheckDirError is fatal for the run and is reported as UNKNOWN.
"""

from __future__ import annotations

from typing import Any


class CheckDirError(Exception):
    """Base class for all check_dir errors.

    All errors have:
    - code: Structured error code (e.g., CHKDIR-CFG001)
    - message: Human-readable error message
    """

    code: str = "CHKDIR-000"

    # Reserved attribute names that cannot be overwritten by context
    _RESERVED_ATTRS = frozenset({"code", "message", "context", "args"})

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize a check_dir error.

        Args:
            message: Human-readable error message.
            **context: Additional context stored as error attributes.
                Reserved keys (code, message, context, args) are ignored.
        """
        self.message = message
        self.context = context
        for key, value in context.items():
            if key not in self._RESERVED_ATTRS:
                setattr(self, key, value)
        super().__init__(f"[{self.code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert error to JSON-serializable dict."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# Configuration Errors (CHKDIR-CFG*)
class ConfigError(CheckDirError):
    """Base class for configuration-related errors."""

    code = "CHKDIR-CFG000"


class InvalidThresholdError(ConfigError):
    """Raised when a warning or critical range string cannot be parsed.

    Error code: CHKDIR-CFG001
    """

    code = "CHKDIR-CFG001"

    def __init__(self, option: str, value: str) -> None:
        super().__init__(
            f"Invalid {option} range: '{value}'",
            option=option,
            value=value,
        )


class MissingSettingError(ConfigError):
    """Raised when a required setting is not supplied by any source.

    Error code: CHKDIR-CFG002
    """

    code = "CHKDIR-CFG002"

    def __init__(self, key: str) -> None:
        super().__init__(f"Missing required setting '{key}'", key=key)


class ConfigParseError(ConfigError):
    """Raised when a configuration file cannot be parsed.

    Error code: CHKDIR-CFG003
    """

    code = "CHKDIR-CFG003"

    def __init__(self, path: str, parse_error: str) -> None:
        super().__init__(
            f"Failed to parse config file {path}: {parse_error}",
            path=path,
            parse_error=parse_error,
        )


class ConfigInvalidStructureError(ConfigError):
    """Raised when a configuration file or value has an invalid structure.

    Error code: CHKDIR-CFG004
    """

    code = "CHKDIR-CFG004"

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(
            f"Invalid config structure in {path}: {detail}",
            path=path,
            detail=detail,
        )


# Permission Errors (CHKDIR-PRM*)
class PermissionCheckError(CheckDirError):
    """Base class for directory precheck failures."""

    code = "CHKDIR-PRM000"


class NotADirectoryCheckError(PermissionCheckError):
    """Raised when a target path is not a directory.

    Error code: CHKDIR-PRM001
    """

    code = "CHKDIR-PRM001"

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} is not a directory", path=path)


class DirectoryNotReadableError(PermissionCheckError):
    """Raised when a target directory is not readable.

    Error code: CHKDIR-PRM002
    """

    code = "CHKDIR-PRM002"

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} is not readable", path=path)


class DirectoryNotTraversableError(PermissionCheckError):
    """Raised when a target directory is not executable (cannot be traversed).

    Error code: CHKDIR-PRM003
    """

    code = "CHKDIR-PRM003"

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} is not executable", path=path)


# Scan Errors (CHKDIR-SCN*)
class ScanError(CheckDirError):
    """Base class for scan-related errors."""

    code = "CHKDIR-SCN000"


class DirectoryScanError(ScanError):
    """Raised when a directory cannot be opened, read or closed.

    Error code: CHKDIR-SCN001
    """

    code = "CHKDIR-SCN001"

    def __init__(self, path: str, original_error: OSError) -> None:
        super().__init__(
            f"Cannot read directory {path}: {original_error.strerror or original_error}",
            path=path,
            original_error_type=type(original_error).__name__,
            original_error_message=str(original_error),
        )
        # Keep original exception for programmatic access (not serialized)
        self.original_exception = original_error
