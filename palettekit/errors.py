"""Error codes and user-facing error reporting for palettekit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any

from palettekit.themes.models import (
    InheritanceCycle,
    InheritanceError,
    InvalidHex,
    ManifestParseError,
    NoRoot,
    UnknownParent,
    UnknownPreset,
)


class ErrorCode(Enum):
    """Standardized error codes for palettekit operations."""

    # Color literals
    INVALID_HEX = auto()

    # Manifest parsing
    MANIFEST_INVALID = auto()

    # Inheritance
    UNKNOWN_PARENT = auto()
    INHERITANCE_CYCLE = auto()
    NO_ROOT = auto()

    # Lookup
    UNKNOWN_PRESET = auto()

    # Anything else
    OPERATION_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_HEX: "Colors must be 6-digit hex values such as #1A1B26.",
    ErrorCode.MANIFEST_INVALID: "Fix the theme file; unknown sections or slots are usually typos.",
    ErrorCode.UNKNOWN_PARENT: "Register the parent theme first, or correct [meta].inherits.",
    ErrorCode.INHERITANCE_CYCLE: "Theme inheritance must form a chain, not a loop.",
    ErrorCode.NO_ROOT: "Every inheritance chain must end at a preset-base theme.",
    ErrorCode.UNKNOWN_PRESET: "Run `palettekit list` to see the available presets.",
    ErrorCode.OPERATION_FAILED: "An unexpected error occurred.",
}


@dataclass
class ErrorReport:
    """A classified failure with a suggestion for the user."""

    code: ErrorCode
    message: str
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.suggestion:
            self.suggestion = ERROR_MESSAGES.get(self.code, "")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def classify_error(exc: Exception) -> ErrorReport:
    """Map an exception onto an :class:`ErrorReport`."""
    message = str(exc)
    if isinstance(exc, ManifestParseError):
        origin = Path(exc.origin) if exc.origin else None
        details: dict[str, Any] = {"reason": exc.reason}
        if isinstance(exc.__cause__, InvalidHex):
            details["value"] = exc.__cause__.value
        return ErrorReport(ErrorCode.MANIFEST_INVALID, message, path=origin, details=details)
    if isinstance(exc, InvalidHex):
        return ErrorReport(ErrorCode.INVALID_HEX, message, details={"value": exc.value})
    if isinstance(exc, UnknownParent):
        return ErrorReport(
            ErrorCode.UNKNOWN_PARENT,
            message,
            details={"parent": exc.parent_id, "child": exc.child_id},
        )
    if isinstance(exc, InheritanceCycle):
        return ErrorReport(ErrorCode.INHERITANCE_CYCLE, message, details={"chain": list(exc.chain)})
    if isinstance(exc, NoRoot):
        return ErrorReport(ErrorCode.NO_ROOT, message, details={"preset": exc.preset_id})
    if isinstance(exc, InheritanceError):
        return ErrorReport(ErrorCode.NO_ROOT, message)
    if isinstance(exc, UnknownPreset):
        return ErrorReport(ErrorCode.UNKNOWN_PRESET, message, details={"preset": exc.preset_id})
    return ErrorReport(ErrorCode.OPERATION_FAILED, f"{type(exc).__name__}: {exc}")


def format_error_for_user(error: ErrorReport | Exception) -> str:
    """Format an error for display with an actionable suggestion."""
    report = error if isinstance(error, ErrorReport) else classify_error(error)
    parts = [report.message]
    if report.suggestion and report.suggestion != report.message:
        parts.append(f"\n{report.suggestion}")
    return "".join(parts)
