"""Structured error handling with error codes and recovery suggestions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

# Host
HOST_STATE_UNAVAILABLE = "HOST_STATE_UNAVAILABLE"

# Request
INVALID_REQUEST = "INVALID_REQUEST"
UNKNOWN_MODE = "UNKNOWN_MODE"
MISSING_FIELD = "MISSING_FIELD"

# Timeline input
INVALID_TIMELINE = "INVALID_TIMELINE"
INVALID_SELECTION = "INVALID_SELECTION"

# Exit codes for CLI
EXIT_SUCCESS = 0
EXIT_VALIDATION = 1
EXIT_EXECUTION = 2
EXIT_SYSTEM = 3


# ---------------------------------------------------------------------------
# ObjDupError exception
# ---------------------------------------------------------------------------

@dataclass
class ObjDupError(Exception):
    """Structured error with code, message, recovery hints, and context."""
    code: str
    message: str
    recovery: list[str] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "recovery": self.recovery,
            "context": self.context,
        }


# ---------------------------------------------------------------------------
# Recovery hint factory
# ---------------------------------------------------------------------------

_RECOVERY_MAP: dict[str, list[str]] = {
    HOST_STATE_UNAVAILABLE: [
        "The host refused edit access, it may be rendering or exporting",
        "Wait for the host to become idle and run again",
    ],
    INVALID_REQUEST: [
        "interval, copies and limit_frame must be integers, stop_on_failure a boolean",
        "Run 'objdup capabilities' to see the request schema",
    ],
    UNKNOWN_MODE: [
        "Use mode 'count' (fixed number of copies) or 'limit' (up to a frame)",
    ],
    INVALID_TIMELINE: [
        "A timeline is an object with an 'objects' list",
        "Each object needs integer 'layer', 'start' and 'end' fields",
    ],
    INVALID_SELECTION: [
        "'selected' and 'focus' refer to object ids in the 'objects' list",
    ],
}


def recovery_hints(code: str, context: dict[str, Any] | None = None) -> list[str]:
    """Return recovery suggestions for a given error code."""
    hints = list(_RECOVERY_MAP.get(code, []))
    context = context or {}

    if code == UNKNOWN_MODE and "mode" in context:
        hints.insert(0, f"Got mode {context['mode']!r}")

    if code == INVALID_SELECTION and "object_id" in context:
        hints.insert(0, f"No object with id {context['object_id']}")

    return hints
