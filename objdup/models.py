"""Data models for objdup — request, result and object ranges."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Union

from objdup.errors import (
    ObjDupError,
    INVALID_REQUEST,
    UNKNOWN_MODE,
    recovery_hints,
)


# Opaque object payload as handed out by the host
Payload = Union[bytes, str]


# ---------------------------------------------------------------------------
# Duplication modes
# ---------------------------------------------------------------------------

MODE_COUNT = "count"
MODE_LIMIT = "limit"
DUPLICATION_MODES = {MODE_COUNT, MODE_LIMIT}


# ---------------------------------------------------------------------------
# Object range
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ObjectRange:
    """Layer and frame span of a timeline object, end exclusive."""
    layer: int
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

def _invalid_field(key: str, kind: str, value) -> ObjDupError:
    return ObjDupError(
        code=INVALID_REQUEST,
        message=f"Request field '{key}' must be {kind}, got {value!r}",
        recovery=recovery_hints(INVALID_REQUEST),
        context={"field": key, "value": value},
    )


def _as_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool):
        raise _invalid_field(key, "an integer", value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise _invalid_field(key, "an integer", value) from exc


def _as_bool(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise _invalid_field(key, "a boolean", value)
    return value


@dataclass(frozen=True)
class DuplicationRequest:
    """One duplication run: step, termination mode and failure policy.

    Numeric fields are clamped on construction: ``interval`` to at least 1,
    ``copies`` and ``limit_frame`` to at least 0.
    """
    interval: int = 1
    mode: str = MODE_COUNT
    copies: int = 0
    limit_frame: int = 0
    stop_on_failure: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.mode, str) or self.mode not in DUPLICATION_MODES:
            context = {"mode": self.mode, "supported": sorted(DUPLICATION_MODES)}
            raise ObjDupError(
                code=UNKNOWN_MODE,
                message=f"Unknown duplication mode: {self.mode!r}",
                recovery=recovery_hints(UNKNOWN_MODE, context),
                context=context,
            )
        object.__setattr__(self, "interval", max(1, int(self.interval)))
        object.__setattr__(self, "copies", max(0, int(self.copies)))
        object.__setattr__(self, "limit_frame", max(0, int(self.limit_frame)))
        object.__setattr__(self, "stop_on_failure", bool(self.stop_on_failure))

    @property
    def by_count(self) -> bool:
        return self.mode == MODE_COUNT

    def to_dict(self) -> dict:
        d: dict = {
            "interval": self.interval,
            "mode": self.mode,
            "stop_on_failure": self.stop_on_failure,
        }
        if self.by_count:
            d["copies"] = self.copies
        else:
            d["limit_frame"] = self.limit_frame
        return d

    @classmethod
    def from_dict(cls, data: dict) -> DuplicationRequest:
        return cls(
            interval=_as_int(data, "interval", 1),
            mode=data.get("mode", MODE_COUNT),
            copies=_as_int(data, "copies", 0),
            limit_frame=_as_int(data, "limit_frame", 0),
            stop_on_failure=_as_bool(data, "stop_on_failure", False),
        )


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass
class DuplicationResult:
    """Counters and diagnostic trace accumulated over one batch run."""
    total_created: int = 0
    total_failed: int = 0
    processed_object_count: int = 0
    no_payload_count: int = 0
    diagnostic_trace: list[str] = field(default_factory=list)

    def trace(self, token: str) -> None:
        self.diagnostic_trace.append(token)

    @property
    def diagnostic_message(self) -> str:
        return " ".join(self.diagnostic_trace)

    def summary(self) -> str:
        """Operator-facing status line."""
        return (
            f"done: created {self.total_created} / failed {self.total_failed} "
            f"[{self.diagnostic_message}]"
        )

    def to_dict(self) -> dict:
        return {
            "total_created": self.total_created,
            "total_failed": self.total_failed,
            "processed_object_count": self.processed_object_count,
            "no_payload_count": self.no_payload_count,
            "diagnostic_trace": list(self.diagnostic_trace),
            "summary": self.summary(),
        }
