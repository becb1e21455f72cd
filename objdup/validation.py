"""Dry-run validation — check a request and preview the duplicates it would make."""

from __future__ import annotations

from typing import Optional

from objdup.engine import _working_set
from objdup.errors import ObjDupError, HOST_STATE_UNAVAILABLE, recovery_hints
from objdup.host import EditHandle, EditSection
from objdup.models import DuplicationRequest, DuplicationResult
from objdup.policy import target_starts, termination_for


# ---------------------------------------------------------------------------
# Validation result
# ---------------------------------------------------------------------------

class ValidationResult:
    """Collects errors, warnings and the planned duplicates of a dry run."""

    def __init__(self) -> None:
        self.errors: list[dict] = []
        self.warnings: list[dict] = []
        self.plan: list[dict] = []
        self.request: Optional[DuplicationRequest] = None

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def planned_count(self) -> int:
        return sum(len(entry.get("starts", [])) for entry in self.plan)

    def add_error(self, code: str, message: str, **context) -> None:
        self.errors.append({"code": code, "message": message, **context})

    def add_warning(self, code: str, message: str, **context) -> None:
        self.warnings.append({"code": code, "message": message, **context})

    def to_dict(self) -> dict:
        d: dict = {
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
        }
        if self.request is not None:
            d["request"] = self.request.to_dict()
        if self.plan:
            d["plan"] = self.plan
            d["planned_count"] = self.planned_count
        return d


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------

def _plan_in_section(section: EditSection, request: DuplicationRequest) -> list[dict]:
    plan: list[dict] = []
    termination = termination_for(request)
    # the selection trace is not part of a plan
    for handle in _working_set(section, DuplicationResult()):
        if handle is None:
            continue
        obj_range = section.get_object_range(handle)
        entry: dict = {"object": handle, **obj_range.to_dict()}
        if obj_range.length <= 0:
            entry["skipped"] = "zero_length"
        elif not section.get_object_payload(handle):
            entry["skipped"] = "no_payload"
        else:
            entry["starts"] = list(target_starts(obj_range.start, request.interval, termination))
        plan.append(entry)
    return plan


def plan_duplication(edit_handle: EditHandle, request: DuplicationRequest) -> list[dict]:
    """List, per source object, the start frames a run would try.

    Nothing is created. The working set is resolved with the same
    selection-then-focus rule as a real run.

    Raises:
        ObjDupError: HOST_STATE_UNAVAILABLE if the host refused access.
    """
    plan: list[dict] = []

    def _callback(section: EditSection) -> None:
        plan.extend(_plan_in_section(section, request))

    if not edit_handle.call_edit_section(_callback):
        raise ObjDupError(
            code=HOST_STATE_UNAVAILABLE,
            message="edit section unavailable (host busy?)",
            recovery=recovery_hints(HOST_STATE_UNAVAILABLE),
        )
    return plan


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------

def _check_raw_numbers(data: dict, result: ValidationResult) -> None:
    """Warn about values that will be clamped rather than used as given."""
    interval = data.get("interval")
    if isinstance(interval, int) and interval < 1:
        result.add_warning(
            "INTERVAL_CLAMPED",
            f"interval {interval} is below 1 and will be treated as 1",
            field="interval",
        )
    for key in ("copies", "limit_frame"):
        value = data.get(key)
        if isinstance(value, int) and value < 0:
            result.add_warning(
                "VALUE_CLAMPED",
                f"{key} {value} is negative and will be treated as 0",
                field=key,
            )


def validate_request(
    data: dict | DuplicationRequest,
    edit_handle: EditHandle | None = None,
) -> ValidationResult:
    """Validate a request and, given a host, preview what it would create.

    Args:
        data: Raw request dict or an already built DuplicationRequest.
        edit_handle: Optional host entry point used to build the plan.

    Returns:
        ValidationResult with errors, warnings and, when a host is given,
        the per-object plan.
    """
    result = ValidationResult()

    if isinstance(data, DuplicationRequest):
        request = data
    else:
        _check_raw_numbers(data, result)
        try:
            request = DuplicationRequest.from_dict(data)
        except ObjDupError as exc:
            result.add_error(exc.code, exc.message, **exc.context)
            return result
    result.request = request

    if request.by_count and request.copies == 0:
        result.add_warning("NO_COPIES", "copies is 0, nothing will be created")

    if edit_handle is None:
        return result

    try:
        result.plan = plan_duplication(edit_handle, request)
    except ObjDupError as exc:
        result.add_error(exc.code, exc.message, recovery=exc.recovery)
        return result

    if not result.plan:
        result.add_warning("NOTHING_SELECTED", "No selected or focused object to duplicate")
    for entry in result.plan:
        if entry.get("skipped") == "zero_length":
            result.add_warning(
                "ZERO_LENGTH_OBJECT",
                f"Object {entry['object']} has no length and will be skipped",
                object=entry["object"],
            )
        elif entry.get("skipped") == "no_payload":
            result.add_warning(
                "NO_PAYLOAD",
                f"Object {entry['object']} has no payload and cannot be duplicated",
                object=entry["object"],
            )
        elif not request.by_count and not entry["starts"]:
            result.add_warning(
                "LIMIT_BEFORE_FIRST_COPY",
                f"Object {entry['object']}: first copy would start at "
                f"{entry['start'] + request.interval}, after limit_frame {request.limit_frame}",
                object=entry["object"],
            )
    return result
