"""Single-object duplication."""

from __future__ import annotations

from objdup.host import EditSection, ObjectHandle
from objdup.models import DuplicationRequest, DuplicationResult
from objdup.policy import target_starts, termination_for


def duplicate_object(
    section: EditSection,
    handle: ObjectHandle,
    request: DuplicationRequest,
    result: DuplicationResult,
) -> None:
    """Duplicate one timeline object along its layer and update *result*.

    Zero-length objects are traced and skipped without touching any counter.
    Objects without a payload bump ``no_payload_count`` and are not counted as
    processed. Every other object is counted once, then each target start is
    handed to the host with the source's layer and length. A rejected
    creation counts as a failure; with ``stop_on_failure`` the remaining
    starts of this object are not attempted.

    The source object is never modified and the payload is passed through
    untouched.
    """
    obj_range = section.get_object_range(handle)
    length = obj_range.length
    if length <= 0:
        result.trace("[len=0]")
        return

    payload = section.get_object_payload(handle)
    if not payload:
        result.no_payload_count += 1
        result.trace("[payload=none]")
        return

    result.processed_object_count += 1

    termination = termination_for(request)
    for new_start in target_starts(obj_range.start, request.interval, termination):
        created = section.create_object_from_payload(
            payload, obj_range.layer, new_start, length,
        )
        if created:
            result.total_created += 1
            continue
        result.total_failed += 1
        if request.stop_on_failure:
            break
