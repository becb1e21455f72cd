"""Batch orchestration: pick the source objects and duplicate each one."""

from __future__ import annotations

from typing import Callable, Optional

from objdup.errors import ObjDupError, HOST_STATE_UNAVAILABLE, recovery_hints
from objdup.host import EditHandle, EditSection, ObjectHandle
from objdup.models import DuplicationRequest, DuplicationResult
from objdup.operations import duplicate_object

# progress_callback(step, total, label, status) with status "running" | "done"
ProgressCallback = Callable[[int, int, str, str], None]


# ---------------------------------------------------------------------------
# Working set selection
# ---------------------------------------------------------------------------

def _working_set(section: EditSection, result: DuplicationResult) -> list[Optional[ObjectHandle]]:
    """Resolve which objects take part: the selection, else the focused object."""
    selected = list(section.get_selected_objects())
    if selected:
        result.trace(f"selected={len(selected)}")
        return selected

    focused = section.get_focused_object()
    if focused is not None:
        result.trace("focus=1")
        return [focused]

    result.trace("selected=0, focus=none")
    return []


def duplicate_selection(
    section: EditSection,
    request: DuplicationRequest,
    result: DuplicationResult,
    progress_callback: ProgressCallback | None = None,
) -> DuplicationResult:
    """Duplicate every object in the working set, accumulating into *result*.

    A stop or failure on one object never ends the batch. Handles the host
    could not resolve (``None``) are skipped without being counted.
    """
    handles = _working_set(section, result)
    total = len(handles)

    for idx, handle in enumerate(handles):
        if handle is None:
            continue
        label = str(handle)
        if progress_callback:
            progress_callback(idx + 1, total, label, "running")

        duplicate_object(section, handle, request, result)

        if progress_callback:
            progress_callback(idx + 1, total, label, "done")

    return result


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run(
    edit_handle: EditHandle,
    request: DuplicationRequest,
    progress_callback: ProgressCallback | None = None,
) -> DuplicationResult:
    """Run one batch duplication inside a host edit section.

    Args:
        edit_handle: Host entry point granting scoped edit access.
        request: Step, termination mode and failure policy.
        progress_callback: Optional callable(step, total, label, status)
            called before ("running") and after ("done") each source object.

    Returns:
        The populated DuplicationResult. A run with nothing selected returns
        a zero result whose trace says so.

    Raises:
        ObjDupError: HOST_STATE_UNAVAILABLE if the host refused the edit
            section, so nothing ran.
    """
    result = DuplicationResult()

    def _callback(section: EditSection) -> None:
        duplicate_selection(section, request, result, progress_callback)

    if not edit_handle.call_edit_section(_callback):
        raise ObjDupError(
            code=HOST_STATE_UNAVAILABLE,
            message="edit section unavailable (host busy?)",
            recovery=recovery_hints(HOST_STATE_UNAVAILABLE),
            context={"request": request.to_dict()},
        )
    return result
