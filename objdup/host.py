"""Host interfaces objdup needs from the editor that owns the timeline."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, Sequence, runtime_checkable

from objdup.models import ObjectRange, Payload

# Opaque reference to one timeline object, only meaningful to the host
ObjectHandle = Any


@runtime_checkable
class EditSection(Protocol):
    """Access to the host's editing state, valid for one callback only."""

    def get_selected_objects(self) -> Sequence[Optional[ObjectHandle]]:
        ...

    def get_focused_object(self) -> Optional[ObjectHandle]:
        ...

    def get_object_range(self, handle: ObjectHandle) -> ObjectRange:
        ...

    def get_object_payload(self, handle: ObjectHandle) -> Optional[Payload]:
        ...

    def create_object_from_payload(
        self, payload: Payload, layer: int, start: int, length: int,
    ) -> Optional[ObjectHandle]:
        """Create an object; returns a truthy handle, or a falsy value if the host rejected it."""
        ...


EditCallback = Callable[[EditSection], None]


@runtime_checkable
class EditHandle(Protocol):
    """Entry point the host hands out for scoped edits."""

    def call_edit_section(self, callback: EditCallback) -> bool:
        """Run *callback* inside an edit section.

        Returns False without calling *callback* when the host cannot grant
        access right now.
        """
        ...
