"""In-memory timeline host, a reference implementation of the host interfaces.

Objects live on integer layers and cover ``[start, end)`` frames. Like a real
editor, the timeline refuses to create an object that would overlap another
one on the same layer, and refuses edit access while it is busy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from objdup.errors import (
    ObjDupError,
    HOST_STATE_UNAVAILABLE,
    INVALID_TIMELINE,
    INVALID_SELECTION,
    MISSING_FIELD,
    recovery_hints,
)
from objdup.host import EditCallback
from objdup.models import ObjectRange, Payload


@dataclass
class TimelineObject:
    """A single object placed on the timeline."""
    id: int
    layer: int
    start: int
    end: int
    payload: Optional[Payload] = None

    @property
    def range(self) -> ObjectRange:
        return ObjectRange(layer=self.layer, start=self.start, end=self.end)

    def overlaps(self, layer: int, start: int, end: int) -> bool:
        return self.layer == layer and self.start < end and start < self.end

    def to_dict(self) -> dict:
        d: dict = {
            "id": self.id,
            "layer": self.layer,
            "start": self.start,
            "end": self.end,
        }
        if self.payload is not None:
            d["payload"] = self.payload
        return d

    @classmethod
    def from_dict(cls, data: dict, default_id: int) -> TimelineObject:
        try:
            return cls(
                id=int(data.get("id", default_id)),
                layer=int(data["layer"]),
                start=int(data["start"]),
                end=int(data["end"]),
                payload=data.get("payload"),
            )
        except KeyError as exc:
            raise ObjDupError(
                code=MISSING_FIELD,
                message=f"Timeline object missing required field: {exc}",
                recovery=recovery_hints(INVALID_TIMELINE),
                context={"missing_field": str(exc).strip("'")},
            ) from exc
        except (TypeError, ValueError) as exc:
            raise ObjDupError(
                code=INVALID_TIMELINE,
                message=f"Timeline object has a non-integer field: {exc}",
                recovery=recovery_hints(INVALID_TIMELINE),
                context={"object": data},
            ) from exc


class _TimelineSection:
    """Edit section over a Timeline; usable only while its grant is open."""

    def __init__(self, timeline: Timeline) -> None:
        self._timeline = timeline
        self._open = True

    def close(self) -> None:
        self._open = False

    def _check_open(self) -> Timeline:
        if not self._open:
            raise ObjDupError(
                code=HOST_STATE_UNAVAILABLE,
                message="Edit section used after its callback returned",
                recovery=["Only use the edit section inside the callback it was passed to"],
            )
        return self._timeline

    def get_selected_objects(self) -> list[Optional[int]]:
        timeline = self._check_open()
        return [oid if oid in timeline.objects else None for oid in timeline.selected]

    def get_focused_object(self) -> Optional[int]:
        timeline = self._check_open()
        if timeline.focus is not None and timeline.focus in timeline.objects:
            return timeline.focus
        return None

    def get_object_range(self, handle: int) -> ObjectRange:
        return self._check_open().objects[handle].range

    def get_object_payload(self, handle: int) -> Optional[Payload]:
        return self._check_open().objects[handle].payload

    def create_object_from_payload(
        self, payload: Payload, layer: int, start: int, length: int,
    ) -> Optional[int]:
        timeline = self._check_open()
        obj = timeline.place(layer, start, start + length, payload)
        return obj.id if obj is not None else None


class Timeline:
    """Objects, selection and focus of one editing session."""

    def __init__(
        self,
        objects: list[TimelineObject] | None = None,
        selected: list[int] | None = None,
        focus: int | None = None,
        busy: bool = False,
    ) -> None:
        self.objects: dict[int, TimelineObject] = {}
        for obj in objects or []:
            if obj.id in self.objects:
                raise ObjDupError(
                    code=INVALID_TIMELINE,
                    message=f"Duplicate object id {obj.id}",
                    recovery=recovery_hints(INVALID_TIMELINE),
                    context={"object_id": obj.id},
                )
            self.objects[obj.id] = obj
        self.selected: list[int] = list(selected or [])
        self.focus = focus
        self.busy = busy
        self._next_id = max(self.objects, default=0) + 1

    # -- editing -------------------------------------------------------------

    def add(self, layer: int, start: int, end: int, payload: Optional[Payload] = None) -> TimelineObject:
        """Add an object unconditionally and return it."""
        obj = TimelineObject(id=self._next_id, layer=layer, start=start, end=end, payload=payload)
        self.objects[obj.id] = obj
        self._next_id += 1
        return obj

    def can_place(self, layer: int, start: int, end: int) -> bool:
        if start < 0 or end <= start:
            return False
        return not any(o.overlaps(layer, start, end) for o in self.objects.values())

    def place(self, layer: int, start: int, end: int, payload: Optional[Payload]) -> Optional[TimelineObject]:
        """Add an object if the span is free on its layer, else return None."""
        if not self.can_place(layer, start, end):
            return None
        return self.add(layer, start, end, payload)

    def layer_objects(self, layer: int) -> list[TimelineObject]:
        return sorted((o for o in self.objects.values() if o.layer == layer), key=lambda o: o.start)

    # -- host entry point ----------------------------------------------------

    def call_edit_section(self, callback: EditCallback) -> bool:
        """Run *callback* with an edit section; False if the timeline is busy."""
        if self.busy:
            return False
        section = _TimelineSection(self)
        try:
            callback(section)
        finally:
            section.close()
        return True

    # -- serialization -------------------------------------------------------

    def to_dict(self) -> dict:
        d: dict = {
            "objects": [o.to_dict() for o in self.objects.values()],
            "selected": list(self.selected),
        }
        if self.focus is not None:
            d["focus"] = self.focus
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Timeline:
        if not isinstance(data, dict) or not isinstance(data.get("objects"), list):
            raise ObjDupError(
                code=INVALID_TIMELINE,
                message="Timeline must be an object with an 'objects' list",
                recovery=recovery_hints(INVALID_TIMELINE),
            )
        objects = [
            TimelineObject.from_dict(item, default_id=idx + 1)
            for idx, item in enumerate(data["objects"])
        ]
        timeline = cls(
            objects=objects,
            selected=list(data.get("selected", [])),
            focus=data.get("focus"),
            busy=bool(data.get("busy", False)),
        )
        for oid in timeline.selected + ([timeline.focus] if timeline.focus is not None else []):
            if not isinstance(oid, int) or oid not in timeline.objects:
                context = {"object_id": oid}
                raise ObjDupError(
                    code=INVALID_SELECTION,
                    message=f"Selection refers to unknown object id {oid!r}",
                    recovery=recovery_hints(INVALID_SELECTION, context),
                    context=context,
                )
        return timeline
