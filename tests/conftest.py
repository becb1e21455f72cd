"""Shared test fixtures — in-memory timelines and scripted host doubles."""

from __future__ import annotations

import pytest

from objdup.models import ObjectRange
from objdup.timeline import Timeline


class ScriptedSection:
    """Edit section double over fixed objects that records every creation.

    ``fail_on`` holds 1-based creation attempt numbers the host rejects;
    a rejected attempt returns ``rejected`` (None unless given).
    """

    def __init__(self, objects=None, selected=None, focus=None, fail_on=(), rejected=None):
        # handle -> (layer, start, end, payload)
        self.objects = dict(objects or {})
        self.selected = list(selected or [])
        self.focus = focus
        self.fail_on = set(fail_on)
        self.rejected = rejected
        self.attempts: list[tuple] = []

    def get_selected_objects(self):
        return list(self.selected)

    def get_focused_object(self):
        return self.focus

    def get_object_range(self, handle):
        layer, start, end, _payload = self.objects[handle]
        return ObjectRange(layer=layer, start=start, end=end)

    def get_object_payload(self, handle):
        return self.objects[handle][3]

    def create_object_from_payload(self, payload, layer, start, length):
        self.attempts.append((payload, layer, start, length))
        if len(self.attempts) in self.fail_on:
            return self.rejected
        return f"new-{len(self.attempts)}"


class ScriptedHandle:
    """EditHandle double wrapping a ScriptedSection."""

    def __init__(self, section: ScriptedSection, available: bool = True):
        self.section = section
        self.available = available
        self.calls = 0

    def call_edit_section(self, callback) -> bool:
        if not self.available:
            return False
        self.calls += 1
        callback(self.section)
        return True


@pytest.fixture
def scripted():
    """Factory for ScriptedSection objects."""
    return ScriptedSection


@pytest.fixture
def scripted_handle():
    """Factory for ScriptedHandle objects."""
    return ScriptedHandle


@pytest.fixture
def timeline() -> Timeline:
    """Two objects on layer 0 and one on layer 2, object 1 selected."""
    tl = Timeline()
    tl.add(layer=0, start=10, end=50, payload="[Object]\nshape=circle")
    tl.add(layer=0, start=300, end=320, payload="[Object]\ntext=hello")
    tl.add(layer=2, start=0, end=10, payload="[Object]\nfilter=blur")
    tl.selected = [1]
    return tl
