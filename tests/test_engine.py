"""Tests for objdup.engine — working set selection and batch runs."""

import pytest

from objdup.engine import duplicate_selection, run
from objdup.errors import ObjDupError
from objdup.models import DuplicationRequest, DuplicationResult
from objdup.timeline import Timeline

P = "payload"


def _request(**kwargs):
    kwargs.setdefault("interval", 10)
    kwargs.setdefault("mode", "count")
    kwargs.setdefault("copies", 2)
    return DuplicationRequest(**kwargs)


class TestSelection:
    def test_selection_wins_over_focus(self, scripted):
        section = scripted(
            objects={"a": (0, 0, 10, P), "b": (1, 0, 10, P), "f": (2, 0, 10, P)},
            selected=["a", "b"],
            focus="f",
        )
        result = duplicate_selection(section, _request(), DuplicationResult())
        assert result.diagnostic_trace[0] == "selected=2"
        assert {a[1] for a in section.attempts} == {0, 1}
        assert result.processed_object_count == 2
        assert result.total_created == 4

    def test_selection_order_is_kept(self, scripted):
        section = scripted(
            objects={"a": (0, 0, 10, P), "b": (1, 0, 10, P)},
            selected=["b", "a"],
        )
        duplicate_selection(section, _request(copies=1), DuplicationResult())
        assert [a[1] for a in section.attempts] == [1, 0]

    def test_focus_fallback(self, scripted):
        section = scripted(objects={"f": (2, 5, 15, P)}, focus="f")
        result = duplicate_selection(section, _request(copies=3), DuplicationResult())
        assert result.diagnostic_trace == ["focus=1"]
        assert result.total_created == 3

    def test_nothing_selected(self, scripted):
        section = scripted(objects={"a": (0, 0, 10, P)})
        result = duplicate_selection(section, _request(), DuplicationResult())
        assert result.diagnostic_trace == ["selected=0, focus=none"]
        assert result.total_created == 0
        assert result.total_failed == 0
        assert result.processed_object_count == 0
        assert result.no_payload_count == 0
        assert section.attempts == []

    def test_unresolved_handle_skipped(self, scripted):
        section = scripted(objects={"a": (0, 0, 10, P)}, selected=[None, "a"])
        result = duplicate_selection(section, _request(copies=1), DuplicationResult())
        assert result.diagnostic_trace == ["selected=2"]
        assert result.processed_object_count == 1
        assert result.no_payload_count == 0


class TestBatch:
    def test_mixed_batch_aggregates(self, scripted):
        section = scripted(
            objects={
                "a": (0, 0, 10, P),
                "empty": (1, 0, 10, ""),
                "flat": (2, 10, 10, P),
                "b": (3, 0, 10, P),
            },
            selected=["a", "empty", "flat", "b"],
        )
        result = duplicate_selection(section, _request(copies=2), DuplicationResult())
        assert result.processed_object_count == 2
        assert result.no_payload_count == 1
        assert result.total_created == 4
        assert result.diagnostic_trace == ["selected=4", "[payload=none]", "[len=0]"]

    def test_stop_is_scoped_to_one_object(self, scripted):
        section = scripted(
            objects={"a": (0, 0, 10, P), "b": (1, 0, 10, P)},
            selected=["a", "b"],
            fail_on={1},
        )
        result = duplicate_selection(
            section, _request(copies=3, stop_on_failure=True), DuplicationResult(),
        )
        # "a" stops at its first attempt, "b" still gets all three
        assert result.total_failed == 1
        assert result.total_created == 3
        assert len(section.attempts) == 4

    def test_progress_callback(self, scripted):
        section = scripted(
            objects={"a": (0, 0, 10, P), "b": (1, 0, 10, P)},
            selected=["a", None, "b"],
        )
        events = []
        duplicate_selection(
            section, _request(), DuplicationResult(),
            progress_callback=lambda *e: events.append(e),
        )
        assert events == [
            (1, 3, "a", "running"),
            (1, 3, "a", "done"),
            (3, 3, "b", "running"),
            (3, 3, "b", "done"),
        ]


class TestRun:
    def test_returns_fresh_result(self, scripted, scripted_handle):
        handle = scripted_handle(scripted(objects={"a": (0, 0, 10, P)}, selected=["a"]))
        first = run(handle, _request(copies=2))
        second = run(handle, _request(copies=2))
        assert first is not second
        assert first.total_created == 2
        assert second.total_created == 2
        assert handle.calls == 2

    def test_host_unavailable(self, scripted, scripted_handle):
        handle = scripted_handle(scripted(objects={"a": (0, 0, 10, P)}, selected=["a"]), available=False)
        with pytest.raises(ObjDupError) as exc_info:
            run(handle, _request())
        assert exc_info.value.code == "HOST_STATE_UNAVAILABLE"
        assert handle.section.attempts == []

    def test_empty_run_is_not_an_error(self, scripted, scripted_handle):
        result = run(scripted_handle(scripted()), _request())
        assert result.diagnostic_trace == ["selected=0, focus=none"]
        assert result.summary() == "done: created 0 / failed 0 [selected=0, focus=none]"

    def test_scenario_on_timeline(self):
        tl = Timeline()
        src = tl.add(layer=1, start=10, end=50, payload="[Object]")
        tl.selected = [src.id]
        result = run(tl, DuplicationRequest(interval=40, mode="count", copies=3))
        assert result.total_created == 3
        assert [(o.start, o.end) for o in tl.layer_objects(1)] == [(10, 50), (50, 90), (90, 130), (130, 170)]
        assert all(o.payload == "[Object]" for o in tl.layer_objects(1))

    def test_overlap_failures_on_timeline(self):
        tl = Timeline()
        src = tl.add(layer=0, start=0, end=10, payload="x")
        tl.add(layer=0, start=25, end=35, payload="blocker")
        tl.selected = [src.id]

        keep_going = run(tl, DuplicationRequest(interval=10, mode="count", copies=5))
        # copies at 10, 40 and 50 fit, 20 and 30 hit the blocker
        assert keep_going.total_created == 3
        assert keep_going.total_failed == 2

    def test_stop_on_overlap_on_timeline(self):
        tl = Timeline()
        src = tl.add(layer=0, start=0, end=10, payload="x")
        tl.add(layer=0, start=25, end=35, payload="blocker")
        tl.selected = [src.id]

        result = run(tl, DuplicationRequest(interval=10, mode="count", copies=5, stop_on_failure=True))
        assert result.total_created == 1
        assert result.total_failed == 1

    def test_busy_timeline(self, timeline):
        timeline.busy = True
        with pytest.raises(ObjDupError) as exc_info:
            run(timeline, _request())
        assert exc_info.value.code == "HOST_STATE_UNAVAILABLE"
        assert len(timeline.objects) == 3
