"""Tests for core utilities."""

import time
from datetime import datetime, timezone

import pytest


# ========== SCHEDULERS ==========

def test_virtual_clock_fires_due_calls_in_order(clock):
    """Calls fire in due-time order, ties in scheduling order."""
    fired = []
    clock.schedule(200, lambda: fired.append("b"))
    clock.schedule(100, lambda: fired.append("a"))
    clock.schedule(200, lambda: fired.append("c"))

    assert clock.advance(150) == 1
    assert fired == ["a"]
    assert clock.now_ms == 150

    clock.advance(50)
    assert fired == ["a", "b", "c"]
    assert clock.pending_count() == 0


def test_virtual_clock_cancelled_call_never_fires(clock):
    """Cancelled calls are skipped and report inactive."""
    fired = []
    call = clock.schedule(10, lambda: fired.append(1))
    assert call.active
    call.cancel()
    call.cancel()  # no-op
    assert not call.active

    clock.advance(100)
    assert fired == []


def test_virtual_clock_rejects_negative_advance(clock):
    with pytest.raises(ValueError):
        clock.advance(-1)


def test_virtual_clock_fires_calls_scheduled_while_advancing(clock):
    """A callback may schedule another call that falls due in the same advance."""
    fired = []
    clock.schedule(10, lambda: clock.schedule(10, lambda: fired.append(clock.now_ms)))
    clock.advance(30)
    assert fired == [20]


def test_qt_scheduler_fires_through_event_loop(qapp):
    """QtScheduler delivers callbacks via QTimer."""
    from pyqt_listview.core import QtScheduler

    fired = []
    call = QtScheduler().schedule(0, lambda: fired.append(1))
    deadline = time.monotonic() + 2.0
    while not fired and time.monotonic() < deadline:
        qapp.processEvents()

    assert fired == [1]
    assert not call.active


def test_qt_scheduler_cancel(qapp):
    from pyqt_listview.core import QtScheduler

    fired = []
    call = QtScheduler().schedule(0, lambda: fired.append(1))
    call.cancel()
    for _ in range(10):
        qapp.processEvents()
    assert fired == []
    assert not call.active


# ========== DEBOUNCE ==========

def test_debounce_timer_restarts_on_trigger(clock):
    """Handler fires once, delay_ms after the last trigger."""
    from pyqt_listview.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=50, handler=lambda: called.append(clock.now_ms), scheduler=clock)

    timer.trigger()
    clock.advance(30)
    timer.trigger()
    assert timer.pending
    clock.advance(30)
    assert called == []

    clock.advance(20)
    assert called == [80]
    assert not timer.pending
    assert clock.pending_count() == 0


def test_debounce_timer_force_and_cancel(clock):
    from pyqt_listview.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=50, handler=lambda: called.append(1), scheduler=clock)
    timer.trigger()
    timer.force()
    assert called == [1]
    assert not timer.pending

    timer.trigger()
    timer.cancel()
    timer.cancel()
    clock.advance(100)
    assert called == [1]


def test_debounced_value_commits_last_value_of_burst(clock):
    """Only the final raw value of a burst commits, exactly D after it."""
    from pyqt_listview.core import DebouncedValue

    commits = []
    value = DebouncedValue(500, lambda v: commits.append((clock.now_ms, v)), scheduler=clock)

    for text in ("l", "la", "lam", "lamp"):
        value.set(text)
        clock.advance(100)

    assert commits == []
    assert value.raw == "lamp"
    assert value.committed == ""

    clock.advance(400)
    assert commits == [(800, "lamp")]
    assert value.committed == "lamp"


def test_debounced_value_skips_unchanged_commit(clock):
    """Typing and erasing within the quiet period commits nothing."""
    from pyqt_listview.core import DebouncedValue

    commits = []
    value = DebouncedValue(500, commits.append, scheduler=clock)
    value.set("a")
    clock.advance(100)
    value.set("")
    clock.advance(1000)
    assert commits == []


def test_debounced_value_commit_now_bypasses_timer(clock):
    from pyqt_listview.core import DebouncedValue

    commits = []
    value = DebouncedValue(500, commits.append, scheduler=clock, initial="old")
    value.set("new")
    value.commit_now("")

    assert commits == [""]
    assert value.raw == ""
    assert not value.pending
    clock.advance(1000)
    assert commits == [""]


def test_debounced_value_flush(clock):
    from pyqt_listview.core import DebouncedValue

    commits = []
    value = DebouncedValue(500, commits.append, scheduler=clock)
    value.flush()  # nothing pending
    value.set("abc")
    value.flush()
    assert commits == ["abc"]
    assert clock.pending_count() == 0


def test_debounced_value_close_cancels_pending(clock):
    """Closing before the timer fires is a silent no-op."""
    from pyqt_listview.core import DebouncedValue

    commits = []
    value = DebouncedValue(500, commits.append, scheduler=clock)
    value.set("abc")
    value.close()
    value.close()
    value.set("ignored")
    clock.advance(1000)

    assert commits == []
    assert value.raw == "abc"


# ========== FIELD ACCESS ==========

def test_resolve_field_paths():
    from dataclasses import dataclass
    from pyqt_listview.core import resolve_field

    @dataclass
    class Author:
        username: str

    @dataclass
    class Post:
        title: str
        author: object

    assert resolve_field(Post("t", Author("ann")), "author.username") == "ann"
    assert resolve_field(Post("t", None), "author.username") is None
    assert resolve_field({"a": {"b": 3}}, "a.b") == 3
    assert resolve_field({"a": 1}, "missing") is None
    assert resolve_field({"a": 1}, lambda record: record["a"] + 1) == 2


# ========== SORTING ==========

def test_natural_sort():
    from pyqt_listview.core import natural_sort

    assert natural_sort(["Item 10", "item 2", "Item 1"]) == ["Item 1", "item 2", "Item 10"]


def test_text_comparator_is_case_insensitive():
    from pyqt_listview.core import text_comparator

    compare = text_comparator("name")
    assert compare({"name": "apple"}, {"name": "Banana"}) == -1
    assert compare({"name": "Banana"}, {"name": "apple"}) == 1
    assert compare({"name": "same"}, {"name": "same"}) == 0

    natural = text_comparator("name", natural=True)
    assert natural({"name": "Item 2"}, {"name": "Item 10"}) == -1


def test_number_comparator_directions():
    from pyqt_listview.core import number_comparator

    ascending = number_comparator("price")
    descending = number_comparator("rating", descending=True)
    assert ascending({"price": 1}, {"price": 2}) == -1
    assert descending({"rating": 1}, {"rating": 2}) == 1
    # Missing values sort last in both directions
    assert ascending({"price": None}, {"price": 2}) == 1
    assert descending({"rating": None}, {"rating": 2}) == 1


def test_timestamp_comparator_newest_first():
    from pyqt_listview.core import timestamp_comparator

    compare = timestamp_comparator("created_at")
    older = {"created_at": "2024-01-01T00:00:00Z"}
    newer = {"created_at": datetime(2024, 6, 1, tzinfo=timezone.utc)}
    assert compare(newer, older) == -1
    assert compare(older, newer) == 1

    oldest_first = timestamp_comparator("created_at", newest_first=False)
    assert oldest_first({"created_at": 10}, {"created_at": 20}) == -1


def test_stable_sorted_preserves_input_order_for_ties():
    from pyqt_listview.core import stable_sorted, number_comparator

    records = [{"id": i, "price": i % 3} for i in range(12)]
    ordered = stable_sorted(records, number_comparator("price"))

    assert [r["price"] for r in ordered] == sorted(r["price"] for r in records)
    for price in range(3):
        ids = [r["id"] for r in ordered if r["price"] == price]
        assert ids == sorted(ids)


def test_text_comparator_tolerates_nul_characters():
    """Text with embedded NUL characters sorts instead of raising."""
    from pyqt_listview.core import stable_sorted, text_comparator

    records = [{"name": "b"}, {"name": "a\x00b"}, {"name": "ab"}]
    ordered = stable_sorted(records, text_comparator("name"))
    assert [r["name"] for r in ordered] == ["a\x00b", "ab", "b"]

    natural = stable_sorted(records, text_comparator("name", natural=True))
    assert natural[-1]["name"] == "b"


def test_number_comparator_sorts_nan_last():
    from pyqt_listview.core import stable_sorted, number_comparator

    nan = float("nan")
    values = [5, nan, 3, 1, None, 4, 2]
    ordered = stable_sorted([{"v": v} for v in values], number_comparator("v"))
    assert [r["v"] for r in ordered[:5]] == [1, 2, 3, 4, 5]
    assert [r["v"] is None for r in ordered[5:]] == [False, True]

    descending = stable_sorted([{"v": v} for v in values], number_comparator("v", descending=True))
    assert [r["v"] for r in descending[:5]] == [5, 4, 3, 2, 1]


def test_stable_sorted_accepts_non_unit_comparators():
    """Comparators returning arbitrary signed numbers still sort correctly."""
    from pyqt_listview.core import stable_sorted

    ordered = stable_sorted([5, 1, 3, 1], lambda a, b: a - b)
    assert ordered == [1, 1, 3, 5]


# ========== PERFORMANCE MONITOR ==========

def test_performance_monitor_records_timings():
    from pyqt_listview.core import PerformanceMonitor

    monitor = PerformanceMonitor("test op")
    with monitor.measure():
        pass
    with monitor.measure():
        pass
    assert monitor.count == 2
    monitor.report(log_individual=True)
    monitor.reset()
    assert monitor.count == 0


def test_pipeline_stages_are_timed(catalog, catalog_config, clock, caplog):
    """Filter and sort recomputations are measured and logged."""
    import logging
    from pyqt_listview import create_view
    from pyqt_listview.core import get_monitor
    from pyqt_listview.services.memo_pipeline import FILTER_STAGE, SORT_STAGE

    filter_count = get_monitor(FILTER_STAGE).count
    sort_count = get_monitor(SORT_STAGE).count

    view = create_view(catalog, catalog_config, scheduler=clock)
    with caplog.at_level(logging.DEBUG, logger="pyqt_listview.performance"):
        view.current()
        view.current()

    assert get_monitor(FILTER_STAGE).count == filter_count + 1
    assert get_monitor(SORT_STAGE).count == sort_count + 1
    assert any(message.startswith(FILTER_STAGE) for message in caplog.messages)


def test_performance_monitor_keeps_bounded_samples():
    """Aggregates cover every measurement; only recent timings are retained."""
    from pyqt_listview.core import PerformanceMonitor

    monitor = PerformanceMonitor("bounded op", max_samples=3)
    for elapsed in (1.0, 2.0, 3.0, 4.0, 5.0):
        monitor.record(elapsed)

    assert monitor.count == 5
    assert monitor.total_ms == 15.0
    assert list(monitor.timings) == [3.0, 4.0, 5.0]
    monitor.report()
    monitor.reset()
    assert (monitor.count, len(monitor.timings)) == (0, 0)


def test_timed_decorator_logs_duration(caplog):
    import logging
    from pyqt_listview.core import timed

    @timed("Build choices")
    def build(values):
        return sorted(set(values))

    with caplog.at_level(logging.DEBUG, logger="pyqt_listview.performance"):
        assert build([3, 1, 3]) == [1, 3]
    assert any(message.startswith("Build choices: ") for message in caplog.messages)
    assert build.__name__ == "build"
