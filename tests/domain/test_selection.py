from __future__ import annotations

from trailpack.domain.model import ActionType, MasterSet, RecordFilter
from trailpack.domain.selection import FilterView, SelectionTracker
from tests.helpers.records import make_record


def _master() -> MasterSet:
    return MasterSet(
        [
            make_record("c1", action_type=ActionType.CREATED),
            make_record("u1", action_type=ActionType.UPDATED),
            make_record("c2", action_type=ActionType.CREATED),
            make_record("u2", action_type=ActionType.UPDATED),
        ]
    )


def test_filter_view_projects_by_action_type() -> None:
    master = _master()

    created = FilterView(master, RecordFilter.CREATED)
    updated = FilterView(master, RecordFilter.UPDATED)
    everything = FilterView(master)

    assert [record.id for record in created.records] == ["c1", "c2"]
    assert updated.ids == frozenset({"u1", "u2"})
    assert len(everything) == 4
    assert "c1" in created
    assert "u1" not in created
    assert "missing" not in everything


def test_selection_survives_filter_change() -> None:
    master = _master()
    tracker = SelectionTracker()

    tracker.on_selection_event(["c1", "u1"], FilterView(master))
    # The created-only view does not show u1, so the widget cannot report it.
    result = tracker.on_selection_event(["c1"], FilterView(master, RecordFilter.CREATED))

    assert result == frozenset({"c1", "u1"})


def test_deselecting_visible_row_keeps_hidden_rows() -> None:
    master = _master()
    tracker = SelectionTracker(frozenset({"c1", "c2", "u1"}))

    result = tracker.on_selection_event(["c2"], FilterView(master, RecordFilter.CREATED))

    assert result == frozenset({"c2", "u1"})


def test_resolve_drops_stale_ids_silently() -> None:
    master = _master()
    tracker = SelectionTracker(frozenset({"u2", "gone", "c1"}))

    records = tracker.resolve(master)

    assert [record.id for record in records] == ["c1", "u2"]
    assert tracker.selected == frozenset({"c1", "u2"})


def test_select_deselect_and_clear() -> None:
    tracker = SelectionTracker()

    tracker.select(["a", "b"])
    tracker.deselect(["a"])

    assert tracker.selected == frozenset({"b"})
    assert "b" in tracker
    assert len(tracker) == 1

    tracker.clear()
    assert len(tracker) == 0
