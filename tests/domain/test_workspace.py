from __future__ import annotations

import pytest

from trailpack.domain.errors import UnknownRecordError
from trailpack.domain.model import ActionType, MasterSet, RecordFilter
from trailpack.domain.workspace import Workspace
from tests.helpers.records import make_entry, make_record


def test_from_entries_builds_master_in_source_order() -> None:
    workspace = Workspace.from_entries([make_entry("2"), make_entry("1")])

    assert workspace.master.ids == ("2", "1")
    assert workspace.active_filter is RecordFilter.ALL
    assert len(workspace.selection) == 0


def test_select_visible_keeps_hidden_selection() -> None:
    workspace = Workspace(
        master=MasterSet(
            [
                make_record("c1", action_type=ActionType.CREATED),
                make_record("u1"),
                make_record("u2"),
            ]
        )
    )
    workspace.on_filter_change("Created")
    workspace.select_visible()
    workspace.on_filter_change(RecordFilter.UPDATED)
    workspace.on_selection_event(["u2"])

    assert workspace.selection.selected == frozenset({"c1", "u2"})
    assert workspace.selected_count_label == "2 items selected"
    assert [record.id for record in workspace.selected_records()] == ["c1", "u2"]


def test_selection_made_under_all_persists_through_created_filter() -> None:
    workspace = Workspace(
        master=MasterSet(
            [
                make_record("u1"),
                make_record("c1", action_type=ActionType.CREATED),
                make_record("c2", action_type=ActionType.CREATED),
            ]
        )
    )
    workspace.on_selection_event(["u1"])
    workspace.on_filter_change(RecordFilter.CREATED)
    workspace.on_selection_event(["c2"])
    workspace.on_filter_change(RecordFilter.ALL)

    assert workspace.selection.selected == frozenset({"u1", "c2"})
    assert [record.id for record in workspace.selected_records()] == ["u1", "c2"]


def test_apply_edit_overwrites_api_name() -> None:
    workspace = Workspace(master=MasterSet([make_record("1"), make_record("2", api_name="Old__c")]))

    updated = workspace.apply_edit("2", "Account.New__c")
    cleared = workspace.apply_edit("2", "")

    assert updated.api_name == "Account.New__c"
    assert cleared.api_name is None
    assert not cleared.is_resolved


def test_apply_edit_rejects_unknown_id() -> None:
    workspace = Workspace(master=MasterSet([make_record("1")]))

    with pytest.raises(UnknownRecordError):
        workspace.apply_edit("nope", "Foo__c")


def test_commit_requires_same_record_ids() -> None:
    workspace = Workspace(master=MasterSet([make_record("1")]))

    with pytest.raises(ValueError, match="existing record ids"):
        workspace.commit(MasterSet([make_record("1"), make_record("2")]))


def test_disabled_predicates_follow_selection_and_resolving() -> None:
    workspace = Workspace(master=MasterSet([make_record("1")]))

    assert workspace.is_resolve_disabled
    assert workspace.is_generate_disabled

    workspace.select_visible()
    assert not workspace.is_resolve_disabled
    assert not workspace.is_generate_disabled

    workspace.resolving = True
    assert workspace.is_resolve_disabled
    assert not workspace.is_generate_disabled
