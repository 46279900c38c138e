"""Single-writer state container for one resolution session.

The workspace owns the master set, the selection and the active display
filter. Components never mutate records directly; they compute a new master
set through :func:`trailpack.domain.reconciliation.merge` and hand it to
:meth:`Workspace.commit`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from trailpack.domain.errors import UnknownRecordError
from trailpack.domain.model import MasterSet, RecordFilter, record_from_entry
from trailpack.domain.reconciliation import MergePolicy, RecordPatch, merge
from trailpack.domain.selection import FilterView, SelectionTracker

if TYPE_CHECKING:
    from collections.abc import Iterable

    from trailpack.domain.model import Record
    from trailpack.domain.ports import RawEntry

log = getLogger(__name__)


@dataclass(slots=True)
class Workspace:
    master: MasterSet = field(default_factory=MasterSet)
    selection: SelectionTracker = field(default_factory=SelectionTracker)
    active_filter: RecordFilter = RecordFilter.ALL
    resolving: bool = False

    @classmethod
    def from_entries(cls, entries: Iterable[RawEntry]) -> Workspace:
        return cls(master=MasterSet(record_from_entry(entry) for entry in entries))

    @property
    def view(self) -> FilterView:
        return FilterView(self.master, self.active_filter)

    def on_filter_change(self, new_filter: RecordFilter | str) -> FilterView:
        """Switch the visible rows; the selection is left untouched."""

        self.active_filter = RecordFilter(new_filter)
        return self.view

    def on_selection_event(self, visible_selected_ids: Iterable[str]) -> frozenset[str]:
        return self.selection.on_selection_event(visible_selected_ids, self.view)

    def select_visible(self) -> frozenset[str]:
        """Select every row of the current view, keeping hidden selections."""

        return self.on_selection_event(self.view.ids)

    def selected_records(self) -> list[Record]:
        return self.selection.resolve(self.master)

    def commit(self, new_master: MasterSet) -> None:
        """Replace the master set with a merge result for the same records."""

        if set(new_master.ids) != set(self.master.ids):
            raise ValueError("Committed master set must contain exactly the existing record ids")
        self.master = new_master

    def apply_edits(self, patches: Iterable[RecordPatch]) -> MasterSet:
        """Fold manual field edits into the master set through the merge engine."""

        pending = list(patches)
        for patch in pending:
            if patch.record_id not in self.master:
                raise UnknownRecordError(patch.record_id)
        self.commit(merge(self.master, pending, MergePolicy.OVERWRITE))
        log.info("Applied %s manual edit(s)", len(pending))
        return self.master

    def apply_edit(self, record_id: str, api_name: str | None) -> Record:
        self.apply_edits([RecordPatch(record_id, {"api_name": api_name})])
        record = self.master.get(record_id)
        if record is None:
            raise UnknownRecordError(record_id)
        return record

    @property
    def selected_count_label(self) -> str:
        return f"{len(self.selection)} items selected"

    @property
    def is_resolve_disabled(self) -> bool:
        return len(self.selection) == 0 or self.resolving

    @property
    def is_generate_disabled(self) -> bool:
        return len(self.selection) == 0
