"""Selection state that survives changes to the filtered view.

Row-selection widgets only report what is selected among the rows they are
currently showing. :class:`SelectionTracker` folds each such report back into
the full selection so that ids hidden by the active filter are never lost.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from trailpack.domain.model import RecordFilter

if TYPE_CHECKING:
    from collections.abc import Iterable

    from trailpack.domain.model import MasterSet, Record

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FilterView:
    """Non-owning projection of a master set restricted to one filter."""

    master: MasterSet
    active_filter: RecordFilter = RecordFilter.ALL

    @property
    def records(self) -> list[Record]:
        return [record for record in self.master if self.active_filter.admits(record.action_type)]

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(record.id for record in self.records)

    def __contains__(self, record_id: object) -> bool:
        record = self.master.get(record_id) if isinstance(record_id, str) else None
        return record is not None and self.active_filter.admits(record.action_type)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(slots=True)
class SelectionTracker:
    """Holds the ids the user intends to resolve and export."""

    selected: frozenset[str] = field(default_factory=frozenset)

    def __len__(self) -> int:
        return len(self.selected)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self.selected

    def on_selection_event(
        self,
        visible_selected_ids: Iterable[str],
        current_view: FilterView,
    ) -> frozenset[str]:
        """Reconcile a widget selection report with selections hidden by the view."""

        visible = frozenset(visible_selected_ids)
        hidden = frozenset(
            record_id for record_id in self.selected if record_id not in current_view
        )
        self.selected = hidden | visible
        log.debug(
            "Selection event: visible=%s, hidden=%s, total=%s",
            len(visible),
            len(hidden),
            len(self.selected),
        )
        return self.selected

    def select(self, record_ids: Iterable[str]) -> frozenset[str]:
        self.selected = self.selected | frozenset(record_ids)
        return self.selected

    def deselect(self, record_ids: Iterable[str]) -> frozenset[str]:
        self.selected = self.selected - frozenset(record_ids)
        return self.selected

    def clear(self) -> None:
        self.selected = frozenset()

    def resolve(self, master: MasterSet) -> list[Record]:
        """Return the selected records in master order, dropping stale ids."""

        stale = [record_id for record_id in self.selected if record_id not in master]
        if stale:
            log.debug("Dropping %s stale selection(s): %s", len(stale), sorted(stale))
            self.selected = self.selected - frozenset(stale)
        return master.select(self.selected)
