"""Two-phase identifier resolution.

The pipeline is a small state machine::

    Idle -> ResolvingDeterministic -> ResolvingGenerative -> Idle
                      |                        |
                      +--------> Failed <------+

Phase 1 submits the selected records to the deterministic resolver and merges
its answer with the overwrite policy. The selection is then re-read from the
updated master set and only records still lacking an api name are described to
the generative resolver, whose answer is merged fill-only by correlation key.
Both calls are awaited strictly in sequence. A failed call, or a reply that
cannot be merged, moves the pipeline to Failed and leaves whatever was committed
before it in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from trailpack.domain.errors import PipelineBusyError, ResolverFailure
from trailpack.domain.model import record_from_entry
from trailpack.domain.reconciliation import DescriptionKeyStrategy, MergePolicy, merge

from .notices import Notice, NoticeHandler, NoticeLevel

if TYPE_CHECKING:
    from collections.abc import Sequence

    from trailpack.domain.model import Record
    from trailpack.domain.ports import DeterministicResolver, GenerativeResolver
    from trailpack.domain.reconciliation import CorrelationStrategy
    from trailpack.domain.workspace import Workspace

log = getLogger(__name__)


class PipelineState(StrEnum):
    IDLE = "Idle"
    RESOLVING_DETERMINISTIC = "ResolvingDeterministic"
    RESOLVING_GENERATIVE = "ResolvingGenerative"
    FAILED = "Failed"


_IN_FLIGHT = frozenset({PipelineState.RESOLVING_DETERMINISTIC, PipelineState.RESOLVING_GENERATIVE})


class ResolutionStatus(StrEnum):
    NOTHING_SELECTED = "nothing_selected"
    COMPLETE = "complete"
    PARTIAL = "partial"


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    """Summary of one pipeline run."""

    status: ResolutionStatus
    requested: int = 0
    resolved_deterministic: int = 0
    generative_requested: int = 0
    resolved_generative: int = 0
    unresolved_ids: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        return self.status is ResolutionStatus.COMPLETE


@dataclass(slots=True)
class ResolutionPipeline:
    deterministic: DeterministicResolver
    generative: GenerativeResolver | None = None
    correlation: CorrelationStrategy = field(default_factory=DescriptionKeyStrategy)
    notify: NoticeHandler | None = None
    state: PipelineState = PipelineState.IDLE
    last_error: BaseException | None = None

    @property
    def in_flight(self) -> bool:
        return self.state in _IN_FLIGHT

    async def run(self, workspace: Workspace) -> ResolutionOutcome:
        """Resolve the workspace's current selection."""

        if self.in_flight or workspace.resolving:
            raise PipelineBusyError("A resolution is already running for this workspace")

        selected = workspace.selected_records()
        if not selected:
            log.info("Nothing selected; skipping resolution")
            return ResolutionOutcome(status=ResolutionStatus.NOTHING_SELECTED)

        workspace.resolving = True
        self.last_error = None
        try:
            return await self._run(workspace, selected)
        finally:
            workspace.resolving = False

    async def _run(self, workspace: Workspace, selected: Sequence[Record]) -> ResolutionOutcome:
        self._transition(PipelineState.RESOLVING_DETERMINISTIC)
        self._emit(Notice("Step 1", "Checking system metadata (exact catalog lookup)..."))

        try:
            returned = await self.deterministic(tuple(selected))
            updates = [record_from_entry(record) for record in returned]
            workspace.commit(merge(workspace.master, updates, MergePolicy.OVERWRITE))
        except Exception as exc:
            raise self._fail("deterministic", exc) from exc

        # Re-read from the merged master, not the pre-resolve snapshot.
        current = workspace.selected_records()
        unresolved = [record for record in current if not record.is_resolved]
        resolved_deterministic = len(current) - len(unresolved)
        log.info(
            "Deterministic phase: requested=%s, returned=%s, resolved=%s, unresolved=%s",
            len(selected),
            len(updates),
            resolved_deterministic,
            len(unresolved),
        )

        if not unresolved:
            self._transition(PipelineState.IDLE)
            self._emit(
                Notice("Success", "All items resolved via exact lookup!", NoticeLevel.SUCCESS)
            )
            return ResolutionOutcome(
                status=ResolutionStatus.COMPLETE,
                requested=len(selected),
                resolved_deterministic=resolved_deterministic,
            )

        if self.generative is None:
            self._transition(PipelineState.IDLE)
            self._emit(
                Notice(
                    "Partial",
                    f"{len(unresolved)} items remain unresolved (inference disabled).",
                    NoticeLevel.WARNING,
                )
            )
            return ResolutionOutcome(
                status=ResolutionStatus.PARTIAL,
                requested=len(selected),
                resolved_deterministic=resolved_deterministic,
                unresolved_ids=tuple(record.id for record in unresolved),
            )

        self._transition(PipelineState.RESOLVING_GENERATIVE)
        self._emit(Notice("Step 2", f"Using inference for remaining {len(unresolved)} items..."))
        descriptions = self.correlation.requests_for(unresolved)

        try:
            inferred = await self.generative(descriptions)
            workspace.commit(
                merge(
                    workspace.master,
                    dict(inferred),
                    MergePolicy.FILL_ONLY_BY_KEY,
                    correlation=self.correlation,
                )
            )
        except Exception as exc:
            raise self._fail("generative", exc) from exc

        final = workspace.selected_records()
        still_unresolved = tuple(record.id for record in final if not record.is_resolved)
        unresolved_ids = {record.id for record in unresolved}
        resolved_generative = sum(
            1 for record in final if record.id in unresolved_ids and record.is_resolved
        )
        log.info(
            "Generative phase: requested=%s, answered=%s, resolved=%s, unresolved=%s",
            len(descriptions),
            len(inferred),
            resolved_generative,
            len(still_unresolved),
        )

        self._transition(PipelineState.IDLE)
        self._emit(Notice("Success", "Resolution complete.", NoticeLevel.SUCCESS))
        return ResolutionOutcome(
            status=ResolutionStatus.PARTIAL if still_unresolved else ResolutionStatus.COMPLETE,
            requested=len(selected),
            resolved_deterministic=resolved_deterministic,
            generative_requested=len(descriptions),
            resolved_generative=resolved_generative,
            unresolved_ids=still_unresolved,
        )

    def _transition(self, state: PipelineState) -> None:
        log.debug("Pipeline state %s -> %s", self.state, state)
        self.state = state

    def _fail(self, phase: str, exc: BaseException) -> ResolverFailure:
        self._transition(PipelineState.FAILED)
        self.last_error = exc
        message = f"{phase.capitalize()} resolver failed: {exc}"
        log.error(message)
        self._emit(Notice("Error", message, NoticeLevel.ERROR))
        return ResolverFailure(message, phase=phase)

    def _emit(self, notice: Notice) -> None:
        if self.notify is not None:
            self.notify(notice)
