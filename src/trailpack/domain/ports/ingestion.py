"""Port for retrieving raw change-log entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from trailpack.domain.model import Record

type RawEntry = Mapping[str, Any] | Record


@runtime_checkable
class ChangeLogSource(Protocol):
    """Callable port returning the ordered change-log entries for one session."""

    async def __call__(self) -> Sequence[RawEntry]: ...


__all__ = ["ChangeLogSource", "RawEntry"]
