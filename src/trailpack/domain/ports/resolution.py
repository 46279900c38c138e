"""Ports for the two identifier resolvers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from trailpack.domain.model import Record


@runtime_checkable
class DeterministicResolver(Protocol):
    """Exact catalog lookup.

    Returns records carrying the same ids as the input, ``api_name`` populated
    where an exact match existed. Unmatched ids may be omitted.
    """

    async def __call__(self, records: Sequence[Record]) -> Sequence[Record]: ...


@runtime_checkable
class GenerativeResolver(Protocol):
    """Heuristic lookup from description strings to inferred identifiers.

    Descriptions without an inference are simply absent from the result.
    """

    async def __call__(self, descriptions: Sequence[str]) -> Mapping[str, str]: ...


__all__ = ["DeterministicResolver", "GenerativeResolver"]
