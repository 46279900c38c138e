"""Correlation keys for collaborators that do not round-trip record ids."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from trailpack.domain.model import Record


def composite_key(record: Record) -> str:
    return f"Section: {record.section} | Display: {record.display}"


class CorrelationStrategy(Protocol):
    """Maps records to the keys a generative collaborator answers with."""

    def key_for(self, record: Record) -> str: ...

    def requests_for(self, records: Iterable[Record]) -> list[str]: ...


class DescriptionKeyStrategy:
    """Correlate by the ``Section | Display`` description string.

    Two records with identical section and display text share a key and therefore
    receive the same inferred identifier.
    """

    def key_for(self, record: Record) -> str:
        return composite_key(record)

    def requests_for(self, records: Iterable[Record]) -> list[str]:
        return [self.key_for(record) for record in records]
