"""Port receiving generated manifest text."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ExportSink(Protocol):
    def __call__(self, manifest_text: str) -> None: ...


__all__ = ["ExportSink"]
