"""Progress notices emitted while a resolution runs."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum


class NoticeLevel(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notice:
    title: str
    message: str
    level: NoticeLevel = NoticeLevel.INFO


NoticeHandler = Callable[[Notice], None]
