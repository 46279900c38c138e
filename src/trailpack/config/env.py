"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import InvalidConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value.strip()

    if missing:
        raise MissingConfigurationError(missing)

    return values


def require_env_var(name: str) -> str:
    """Return a required environment variable by name."""

    return require_env_vars([name])[name]


def optional_env_var(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def optional_int_env_var(name: str, default: int, *, minimum: int = 0) -> int:
    """Return an integer override, rejecting non-numeric values and values below ``minimum``."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise InvalidConfigurationError(name, raw, "an integer") from exc
    if value < minimum:
        raise InvalidConfigurationError(name, raw, f"an integer >= {minimum}")
    return value
