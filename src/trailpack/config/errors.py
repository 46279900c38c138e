"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required environment variables are absent or blank."""

    def __init__(self, names: list[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class InvalidConfigurationError(ConfigurationError):
    """An environment override that cannot be used, e.g. ``TRAILPACK_AUDIT_ROW_LIMIT=-5``."""

    def __init__(self, name: str, value: str, expected: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid value {value!r} for {name}: expected {expected}")
