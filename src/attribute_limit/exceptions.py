"""Custom exceptions for the attribute_limit package."""

from __future__ import annotations


class AttributeLimitError(Exception):
    """Base exception for all attribute filtering errors."""


class ConfigError(AttributeLimitError):
    """Raised when a filter's configuration (static or request-scoped) is malformed."""

    def __init__(self, filter_name: str, message: str) -> None:
        self.filter_name = filter_name
        self.message = message
        super().__init__(f"{filter_name}: {message}")


class MissingRelyingPartyError(ConfigError):
    """Raised when bilateral rules are configured but the request names no relying party."""

    def __init__(self, filter_name: str) -> None:
        super().__init__(
            filter_name,
            "Bilateral rules are configured but the destination has no 'entityid'",
        )
