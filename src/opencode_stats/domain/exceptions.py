"""Exception hierarchy for usage statistics failures."""

from __future__ import annotations

from typing import Any, Mapping


class UsageStatsError(Exception):
    """Base class for all domain-level errors in opencode-stats."""

    default_message = "Usage statistics error occurred"

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        formatted = self._format_message()
        super().__init__(formatted)

    def _format_message(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class FilterValidationError(UsageStatsError):
    """Raised when user-supplied filters are rejected before aggregation."""

    default_message = "Invalid filters"


class InvalidDateFormatError(FilterValidationError):
    """Date filter does not match the YYYY-MM-DD pattern."""

    default_message = "Invalid date format"


class InvalidDateValueError(FilterValidationError):
    """Date filter is well-formed but names no real calendar date."""

    default_message = "Invalid date value"


class InvalidDateRangeError(FilterValidationError):
    """The --from bound resolves to a later instant than the --to bound."""

    default_message = "Invalid date range"


class InvalidModelFilterError(FilterValidationError):
    """Model filter was supplied but is blank."""

    default_message = "Invalid model filter"


class MessageLoadError(UsageStatsError):
    """Scanning the on-disk message store failed."""

    default_message = "Failed to scan OpenCode message files"
