"""Map failures to the three-line error block printed by the CLI."""

from __future__ import annotations

from typing import List, Tuple, Type

from opencode_stats.domain.exceptions import (
    InvalidDateFormatError,
    InvalidDateRangeError,
    InvalidDateValueError,
    InvalidModelFilterError,
    MessageLoadError,
    UsageStatsError,
)

PROGRAM_NAME = "oc-stats"

_KNOWN_ERRORS: Tuple[Tuple[Type[UsageStatsError], str, str], ...] = (
    (
        InvalidDateFormatError,
        "Error: Invalid date format",
        "Example: use --from 2026-02-01 and --to 2026-02-08",
    ),
    (
        InvalidDateValueError,
        "Error: Invalid date value",
        "Use a real calendar date in YYYY-MM-DD format.",
    ),
    (
        InvalidDateRangeError,
        "Error: Invalid date range",
        "Ensure --from is on or before --to.",
    ),
    (
        InvalidModelFilterError,
        "Error: Invalid model filter",
        "Provide --model as providerID/modelID.",
    ),
    (
        MessageLoadError,
        "Error: Data loading failed",
        "Check OpenCode data directory and read permissions.",
    ),
)


def format_cli_error(error: BaseException) -> List[str]:
    """Return ``[title, message, hint]`` for ``error``."""

    for error_type, title, hint in _KNOWN_ERRORS:
        if isinstance(error, error_type):
            return [title, error.message, hint]

    message = str(error) or "Unknown error"
    return [
        f"Error: Failed to run {PROGRAM_NAME}",
        message,
        f"Run `{PROGRAM_NAME} --help` for usage information.",
    ]
