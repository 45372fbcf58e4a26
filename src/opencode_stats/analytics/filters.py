"""Filter validation and the message match test."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from opencode_stats.analytics.stats import build_model_name
from opencode_stats.domain.exceptions import (
    InvalidDateFormatError,
    InvalidDateRangeError,
    InvalidDateValueError,
    InvalidModelFilterError,
)
from opencode_stats.domain.models import FilterOptions, Message
from opencode_stats.utils.dates import (
    format_local_date,
    parse_local_date,
    parse_local_date_end,
    parse_local_date_start,
)

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


@dataclass(frozen=True)
class ParsedFilters:
    """Validated filters with date bounds resolved to epoch milliseconds."""

    model: Optional[str] = None
    from_ms: Optional[int] = None
    to_ms: Optional[int] = None


def _parse_date_strict(value: str) -> int:
    if not DATE_PATTERN.fullmatch(value):
        raise InvalidDateFormatError(
            f"Invalid date format: {value}. Expected YYYY-MM-DD."
        )

    # The reformatted date must reproduce the input exactly.
    try:
        parsed = parse_local_date(value)
        start = parse_local_date_start(value)
    except (ValueError, OverflowError, OSError) as exc:
        raise InvalidDateValueError(f"Invalid date value: {value}.") from exc

    if format_local_date(parsed) != value:
        raise InvalidDateValueError(f"Invalid date value: {value}.")
    return start


def parse_date_start(value: Optional[str]) -> Optional[int]:
    """Local midnight of ``value`` in epoch ms, or ``None`` when unset."""

    if not value:
        return None
    return _parse_date_strict(value)


def parse_date_end(value: Optional[str]) -> Optional[int]:
    """Local end of day (23:59:59.999) of ``value`` in epoch ms."""

    if not value:
        return None
    _parse_date_strict(value)
    try:
        return parse_local_date_end(value)
    except (ValueError, OverflowError, OSError) as exc:
        raise InvalidDateValueError(f"Invalid date value: {value}.") from exc


def validate_filters(filters: FilterOptions, include_model: bool) -> None:
    """Reject invalid filters before any message is consumed."""

    if (
        include_model
        and filters.model is not None
        and not filters.model.strip()
    ):
        raise InvalidModelFilterError("Invalid model filter: --model cannot be empty.")

    start = parse_date_start(filters.from_date)
    end = parse_date_end(filters.to_date)

    if start is not None and end is not None and start > end:
        raise InvalidDateRangeError(
            "Invalid date range: --from must be on or before --to.",
            context={"from": filters.from_date, "to": filters.to_date},
        )


def parse_filters(filters: FilterOptions, include_model: bool) -> ParsedFilters:
    validate_filters(filters, include_model)
    return ParsedFilters(
        model=filters.model,
        from_ms=parse_date_start(filters.from_date),
        to_ms=parse_date_end(filters.to_date),
    )


def matches_filters(
    message: Message, filters: ParsedFilters, include_model: bool
) -> bool:
    if include_model and filters.model and build_model_name(message) != filters.model:
        return False
    if filters.from_ms is not None and message.created < filters.from_ms:
        return False
    if filters.to_ms is not None and message.created > filters.to_ms:
        return False
    return True
