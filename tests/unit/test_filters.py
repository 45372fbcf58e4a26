from datetime import datetime

import pytest

from opencode_stats.analytics.filters import (
    ParsedFilters,
    matches_filters,
    parse_date_end,
    parse_date_start,
    parse_filters,
    validate_filters,
)
from opencode_stats.domain.exceptions import (
    FilterValidationError,
    InvalidDateFormatError,
    InvalidDateRangeError,
    InvalidDateValueError,
    InvalidModelFilterError,
)
from opencode_stats.domain.models import FilterOptions, Message


def _ts(*args: int) -> int:
    return round(datetime(*args).timestamp() * 1000)


def _message(created: int, provider="openai", model="gpt-5") -> Message:
    return Message(
        id="m1",
        session_id="s",
        time={"created": created},
        provider_id=provider,
        model_id=model,
    )


def test_parse_date_start_and_end():
    assert parse_date_start(None) is None
    assert parse_date_end(None) is None
    assert parse_date_start("2026-01-01") == _ts(2026, 1, 1)
    assert parse_date_end("2026-01-01") == _ts(2026, 1, 1, 23, 59, 59, 999000)


@pytest.mark.parametrize(
    "value", ["2026/01/01", "2026-1-01", "26-01-01", "2026-01-01T00:00", "2026-01-01\n", "x"]
)
def test_rejects_malformed_dates(value):
    with pytest.raises(InvalidDateFormatError) as exc_info:
        parse_date_start(value)
    assert str(exc_info.value).startswith("Invalid date format:")


@pytest.mark.parametrize("value", ["2026-02-30", "2025-02-29", "2026-13-01", "2026-04-31", "0000-01-01"])
def test_rejects_impossible_calendar_dates(value):
    with pytest.raises(InvalidDateValueError) as exc_info:
        parse_date_end(value)
    assert exc_info.value.message.startswith("Invalid date value:")


def test_accepts_leap_day():
    assert parse_date_start("2024-02-29") == _ts(2024, 2, 29)


def test_validate_filters_error_kinds():
    with pytest.raises(InvalidDateFormatError):
        validate_filters(FilterOptions(from_date="2026/01/01"), True)
    with pytest.raises(InvalidDateValueError):
        validate_filters(FilterOptions(from_date="2026-02-30"), True)
    with pytest.raises(InvalidDateRangeError):
        validate_filters(FilterOptions(from_date="2026-02-01", to_date="2026-01-31"), True)
    with pytest.raises(InvalidModelFilterError):
        validate_filters(FilterOptions(model="   "), True)


def test_validate_filters_errors_share_a_base_class():
    with pytest.raises(FilterValidationError):
        validate_filters(FilterOptions(to_date="bad"), True)


def test_blank_model_allowed_when_model_filtering_disabled():
    validate_filters(FilterOptions(model="  "), False)


def test_validate_filters_allows_valid_and_same_day_filters():
    validate_filters(
        FilterOptions(model="openai/gpt-5", from_date="2026-01-01", to_date="2026-01-31"), True
    )
    validate_filters(FilterOptions(from_date="2026-01-01", to_date="2026-01-01"), True)
    validate_filters(FilterOptions(), True)


def test_validate_filters_does_not_mutate_input():
    filters = FilterOptions(model=" openai/gpt-5 ", from_date="2026-01-01")
    validate_filters(filters, True)
    assert filters.model == " openai/gpt-5 "
    assert filters.from_date == "2026-01-01"


def test_parse_filters_resolves_bounds():
    parsed = parse_filters(
        FilterOptions(model="openai/gpt-5", from_date="2026-01-01", to_date="2026-01-02"), True
    )
    assert parsed == ParsedFilters(
        model="openai/gpt-5",
        from_ms=_ts(2026, 1, 1),
        to_ms=_ts(2026, 1, 2, 23, 59, 59, 999000),
    )


def test_matches_filters_model_and_bounds():
    parsed = ParsedFilters(
        model="openai/gpt-5", from_ms=_ts(2026, 1, 1), to_ms=_ts(2026, 1, 1, 23, 59, 59, 999000)
    )

    assert matches_filters(_message(_ts(2026, 1, 1)), parsed, True)
    assert matches_filters(_message(_ts(2026, 1, 1, 23, 59, 59, 999000)), parsed, True)
    assert not matches_filters(_message(_ts(2025, 12, 31, 23, 59, 59, 999000)), parsed, True)
    assert not matches_filters(_message(_ts(2026, 1, 2)), parsed, True)
    assert not matches_filters(_message(_ts(2026, 1, 1, 8), model="gpt-4"), parsed, True)
    assert matches_filters(_message(_ts(2026, 1, 1, 8), model="gpt-4"), parsed, False)


def test_matches_filters_compares_model_exactly():
    parsed = ParsedFilters(model="unknown/unknown")
    assert matches_filters(_message(1, provider=None, model=None), parsed, True)
    assert not matches_filters(_message(1), ParsedFilters(model="OpenAI/gpt-5"), True)
