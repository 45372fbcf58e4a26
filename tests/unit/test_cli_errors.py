from opencode_stats.cli.errors import format_cli_error
from opencode_stats.domain.exceptions import (
    InvalidDateFormatError,
    InvalidDateRangeError,
    InvalidDateValueError,
    InvalidModelFilterError,
    MessageLoadError,
)


def test_formats_known_validation_errors():
    assert format_cli_error(InvalidDateFormatError("Invalid date format: bad")) == [
        "Error: Invalid date format",
        "Invalid date format: bad",
        "Example: use --from 2026-02-01 and --to 2026-02-08",
    ]
    assert format_cli_error(InvalidDateValueError("Invalid date value: bad")) == [
        "Error: Invalid date value",
        "Invalid date value: bad",
        "Use a real calendar date in YYYY-MM-DD format.",
    ]
    assert format_cli_error(
        InvalidDateRangeError("Invalid date range: bad", context={"from": "x"})
    ) == [
        "Error: Invalid date range",
        "Invalid date range: bad",
        "Ensure --from is on or before --to.",
    ]
    assert format_cli_error(InvalidModelFilterError("Invalid model filter: bad")) == [
        "Error: Invalid model filter",
        "Invalid model filter: bad",
        "Provide --model as providerID/modelID.",
    ]


def test_formats_load_errors():
    lines = format_cli_error(MessageLoadError("Failed to scan OpenCode message files in /x: denied"))
    assert lines[0] == "Error: Data loading failed"
    assert lines[2] == "Check OpenCode data directory and read permissions."


def test_formats_fallback_errors():
    assert format_cli_error(RuntimeError("boom")) == [
        "Error: Failed to run oc-stats",
        "boom",
        "Run `oc-stats --help` for usage information.",
    ]
    assert format_cli_error(RuntimeError())[1] == "Unknown error"
