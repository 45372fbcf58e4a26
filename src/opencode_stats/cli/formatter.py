"""Rich table rendering for usage reports."""

from __future__ import annotations

from typing import List, Sequence

from rich.markup import escape
from rich.table import Table

from opencode_stats.domain.models import ModelStats, PeriodStats
from opencode_stats.utils.formatting import format_cost, format_number

_METRIC_COLUMNS = ("Requests", "Input", "Output", "Cache Read", "Cache Write", "Cost")


def _new_table(title: str, label_header: str) -> Table:
    table = Table(title=title, title_style="bold cyan", header_style="bold cyan")
    table.add_column(label_header, justify="left")
    for column in _METRIC_COLUMNS:
        table.add_column(column, justify="right")
    return table


def _metric_cells(stats: PeriodStats | ModelStats) -> List[str]:
    return [
        format_number(stats.total_requests),
        format_number(stats.input_tokens),
        format_number(stats.output_tokens),
        format_number(stats.cache_read_tokens),
        format_number(stats.cache_write_tokens),
        f"[green]{format_cost(stats.total_cost)}[/green]",
    ]


def _empty_row(table: Table) -> None:
    table.add_row("-", "0", "0", "0", "0", "0", f"[green]{format_cost(0)}[/green]")


def _total_row(table: Table, overall: PeriodStats) -> None:
    table.add_row("Total", *_metric_cells(overall), style="bold")


def format_today_summary(today: PeriodStats) -> Table:
    table = _new_table("Today", "Period")
    table.add_row(escape(today.period), *_metric_cells(today))
    return table


def format_period_table(overall: PeriodStats, periods: Sequence[PeriodStats]) -> Table:
    table = _new_table("Usage by Period", "Period")
    if not periods:
        _empty_row(table)
    for period in periods:
        table.add_row(escape(period.period), *_metric_cells(period))
    table.add_section()
    _total_row(table, overall)
    return table


def format_model_table(overall: PeriodStats, models: Sequence[ModelStats]) -> Table:
    table = _new_table("Model Breakdown", "Model")
    if not models:
        _empty_row(table)
    for model in models:
        table.add_row(escape(model.model), *_metric_cells(model))
    table.add_section()
    _total_row(table, overall)
    return table
