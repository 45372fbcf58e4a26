"""
CLI interface for opencode-stats.

Reads the local OpenCode message store and prints usage tables.
"""

import logging
import sys
from contextlib import nullcontext
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TypeVar

import typer
from rich.console import Console

from opencode_stats.analytics.aggregator import (
    create_model_accumulator,
    create_overall_accumulator,
    create_period_accumulator,
    run_accumulator,
    validate_filters,
)
from opencode_stats.cli.errors import PROGRAM_NAME, format_cli_error
from opencode_stats.cli.formatter import (
    format_model_table,
    format_period_table,
    format_today_summary,
)
from opencode_stats.core.config import StatsConfig
from opencode_stats.domain.interfaces import MessageAccumulator
from opencode_stats.domain.models import FilterOptions, Granularity
from opencode_stats.storage.loader import MessageLoader
from opencode_stats.utils.dates import format_local_date

app = typer.Typer(name=PROGRAM_NAME, help="Analyze OpenCode usage statistics")
console = Console()
error_console = Console(stderr=True)

EXIT_CODE_FAIL = 1

ResultT = TypeVar("ResultT")

ModelOption = typer.Option(None, "--model", "-m", help="Filter by providerID/modelID")
FromOption = typer.Option(None, "--from", help="Start date (YYYY-MM-DD)")
ToOption = typer.Option(None, "--to", help="End date (YYYY-MM-DD)")


def _load_config(data_dir: Optional[Path], config_file: Optional[Path]) -> StatsConfig:
    config = StatsConfig.from_file(config_file) if config_file else StatsConfig.from_env()
    return config.with_overrides(data_dir=data_dir)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(error: Exception) -> None:
    for line in format_cli_error(error):
        error_console.print(line, markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(code=EXIT_CODE_FAIL)


def _run_with_spinner(
    ctx: typer.Context, accumulator: MessageAccumulator[ResultT]
) -> ResultT:
    loader = MessageLoader(ctx.obj)
    status = (
        console.status("Loading OpenCode usage data...")
        if console.is_terminal
        else nullcontext()
    )
    with status:
        return run_accumulator(accumulator, loader)


def _guarded(action: Callable[[], None]) -> None:
    try:
        action()
    except typer.Exit:
        raise
    except Exception as e:
        _fail(e)


def run_period(
    ctx: typer.Context, granularity: Granularity, filters: FilterOptions
) -> None:
    validate_filters(filters, True)
    report = _run_with_spinner(ctx, create_period_accumulator(granularity, filters))
    console.print(format_period_table(report.overall, report.periods))


def run_models(ctx: typer.Context, filters: FilterOptions) -> None:
    validate_filters(filters, True)
    report = _run_with_spinner(ctx, create_model_accumulator(filters))
    console.print(format_model_table(report.overall, report.models))


def run_today(ctx: typer.Context, filters: FilterOptions) -> None:
    today = format_local_date(datetime.now())
    today_filters = FilterOptions(
        model=filters.model,
        from_date=filters.from_date or today,
        to_date=filters.to_date or today,
    )
    validate_filters(today_filters, True)
    overall = _run_with_spinner(ctx, create_overall_accumulator(today_filters))
    console.print(format_today_summary(overall))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    model: Optional[str] = ModelOption,
    from_date: Optional[str] = FromOption,
    to_date: Optional[str] = ToOption,
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", help="OpenCode storage directory"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="JSON or YAML configuration file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Show today's usage when no command is given."""
    _configure_logging(verbose)
    try:
        ctx.obj = _load_config(data_dir, config_file)
    except (OSError, ValueError) as e:
        _fail(e)

    if ctx.invoked_subcommand is None:
        filters = FilterOptions(model=model, from_date=from_date, to_date=to_date)
        _guarded(lambda: run_today(ctx, filters))


def _register_period_command(granularity: Granularity) -> None:
    def command(
        ctx: typer.Context,
        model: Optional[str] = ModelOption,
        from_date: Optional[str] = FromOption,
        to_date: Optional[str] = ToOption,
    ):
        filters = FilterOptions(model=model, from_date=from_date, to_date=to_date)
        _guarded(lambda: run_period(ctx, granularity, filters))

    app.command(
        name=granularity.value,
        help=f"Show {granularity.value} usage stats",
    )(command)


for _granularity in Granularity:
    _register_period_command(_granularity)


@app.command()
def models(
    ctx: typer.Context,
    model: Optional[str] = ModelOption,
    from_date: Optional[str] = FromOption,
    to_date: Optional[str] = ToOption,
):
    """Show usage breakdown by model."""
    filters = FilterOptions(model=model, from_date=from_date, to_date=to_date)
    _guarded(lambda: run_models(ctx, filters))


def run() -> None:
    """Console-script entry point."""
    # A leading standalone "--" is forwarded by some package runners.
    if len(sys.argv) > 1 and sys.argv[1] == "--":
        del sys.argv[1]
    app()


if __name__ == "__main__":
    run()
