"""Local-calendar helpers for period keys and date filter boundaries.

All conversions use the local timezone of the running process.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Union

from opencode_stats.domain.models import Granularity

DATE_FORMAT = "%Y-%m-%d"

_END_OF_DAY = time(23, 59, 59, 999000)


def get_period_key(timestamp: float, granularity: Union[Granularity, str]) -> str:
    """Return the canonical period label for an epoch-millisecond timestamp."""

    moment = datetime.fromtimestamp(timestamp / 1000)
    granularity = Granularity(granularity)

    if granularity is Granularity.DAILY:
        return format_local_date(moment)
    if granularity is Granularity.WEEKLY:
        week_year, week, _ = moment.isocalendar()
        return f"{week_year:04d}-W{week:02d}"
    if granularity is Granularity.MONTHLY:
        return f"{moment.year:04d}-{moment.month:02d}"
    return f"{moment.year:04d}"


def format_local_date(value: Union[date, datetime]) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_local_date(value: str) -> date:
    """Parse ``YYYY-MM-DD``; raises ``ValueError`` for impossible dates."""

    return datetime.strptime(value, DATE_FORMAT).date()


def to_epoch_ms(moment: datetime) -> int:
    return round(moment.timestamp() * 1000)


def parse_local_date_start(value: str) -> int:
    """Epoch milliseconds of local midnight on ``value``."""

    return to_epoch_ms(datetime.combine(parse_local_date(value), time.min))


def parse_local_date_end(value: str) -> int:
    """Epoch milliseconds of local 23:59:59.999 on ``value``."""

    return to_epoch_ms(datetime.combine(parse_local_date(value), _END_OF_DAY))
