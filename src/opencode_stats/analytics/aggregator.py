"""Streaming accumulators that group messages by period or by model.

Every accumulator validates its filters on construction, so invalid
filters surface before the first message is read. After that ``consume``
and ``result`` never raise. Instances are not safe for concurrent
``consume`` calls; the message loader serialises delivery.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, Tuple, TypeVar, Union

from opencode_stats.analytics.filters import (
    ParsedFilters,
    matches_filters,
    parse_filters,
    validate_filters,
)
from opencode_stats.analytics.stats import (
    MutableStats,
    apply_to_mutable_stats,
    build_model_name,
    create_mutable_stats,
    to_model_stats,
    to_period_stats,
)
from opencode_stats.domain.interfaces import MessageAccumulator, MessageSource
from opencode_stats.domain.models import (
    TOTAL_LABEL,
    FilterOptions,
    Granularity,
    Message,
    ModelReport,
    PeriodReport,
    PeriodStats,
)
from opencode_stats.utils.dates import get_period_key

__all__ = [
    "FilteredFold",
    "GroupedTotals",
    "ModelAccumulator",
    "OverallAccumulator",
    "PeriodAccumulator",
    "create_model_accumulator",
    "create_overall_accumulator",
    "create_period_accumulator",
    "run_accumulator",
    "validate_filters",
]

logger = logging.getLogger(__name__)

KeyFn = Callable[[Message], str]
ResultT = TypeVar("ResultT")


class GroupedTotals:
    """Keyed running totals with a separate grand total.

    Groups are created lazily the first time a key is seen and keep
    first-seen order.
    """

    def __init__(self, key_fn: KeyFn) -> None:
        self._key_fn = key_fn
        self._groups: Dict[str, MutableStats] = {}
        self.overall = create_mutable_stats()

    def add(self, message: Message) -> None:
        apply_to_mutable_stats(self.overall, message)
        key = self._key_fn(message)
        totals = self._groups.get(key)
        if totals is None:
            totals = self._groups[key] = create_mutable_stats()
        apply_to_mutable_stats(totals, message)

    def items(self) -> Iterator[Tuple[str, MutableStats]]:
        return iter(self._groups.items())

    def __len__(self) -> int:
        return len(self._groups)


def _overall_key(_: Message) -> str:
    return TOTAL_LABEL


class FilteredFold:
    """Match test plus keyed fold, held by each concrete accumulator."""

    def __init__(self, filters: FilterOptions, key_fn: KeyFn, owner: str) -> None:
        self.filters: ParsedFilters = parse_filters(filters, include_model=True)
        self.totals = GroupedTotals(key_fn)
        logger.debug(
            "accumulator_created",
            extra={
                "accumulator": owner,
                "model": self.filters.model,
                "from_ms": self.filters.from_ms,
                "to_ms": self.filters.to_ms,
            },
        )

    def consume(self, message: Message) -> None:
        if not matches_filters(message, self.filters, include_model=True):
            return
        self.totals.add(message)

    def overall(self) -> PeriodStats:
        return to_period_stats(TOTAL_LABEL, self.totals.overall)


class PeriodAccumulator:
    """Groups matching messages by calendar period."""

    def __init__(
        self, granularity: Union[Granularity, str], filters: FilterOptions
    ) -> None:
        self.granularity = Granularity(granularity)
        self._fold = FilteredFold(
            filters,
            lambda message: get_period_key(message.created, self.granularity),
            type(self).__name__,
        )

    def consume(self, message: Message) -> None:
        self._fold.consume(message)

    def result(self) -> PeriodReport:
        # Fixed-width labels sort chronologically as plain strings.
        ordered = sorted(self._fold.totals.items(), key=lambda item: item[0])
        periods = tuple(to_period_stats(period, totals) for period, totals in ordered)
        return PeriodReport(overall=self._fold.overall(), periods=periods)


class ModelAccumulator:
    """Groups matching messages by ``provider/model``.

    Models are ordered by descending total tokens; ties keep the order in
    which each model was first consumed.
    """

    def __init__(self, filters: FilterOptions) -> None:
        self._fold = FilteredFold(filters, build_model_name, type(self).__name__)

    def consume(self, message: Message) -> None:
        self._fold.consume(message)

    def result(self) -> ModelReport:
        ranked = sorted(
            self._fold.totals.items(), key=lambda item: item[1].total_tokens, reverse=True
        )
        models = tuple(to_model_stats(model, totals) for model, totals in ranked)
        return ModelReport(overall=self._fold.overall(), models=models)


class OverallAccumulator:
    """Single grand total labelled ``Total``."""

    def __init__(self, filters: FilterOptions) -> None:
        self._fold = FilteredFold(filters, _overall_key, type(self).__name__)

    def consume(self, message: Message) -> None:
        self._fold.consume(message)

    def result(self) -> PeriodStats:
        return self._fold.overall()


def create_period_accumulator(
    granularity: Union[Granularity, str], filters: FilterOptions
) -> PeriodAccumulator:
    return PeriodAccumulator(granularity, filters)


def create_model_accumulator(filters: FilterOptions) -> ModelAccumulator:
    return ModelAccumulator(filters)


def create_overall_accumulator(filters: FilterOptions) -> OverallAccumulator:
    return OverallAccumulator(filters)


def run_accumulator(
    accumulator: MessageAccumulator[ResultT], source: MessageSource
) -> ResultT:
    """Feed every message from ``source`` into ``accumulator``."""

    source.for_each_message(accumulator.consume)
    return accumulator.result()
