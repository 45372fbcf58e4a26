"""Running totals and the fold that feeds them."""

from __future__ import annotations

from dataclasses import dataclass

from opencode_stats.domain.models import UNKNOWN_ID, Message, ModelStats, PeriodStats


@dataclass
class MutableStats:
    """Mutable running totals owned by a single accumulator."""

    total_requests: int = 0
    total_tokens: float = 0
    input_tokens: float = 0
    output_tokens: float = 0
    reasoning_tokens: float = 0
    cache_read_tokens: float = 0
    cache_write_tokens: float = 0
    total_cost: float = 0


def create_mutable_stats() -> MutableStats:
    return MutableStats()


def apply_to_mutable_stats(totals: MutableStats, message: Message) -> None:
    """Fold ``message`` into ``totals``; order of application is irrelevant."""

    totals.total_requests += 1
    tokens = message.tokens
    if tokens is not None:
        totals.input_tokens += tokens.input
        totals.output_tokens += tokens.output
        totals.reasoning_tokens += tokens.reasoning
        totals.cache_read_tokens += tokens.cache.read
        totals.cache_write_tokens += tokens.cache.write
        totals.total_tokens += tokens.total
    totals.total_cost += message.cost or 0


def _snapshot_fields(totals: MutableStats) -> dict:
    return {
        "total_requests": totals.total_requests,
        "total_tokens": totals.total_tokens,
        "input_tokens": totals.input_tokens,
        "output_tokens": totals.output_tokens,
        "reasoning_tokens": totals.reasoning_tokens,
        "cache_read_tokens": totals.cache_read_tokens,
        "cache_write_tokens": totals.cache_write_tokens,
        "total_cost": totals.total_cost,
    }


def to_period_stats(period: str, totals: MutableStats) -> PeriodStats:
    return PeriodStats(period=period, **_snapshot_fields(totals))


def to_model_stats(model: str, totals: MutableStats) -> ModelStats:
    return ModelStats(model=model, **_snapshot_fields(totals))


def build_model_name(message: Message) -> str:
    """Return ``provider/model`` with ``unknown`` for missing parts."""

    provider = message.provider_id if message.provider_id is not None else UNKNOWN_ID
    model = message.model_id if message.model_id is not None else UNKNOWN_ID
    return f"{provider}/{model}"
