"""OpenCode usage statistics following Clean Architecture layering."""

from .analytics.aggregator import (
    ModelAccumulator,
    OverallAccumulator,
    PeriodAccumulator,
    create_model_accumulator,
    create_overall_accumulator,
    create_period_accumulator,
    validate_filters,
)
from .domain.models import FilterOptions, Granularity, Message
from .storage.loader import MessageLoader

__all__ = [
    "FilterOptions",
    "Granularity",
    "Message",
    "MessageLoader",
    "ModelAccumulator",
    "OverallAccumulator",
    "PeriodAccumulator",
    "create_model_accumulator",
    "create_overall_accumulator",
    "create_period_accumulator",
    "validate_filters",
    "domain",
    "analytics",
    "core",
    "storage",
    "utils",
]
