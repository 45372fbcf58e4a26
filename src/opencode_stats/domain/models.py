"""Domain value objects describing messages, filters and usage summaries."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

MAX_TOKEN_VALUE = 1_000_000_000_000
MAX_COST_VALUE = 1_000_000

# Creation instants kept two days inside the datetime range, so local-time
# conversion stays within years 1 to 9999 for any UTC offset.
MIN_CREATED_MS = -62_135_424_000_000
MAX_CREATED_MS = 253_402_128_000_000

UNKNOWN_ID = "unknown"
TOTAL_LABEL = "Total"


class Granularity(str, Enum):
    """Calendar bucket sizes supported for period grouping."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class MessageTime(BaseModel):
    """Creation and completion instants in epoch milliseconds."""

    model_config = ConfigDict(frozen=True)

    created: float = Field(..., ge=MIN_CREATED_MS, le=MAX_CREATED_MS)
    completed: Optional[float] = None


class CacheTokens(BaseModel):
    model_config = ConfigDict(frozen=True)

    read: float = Field(..., ge=0, le=MAX_TOKEN_VALUE)
    write: float = Field(..., ge=0, le=MAX_TOKEN_VALUE)


class TokenUsage(BaseModel):
    """Per-message token counts broken down by category."""

    model_config = ConfigDict(frozen=True)

    input: float = Field(..., ge=0, le=MAX_TOKEN_VALUE)
    output: float = Field(..., ge=0, le=MAX_TOKEN_VALUE)
    reasoning: float = Field(..., ge=0, le=MAX_TOKEN_VALUE)
    cache: CacheTokens

    @property
    def total(self) -> float:
        return self.input + self.output + self.reasoning + self.cache.read + self.cache.write


class Message(BaseModel):
    """Immutable assistant turn as recorded by OpenCode.

    ``tokens`` is optional here: a message without token data still counts
    as a request but contributes zero to every token total.
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore", protected_namespaces=()
    )

    id: str
    session_id: str = Field(..., alias="sessionID")
    role: Literal["assistant"] = "assistant"
    time: MessageTime
    provider_id: Optional[str] = Field(default=None, alias="providerID")
    model_id: Optional[str] = Field(default=None, alias="modelID")
    cost: Optional[float] = Field(default=None, ge=0, le=MAX_COST_VALUE)
    tokens: Optional[TokenUsage] = None

    @property
    def created(self) -> float:
        return self.time.created


class FilterOptions(BaseModel):
    """Raw filter strings exactly as the user supplied them.

    Nothing is checked on construction; see
    :func:`opencode_stats.analytics.filters.validate_filters`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    model: Optional[str] = None
    from_date: Optional[str] = Field(default=None, alias="from")
    to_date: Optional[str] = Field(default=None, alias="to")


class _UsageTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_requests: int = 0
    total_tokens: float = 0
    input_tokens: float = 0
    output_tokens: float = 0
    reasoning_tokens: float = 0
    cache_read_tokens: float = 0
    cache_write_tokens: float = 0
    total_cost: float = 0


class PeriodStats(_UsageTotals):
    """Frozen totals for one calendar period (or the ``Total`` row)."""

    period: str


class ModelStats(_UsageTotals):
    """Frozen totals for one ``provider/model`` pair."""

    model: str


def _rows_to_dataframe(rows: Sequence[BaseModel]) -> Any:
    try:
        import pandas as pd  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("pandas is required for dataframe export") from exc

    return pd.DataFrame([row.model_dump() for row in rows])


class PeriodReport(BaseModel):
    """Result of a period accumulator: grand total plus sorted periods."""

    model_config = ConfigDict(frozen=True)

    overall: PeriodStats
    periods: Tuple[PeriodStats, ...] = Field(default_factory=tuple)

    def to_dataframe(self) -> Any:
        """Export the per-period rows to a pandas DataFrame."""

        return _rows_to_dataframe(self.periods)


class ModelReport(BaseModel):
    """Result of a model accumulator: grand total plus models by usage."""

    model_config = ConfigDict(frozen=True)

    overall: PeriodStats
    models: Tuple[ModelStats, ...] = Field(default_factory=tuple)

    def to_dataframe(self) -> Any:
        """Export the per-model rows to a pandas DataFrame."""

        return _rows_to_dataframe(self.models)
