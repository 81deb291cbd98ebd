"""
Report data model.

Every type here is an immutable pydantic model so reports can be compared,
hashed into logs and returned from the HTTP API unchanged.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from pathbench.backends.base import BackendTag


class SampleRecord(BaseModel):
    """One timed attempt of one operation against one backend."""

    model_config = ConfigDict(frozen=True)

    operation: str
    category: str | None = None
    description: str | None = None
    query_text: str | None = None
    backend: BackendTag
    duration_ms: float = Field(ge=0)
    success: bool
    error: str | None = None
    records_affected: int | None = Field(default=None, ge=0)


class DurationStats(BaseModel):
    """Descriptive statistics over a set of durations, in milliseconds."""

    model_config = ConfigDict(frozen=True)

    mean: float = 0.0
    median: float = 0.0
    p95: float = 0.0
    p99: float = 0.0
    min: float = 0.0
    max: float = 0.0
    std_dev: float = 0.0


class StatsSummary(DurationStats):
    total_operations: int = 0
    success_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class CategoryBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: StatsSummary
    alternate: StatsSummary
    speedup_factor: float


class BenchmarkReport(BaseModel):
    """
    Terminal artifact of a run.

    ``speedup_factor`` and friends divide the alternate backend's statistic
    by the primary one's, so a value above 1 means the primary is faster.
    """

    model_config = ConfigDict(frozen=True)

    samples: List[SampleRecord] = Field(default_factory=list)
    primary: StatsSummary
    alternate: StatsSummary
    speedup_factor: float
    median_speedup: float
    p95_speedup: float
    categories: Dict[str, CategoryBreakdown] = Field(default_factory=dict)
