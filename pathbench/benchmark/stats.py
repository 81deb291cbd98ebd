import statistics
from typing import Iterable, Sequence

from pathbench.benchmark.models import DurationStats, SampleRecord, StatsSummary


def _rank(ordered: Sequence[float], fraction: float) -> float:
    # floor(n * fraction) can land on n for small n
    index = min(int(len(ordered) * fraction), len(ordered) - 1)
    return ordered[index]


def compute_stats(durations: Iterable[float]) -> DurationStats:
    """
    Describe a set of durations.

    Everything is computed from the sorted sequence with exact arithmetic
    (``statistics.mean`` / ``statistics.pstdev``), so the result depends only
    on the multiset of inputs, never on their order.

    Args:
        durations: Non-negative durations in milliseconds

    Returns:
        DurationStats: All zeros for an empty input
    """
    ordered = sorted(durations)
    n = len(ordered)
    if n == 0:
        return DurationStats()

    mean = statistics.mean(ordered)
    if n % 2 == 0:
        median = (ordered[n // 2 - 1] + ordered[n // 2]) / 2
    else:
        median = ordered[n // 2]

    return DurationStats(
        mean=mean,
        median=median,
        p95=_rank(ordered, 0.95),
        p99=_rank(ordered, 0.99),
        min=ordered[0],
        max=ordered[-1],
        std_dev=statistics.pstdev(ordered, mu=mean),
    )


def summarize(records: Sequence[SampleRecord]) -> StatsSummary:
    """
    Summarize the attempts of one partition.

    Latency statistics cover successful attempts only; the success rate is
    taken over every attempt, and is 0 when there were none.
    """
    durations = [record.duration_ms for record in records if record.success]
    total = len(records)
    stats = compute_stats(durations)
    return StatsSummary(
        **stats.model_dump(),
        total_operations=total,
        success_rate=len(durations) / total if total else 0.0,
    )
