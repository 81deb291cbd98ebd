from typing import Dict, Iterable, List

from pathbench.backends.base import BackendTag
from pathbench.benchmark.models import (
    BenchmarkReport,
    CategoryBreakdown,
    SampleRecord,
    StatsSummary,
)
from pathbench.benchmark.stats import summarize


def ratio(alternate: float, primary: float) -> float:
    """``alternate / primary``, or 0 when the primary statistic is 0."""
    return alternate / primary if primary > 0 else 0.0


def _by_backend(records: Iterable[SampleRecord]) -> Dict[BackendTag, List[SampleRecord]]:
    partitions: Dict[BackendTag, List[SampleRecord]] = {tag: [] for tag in BackendTag}
    for record in records:
        partitions[record.backend].append(record)
    return partitions


def _has_success(summary: StatsSummary) -> bool:
    return summary.total_operations > 0 and summary.success_rate > 0


def build_category_breakdown(records: Iterable[SampleRecord]) -> Dict[str, CategoryBreakdown]:
    """
    Repeat the backend comparison per category.

    Records without a category are ignored. A category appears only when
    both backends have at least one successful sample in it.
    """
    groups: Dict[str, List[SampleRecord]] = {}
    for record in records:
        if record.category is None:
            continue
        groups.setdefault(record.category, []).append(record)

    breakdown = {}
    for category in sorted(groups):
        partitions = _by_backend(groups[category])
        primary = summarize(partitions[BackendTag.PRIMARY])
        alternate = summarize(partitions[BackendTag.ALTERNATE])
        if not (_has_success(primary) and _has_success(alternate)):
            continue
        breakdown[category] = CategoryBreakdown(
            primary=primary,
            alternate=alternate,
            speedup_factor=ratio(alternate.mean, primary.mean),
        )
    return breakdown


def build_report(records: Iterable[SampleRecord]) -> BenchmarkReport:
    """
    Turn a sample log into a :class:`BenchmarkReport`.

    The input is only read; calling this twice on the same records yields
    equal reports.
    """
    samples = list(records)
    partitions = _by_backend(samples)
    primary = summarize(partitions[BackendTag.PRIMARY])
    alternate = summarize(partitions[BackendTag.ALTERNATE])

    return BenchmarkReport(
        samples=samples,
        primary=primary,
        alternate=alternate,
        speedup_factor=ratio(alternate.mean, primary.mean),
        median_speedup=ratio(alternate.median, primary.median),
        p95_speedup=ratio(alternate.p95, primary.p95),
        categories=build_category_breakdown(samples),
    )
