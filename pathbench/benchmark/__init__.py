from pathbench.benchmark.models import (
    BenchmarkReport,
    CategoryBreakdown,
    DurationStats,
    SampleRecord,
    StatsSummary,
)
from pathbench.benchmark.orchestrator import BenchmarkOrchestrator, Phase
from pathbench.benchmark.recorder import SampleLog, SampleRecorder
from pathbench.benchmark.report import build_report
from pathbench.benchmark.stats import compute_stats, summarize

__all__ = [
    "BenchmarkOrchestrator",
    "BenchmarkReport",
    "CategoryBreakdown",
    "DurationStats",
    "Phase",
    "SampleLog",
    "SampleRecord",
    "SampleRecorder",
    "StatsSummary",
    "build_report",
    "compute_stats",
    "summarize",
]
