"""
Plain-text and JSON renderings of a :class:`BenchmarkReport`.
"""

from pathbench.benchmark.models import BenchmarkReport, StatsSummary


def _format_summary(title: str, stats: StatsSummary) -> str:
    return f"""{title}:
- Operations: {stats.total_operations} (success rate {stats.success_rate * 100:.1f}%)
- Mean: {stats.mean:.2f}ms  Median: {stats.median:.2f}ms  Std dev: {stats.std_dev:.2f}ms
- P95: {stats.p95:.2f}ms  P99: {stats.p99:.2f}ms
- Min: {stats.min:.2f}ms  Max: {stats.max:.2f}ms"""


def format_report(report: BenchmarkReport) -> str:
    """Format a benchmark report for display."""
    lines = [
        "Benchmark Results:",
        "==================",
        "",
        _format_summary("Primary (direct binding)", report.primary),
        "",
        _format_summary("Alternate (HTTP driver)", report.alternate),
        "",
        "Speedup (alternate / primary):",
        f"- Mean: {report.speedup_factor:.2f}x",
        f"- Median: {report.median_speedup:.2f}x",
        f"- P95: {report.p95_speedup:.2f}x",
    ]

    if report.categories:
        lines += ["", "By category:"]
        width = max(len(name) for name in report.categories)
        for name, breakdown in report.categories.items():
            lines.append(
                f"- {name:<{width}}  primary {breakdown.primary.mean:8.2f}ms"
                f"  alternate {breakdown.alternate.mean:8.2f}ms"
                f"  speedup {breakdown.speedup_factor:6.2f}x"
            )

    failures = [sample for sample in report.samples if not sample.success]
    if failures:
        lines += ["", f"Failures ({len(failures)}):"]
        for sample in failures:
            lines.append(f"- [{sample.backend.value}] {sample.operation}: {sample.error}")

    return "\n".join(lines)


def report_to_json(report: BenchmarkReport, indent: int | None = 2) -> str:
    return report.model_dump_json(indent=indent)
