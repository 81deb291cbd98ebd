import argparse
import asyncio
import sys

from pathbench.backends import DirectBackend, HttpBackend
from pathbench.benchmark.orchestrator import BenchmarkOrchestrator
from pathbench.config import DEFAULT_ITERATIONS, DEFAULT_SCALE, load_settings
from pathbench.errors import BenchmarkSetupError
from pathbench.logging_config import get_logger
from pathbench.reporting import format_report, report_to_json

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathbench",
        description="Compare direct-binding and HTTP latency against one PostgreSQL database.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Serve the benchmark API with uvicorn")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    run = sub.add_parser("run", help="Run one benchmark and print the report")
    run.add_argument("--scale", type=int, default=DEFAULT_SCALE, help="Users to seed")
    run.add_argument(
        "--iterations", type=int, default=DEFAULT_ITERATIONS, help="Repetitions per suite"
    )
    run.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser


async def run_once(scale: int, iterations: int, as_json: bool) -> int:
    settings = load_settings()
    orchestrator = BenchmarkOrchestrator(
        DirectBackend.from_settings(settings), HttpBackend.from_settings(settings), settings
    )
    try:
        report = await orchestrator.run_full_benchmark(scale=scale, iterations=iterations)
    except BenchmarkSetupError as e:
        logger.error("Benchmark could not start: %s", e)
        return 1
    print(report_to_json(report) if as_json else format_report(report))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        import uvicorn

        uvicorn.run("pathbench.api:app", host=args.host, port=args.port, log_level="info")
        return 0
    return asyncio.run(run_once(args.scale, args.iterations, args.json))


if __name__ == "__main__":
    sys.exit(main())
