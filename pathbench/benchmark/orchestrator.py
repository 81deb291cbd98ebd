from enum import Enum
from typing import Awaitable, List, TypeVar

from pathbench.backends.base import Backend
from pathbench.benchmark import seeding
from pathbench.benchmark.models import BenchmarkReport
from pathbench.benchmark.recorder import SampleLog, SampleRecorder
from pathbench.benchmark.report import build_report
from pathbench.benchmark.workloads import Workloads
from pathbench.config import DEFAULT_ITERATIONS, DEFAULT_SCALE, Settings
from pathbench.errors import BenchmarkSetupError
from pathbench.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Phase(str, Enum):
    IDLE = "idle"
    WARMUP = "warmup"
    SEEDING = "seeding"
    QUERY_SUITES = "query_suites"
    SEQUENTIAL_LOAD = "sequential_load"
    CONCURRENT_LOAD = "concurrent_load"
    RAW_QUERY_PROBE = "raw_query_probe"
    CLEANUP = "cleanup"
    REPORTED = "reported"


class BenchmarkOrchestrator:
    """
    Runs the benchmark phases in a fixed order and builds the report.

    The orchestrator owns both backends for the duration of a run (it
    connects and closes them) and owns the sample log, which it clears at
    the start of every run.
    """

    def __init__(self, primary: Backend, alternate: Backend, settings: Settings | None = None):
        self.primary = primary
        self.alternate = alternate
        self.settings = settings or Settings()
        self.log = SampleLog()
        self.recorder = SampleRecorder(self.log)
        self.phase = Phase.IDLE
        self.completed_phases: List[Phase] = []

    def plan(self) -> List[Phase]:
        phases = [Phase.WARMUP, Phase.SEEDING, Phase.QUERY_SUITES]
        if self.settings.include_load_phases:
            phases += [Phase.SEQUENTIAL_LOAD, Phase.CONCURRENT_LOAD, Phase.RAW_QUERY_PROBE]
        phases.append(Phase.CLEANUP)
        return phases

    def _enter(self, phase: Phase, plan: List[Phase]) -> None:
        if self.phase not in (Phase.IDLE, Phase.REPORTED):
            self.completed_phases.append(self.phase)
        self.phase = phase
        if phase in plan:
            logger.info("Step %d/%d: %s", plan.index(phase) + 1, len(plan), phase.value)

    async def _setup(self, phase: Phase, step: Awaitable[T]) -> T:
        try:
            return await step
        except Exception as exc:
            logger.error("Setup failed during %s: %s", phase.value, exc)
            raise BenchmarkSetupError(phase.value, str(exc) or type(exc).__name__) from exc

    async def _connect(self) -> None:
        for backend in (self.primary, self.alternate):
            await backend.connect()

    async def _close(self) -> None:
        for backend in (self.primary, self.alternate):
            try:
                await backend.close()
            except Exception:
                logger.exception("Failed to close %s backend", backend.tag.value)

    async def _cleanup(self) -> None:
        try:
            await seeding.clean_database(self.primary)
        except Exception as exc:
            logger.error("Cleanup failed, seeded data may remain: %s", exc)

    async def run_full_benchmark(
        self, scale: int = DEFAULT_SCALE, iterations: int = DEFAULT_ITERATIONS
    ) -> BenchmarkReport:
        """
        Run every phase and return the report.

        Operation failures inside measured phases are recorded as failed
        samples. Failures while connecting, warming up or seeding mean the
        run cannot start and raise :class:`BenchmarkSetupError` instead.

        Args:
            scale: Number of users to seed (sessions follow at 30%)
            iterations: Repetitions per query suite and of the sequential load

        Returns:
            BenchmarkReport: Report over this run's samples only
        """
        settings = self.settings
        plan = self.plan()
        self.log.clear()
        self.completed_phases = []
        self.phase = Phase.IDLE

        logger.info("Starting benchmark: scale=%d, iterations=%d", scale, iterations)
        workloads = Workloads(
            self.primary,
            self.alternate,
            self.recorder,
            bulk_write_size=settings.bulk_write_size,
            bulk_read_limit=settings.bulk_read_limit,
        )

        try:
            self._enter(Phase.WARMUP, plan)
            await self._setup(Phase.WARMUP, self._connect())
            await self._setup(Phase.WARMUP, workloads.warmup(settings.warmup_rounds))

            self._enter(Phase.SEEDING, plan)
            await self._setup(Phase.SEEDING, seeding.ensure_schema(self.primary))
            try:
                summary = await self._setup(
                    Phase.SEEDING,
                    seeding.seed_data(
                        self.primary,
                        scale,
                        batch_size=settings.seed_batch_size,
                        seed=settings.seed,
                        base_time_ms=settings.seed_base_time_ms,
                    ),
                )
            except BenchmarkSetupError:
                # remove the rows of a partial seed from the shared store
                await self._cleanup()
                raise
            workloads.seeded_users = summary.users

            self._enter(Phase.QUERY_SUITES, plan)
            await workloads.run_query_suites(iterations)
            await workloads.run_write_probe()

            if settings.include_load_phases:
                self._enter(Phase.SEQUENTIAL_LOAD, plan)
                await workloads.run_sequential_load(iterations)

                self._enter(Phase.CONCURRENT_LOAD, plan)
                await workloads.run_concurrent_load(
                    settings.concurrency, settings.concurrent_iterations
                )

                self._enter(Phase.RAW_QUERY_PROBE, plan)
                await workloads.run_raw_query_probe()

            self._enter(Phase.CLEANUP, plan)
            await self._cleanup()
        finally:
            await self._close()

        self._enter(Phase.REPORTED, plan)
        report = build_report(self.log)
        logger.info(
            "Benchmark completed: %d samples, speedup %.2fx",
            len(report.samples),
            report.speedup_factor,
        )
        return report
