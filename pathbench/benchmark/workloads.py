"""
Workload generators.

Every generator issues the same logical operation through the primary and
then the alternate backend, so each primary sample has a same-shape
alternate counterpart recorded in the same pass. Operation failures are
recorded by the :class:`SampleRecorder` and never stop a suite.
"""

import asyncio
import functools
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Dict, Sequence

from pathbench.backends.base import Backend, BackendTag
from pathbench.benchmark import queries
from pathbench.benchmark.recorder import SampleRecorder
from pathbench.benchmark.seeding import user_id
from pathbench.logging_config import get_logger
from pathbench.query import QueryDescriptor, insert_rows

logger = get_logger(__name__)

SEQUENTIAL_LOAD = "sequential_load"
CONCURRENT_LOAD = "concurrent_load"
RAW_QUERY = "raw_query"
SINGLE_WRITE = "single_write"

LOAD_OPERATIONS: Sequence[QueryDescriptor] = (
    queries.SIMPLE_SELECT,
    queries.COUNT_QUERY,
    queries.FILTERED_SELECT,
    queries.JOIN_QUERY,
)


@dataclass(frozen=True)
class Suite:
    """
    A named single-shape query suite.

    ``build(workloads, iteration, tag)`` returns the statement for one
    iteration on one backend; read suites ignore the tag, write suites use
    it to keep primary and alternate rows apart.
    """

    name: str
    description: str
    build: Callable[["Workloads", int, BackendTag], QueryDescriptor]


def _point_lookup(workloads: "Workloads", iteration: int, tag: BackendTag) -> QueryDescriptor:
    target = iteration % workloads.seeded_users if workloads.seeded_users else 0
    return queries.POINT_LOOKUP.with_params(user_id(target))


def _bulk_read(workloads: "Workloads", iteration: int, tag: BackendTag) -> QueryDescriptor:
    return queries.BULK_READ.with_params(workloads.bulk_read_limit)


def _bulk_write(workloads: "Workloads", iteration: int, tag: BackendTag) -> QueryDescriptor:
    now = int(time.time() * 1000)
    rows = []
    for j in range(workloads.bulk_write_size):
        key = f"{tag.value}_{workloads.run_token}_{iteration}_{j}"
        rows.append(
            (f"batch_user_{key}", f"Batch User {j}", f"batch_{key}@test.com", j % 2 == 1, None, now, now, False)
        )
    return insert_rows("bulk_write", queries.USERS_TABLE, queries.USER_COLUMNS, rows)


SUITES: Dict[str, Suite] = {
    suite.name: suite
    for suite in (
        Suite("point_lookup", "Fetch one user by primary key", _point_lookup),
        Suite("filtered_scan", "Scan verified users", lambda w, i, t: queries.FILTERED_SCAN),
        Suite("join", "Join users with their sessions", lambda w, i, t: queries.JOIN),
        Suite("aggregation", "Count all users", lambda w, i, t: queries.AGGREGATION),
        Suite("bulk_write", "Insert a batch of users in one statement", _bulk_write),
        Suite("bulk_read", "Read the newest users in bulk", _bulk_read),
    )
}


class Workloads:
    """Paired workload generators bound to one run's backends and recorder."""

    def __init__(
        self,
        primary: Backend,
        alternate: Backend,
        recorder: SampleRecorder,
        *,
        bulk_write_size: int = 10,
        bulk_read_limit: int = 100,
        run_token: str | None = None,
    ):
        self.primary = primary
        self.alternate = alternate
        self.recorder = recorder
        self.bulk_write_size = bulk_write_size
        self.bulk_read_limit = bulk_read_limit
        self.run_token = run_token or secrets.token_hex(4)
        self.seeded_users = 0

    @property
    def backends(self) -> tuple[Backend, Backend]:
        return self.primary, self.alternate

    async def paired(
        self,
        build: Callable[[BackendTag], QueryDescriptor],
        *,
        category: str | None,
        label: str | None = None,
        description: str | None = None,
    ) -> None:
        """Record ``build(tag)`` on the primary, then on the alternate backend."""
        for backend in self.backends:
            await self.recorder.record_query(
                backend,
                functools.partial(build, backend.tag),
                label=label,
                category=category,
                description=description,
            )

    async def warmup(self, rounds: int) -> None:
        """
        Unrecorded round-trips through each backend.

        Failures propagate: a backend that cannot answer ``SELECT 1`` is
        unreachable, which the orchestrator treats as a setup failure.
        """
        for _ in range(rounds):
            for backend in self.backends:
                await backend.execute(queries.WARMUP)
        logger.info("Warmup completed (%d rounds)", rounds)

    async def run_suite(self, name: str, iterations: int) -> None:
        suite = SUITES[name]
        for i in range(iterations):
            await self.paired(
                lambda tag: suite.build(self, i, tag),
                category=suite.name,
                description=suite.description,
            )

    async def run_query_suites(self, iterations: int, names: Sequence[str] | None = None) -> None:
        for name in list(SUITES) if names is None else names:
            logger.info("Running suite %s (%d iterations)", name, iterations)
            await self.run_suite(name, iterations)

    async def run_write_probe(self) -> None:
        """One single-row insert and one update per backend."""
        now = int(time.time() * 1000)
        ids = {tag: f"bench_user_{tag.value}_{self.run_token}" for tag in BackendTag}

        def insert(tag: BackendTag) -> QueryDescriptor:
            return insert_rows(
                "insert_single_user",
                queries.USERS_TABLE,
                queries.USER_COLUMNS,
                [(ids[tag], "Benchmark User", f"{ids[tag]}@test.com", True, None, now, now, False)],
            )

        def update(tag: BackendTag) -> QueryDescriptor:
            return queries.UPDATE_USER_NAME.with_params(
                f"Updated Name {tag.value}", int(time.time() * 1000), ids[tag]
            )

        await self.paired(insert, category=SINGLE_WRITE, description="Insert one user")
        await self.paired(update, category=SINGLE_WRITE, description="Rename one user")

    async def run_sequential_load(self, iterations: int) -> None:
        """
        Rotate through :data:`LOAD_OPERATIONS`, one backend call at a time.
        """
        logger.info("Running sequential load test with %d iterations", iterations)
        for i in range(iterations):
            operation = LOAD_OPERATIONS[i % len(LOAD_OPERATIONS)]
            await self.paired(lambda tag: operation, category=SEQUENTIAL_LOAD)

    async def _stream(self, backend: Backend, stream: int, iterations: int) -> None:
        for i in range(iterations):
            await self.recorder.record_query(
                backend,
                queries.CONCURRENT_COUNT,
                label=f"concurrent_{stream}_{i}",
                category=CONCURRENT_LOAD,
            )

    async def run_concurrent_load(self, concurrency: int, iterations: int) -> None:
        """
        ``concurrency`` parallel streams of ``iterations`` calls each.

        Each backend gets its own wave; the alternate wave starts only after
        every primary stream has finished.
        """
        logger.info(
            "Running concurrent test: %d concurrent streams, %d iterations each",
            concurrency,
            iterations,
        )
        for backend in self.backends:
            logger.info("Testing %s concurrency...", backend.tag.value)
            await asyncio.gather(
                *(self._stream(backend, stream, iterations) for stream in range(concurrency))
            )

    async def run_raw_query_probe(self) -> None:
        for query in (queries.RAW_SQL_COUNT, queries.RAW_SQL_COMPLEX):
            await self.paired(lambda tag: query, category=RAW_QUERY)
