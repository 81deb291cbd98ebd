"""
Schema setup, synthetic data and cleanup for the shared benchmark store.

These steps are setup, not measurements: they run through the direct backend
only and their cost is logged, never recorded as samples.
"""

import random
import time
from dataclasses import dataclass
from typing import Any, Iterator, List, Sequence, Tuple

from pathbench.backends.base import Backend
from pathbench.benchmark import queries
from pathbench.logging_config import get_logger, log_performance
from pathbench.query import insert_rows

logger = get_logger(__name__)

DAY_MS = 24 * 60 * 60 * 1000
SESSION_RATIO = 0.3
PROGRESS_EVERY = 500

TIMEZONES = ("UTC", "America/New_York", "Europe/London", "Asia/Tokyo")
CITIES = ("New York", "London", "Tokyo", "San Francisco")
COUNTRIES = ("US", "GB", "JP", "CA")

Row = Tuple[Any, ...]


@dataclass(frozen=True)
class SeedSummary:
    users: int
    sessions: int


def user_id(index: int) -> str:
    return f"user_{index:06d}"


def session_count_for(user_count: int) -> int:
    return int(user_count * SESSION_RATIO)


def generate_users(count: int, rng: random.Random, base_time_ms: int) -> List[Row]:
    """Rows for ``users`` in :data:`queries.USER_COLUMNS` order."""
    rows = []
    for j in range(count):
        rows.append(
            (
                user_id(j),
                f"Test User {j}",
                f"user{j}@benchmark.test",
                j % 3 == 0,
                f"https://avatar.test/{j}.jpg" if j % 5 == 0 else None,
                base_time_ms - int(rng.random() * 365 * DAY_MS),
                base_time_ms,
                j % 10 == 0,
            )
        )
    return rows


def generate_sessions(count: int, rng: random.Random, base_time_ms: int) -> List[Row]:
    """Rows for ``sessions``; session ``j`` belongs to user ``j``."""
    rows = []
    for j in range(count):
        rows.append(
            (
                f"session_{j:06d}",
                base_time_ms + 30 * DAY_MS,
                f"token_{j}_{rng.getrandbits(48):012x}",
                base_time_ms - int(rng.random() * 7 * DAY_MS),
                base_time_ms,
                f"192.168.{rng.randrange(255)}.{rng.randrange(255)}",
                f"BenchmarkAgent/{rng.randrange(100)}",
                user_id(j),
                rng.choice(TIMEZONES),
                rng.choice(CITIES),
                rng.choice(COUNTRIES),
            )
        )
    return rows


def batched(rows: Sequence[Row], size: int) -> Iterator[Sequence[Row]]:
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


async def ensure_schema(backend: Backend) -> None:
    await backend.execute(queries.CREATE_SCHEMA)


@log_performance(logger, "clean_database")
async def clean_database(backend: Backend) -> None:
    await backend.execute(queries.CLEAN_SESSIONS)
    await backend.execute(queries.CLEAN_USERS)


@log_performance(logger, "seed_data")
async def seed_data(
    backend: Backend,
    user_count: int,
    *,
    batch_size: int = 100,
    seed: int = 42,
    base_time_ms: int | None = None,
) -> SeedSummary:
    """
    Replace the store's contents with a deterministic synthetic population.

    The same ``seed`` and ``base_time_ms`` always produce the same rows.

    Args:
        backend: Backend used for the writes (the direct binding)
        user_count: Number of parent ``users`` rows
        batch_size: Rows per multi-row INSERT
        seed: Seed of the row generator
        base_time_ms: Reference epoch milliseconds, defaults to now

    Returns:
        SeedSummary: Row counts written
    """
    if base_time_ms is None:
        base_time_ms = int(time.time() * 1000)
    rng = random.Random(seed)

    await clean_database(backend)

    logger.info("Seeding %d users...", user_count)
    users = generate_users(user_count, rng, base_time_ms)
    written = 0
    for batch in batched(users, batch_size):
        await backend.execute(
            insert_rows("seed_users", queries.USERS_TABLE, queries.USER_COLUMNS, batch)
        )
        written += len(batch)
        if written % PROGRESS_EVERY == 0 or written == user_count:
            logger.info("Seeded %d/%d users", written, user_count)

    sessions = generate_sessions(session_count_for(user_count), rng, base_time_ms)
    for batch in batched(sessions, batch_size):
        await backend.execute(
            insert_rows("seed_sessions", queries.SESSIONS_TABLE, queries.SESSION_COLUMNS, batch)
        )

    logger.info("Seeding completed: %d users, %d sessions", len(users), len(sessions))
    return SeedSummary(users=len(users), sessions=len(sessions))
