import asyncpg

from pathbench.backends.base import Backend, BackendTag, Mutation, QueryResult, Rows
from pathbench.config import Settings
from pathbench.logging_config import get_logger
from pathbench.query import QueryDescriptor

logger = get_logger(__name__)


def affected_from_status(status: str) -> int:
    """
    Extract the row count from a PostgreSQL command tag.

    ``"INSERT 0 10"`` -> 10, ``"DELETE 3"`` -> 3, ``"CREATE TABLE"`` -> 0.
    """
    parts = status.split() if status else []
    if parts and parts[-1].isdigit():
        return int(parts[-1])
    return 0


class DirectBackend(Backend):
    """
    Direct binding over the PostgreSQL wire protocol using an asyncpg pool.
    """

    tag = BackendTag.PRIMARY

    def __init__(self, dsn: str, min_size: int = 1, max_size: int = 10):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self._pool: asyncpg.Pool | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "DirectBackend":
        return cls(
            settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

    async def connect(self) -> None:
        if self._pool is not None:
            return
        logger.info("Opening asyncpg pool (min=%d, max=%d)", self.min_size, self.max_size)
        self._pool = await asyncpg.create_pool(
            dsn=self.dsn, min_size=self.min_size, max_size=self.max_size
        )

    async def close(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()

    async def execute(self, query: QueryDescriptor) -> QueryResult:
        if self._pool is None:
            raise RuntimeError("DirectBackend.connect() must be awaited before execute()")

        async with self._pool.acquire() as conn:
            if query.returns_rows:
                records = await conn.fetch(query.sql, *query.params)
                return Rows([dict(record) for record in records])
            status = await conn.execute(query.sql, *query.params)
        return Mutation(affected_from_status(status))
