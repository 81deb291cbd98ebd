"""
Unit tests for pathbench.backends.direct.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pathbench.backends.base import BackendTag, Mutation, Rows
from pathbench.backends.direct import DirectBackend, affected_from_status
from pathbench.config import Settings
from pathbench.query import statement


@pytest.fixture
def mock_pool():
    """Mock asyncpg pool whose acquire() yields a mock connection."""
    conn = AsyncMock()
    pool = MagicMock()
    pool.acquire.return_value.__aenter__ = AsyncMock(return_value=conn)
    pool.acquire.return_value.__aexit__ = AsyncMock(return_value=False)
    pool.close = AsyncMock()
    pool.conn = conn
    return pool


class TestAffectedFromStatus:
    @pytest.mark.parametrize(
        "status,expected",
        [
            ("INSERT 0 10", 10),
            ("UPDATE 1", 1),
            ("DELETE 0", 0),
            ("CREATE TABLE", 0),
            ("", 0),
        ],
    )
    def test_command_tags(self, status, expected):
        assert affected_from_status(status) == expected


@pytest.mark.asyncio
class TestDirectBackend:
    """Test the asyncpg-backed primary binding."""

    async def test_tag(self):
        assert DirectBackend("postgres://x").tag == BackendTag.PRIMARY

    async def test_connect_creates_pool_once(self, mock_pool):
        backend = DirectBackend("postgres://db", min_size=2, max_size=4)
        with patch(
            "pathbench.backends.direct.asyncpg.create_pool", new=AsyncMock(return_value=mock_pool)
        ) as create_pool:
            await backend.connect()
            await backend.connect()

        create_pool.assert_awaited_once_with(dsn="postgres://db", min_size=2, max_size=4)

    async def test_execute_before_connect(self):
        with pytest.raises(RuntimeError, match="connect"):
            await DirectBackend("postgres://db").execute(statement("q", "SELECT 1"))

    async def test_select_returns_rows(self, mock_pool):
        mock_pool.conn.fetch.return_value = [{"id": "user_000001"}, {"id": "user_000002"}]
        backend = DirectBackend("postgres://db")
        query = statement("lookup", "SELECT * FROM users WHERE id = $1", "user_000001")

        with patch(
            "pathbench.backends.direct.asyncpg.create_pool", new=AsyncMock(return_value=mock_pool)
        ):
            await backend.connect()
            result = await backend.execute(query)

        assert result == Rows([{"id": "user_000001"}, {"id": "user_000002"}])
        mock_pool.conn.fetch.assert_awaited_once_with(query.sql, "user_000001")
        mock_pool.conn.execute.assert_not_called()

    async def test_mutation_returns_affected_count(self, mock_pool):
        mock_pool.conn.execute.return_value = "UPDATE 1"
        backend = DirectBackend("postgres://db")
        query = statement("rename", "UPDATE users SET name = $1 WHERE id = $2", "n", "user_000001")

        with patch(
            "pathbench.backends.direct.asyncpg.create_pool", new=AsyncMock(return_value=mock_pool)
        ):
            await backend.connect()
            result = await backend.execute(query)

        assert result == Mutation(1)
        mock_pool.conn.execute.assert_awaited_once_with(query.sql, "n", "user_000001")

    async def test_driver_errors_propagate(self, mock_pool):
        mock_pool.conn.fetch.side_effect = RuntimeError("relation does not exist")
        backend = DirectBackend("postgres://db")

        with patch(
            "pathbench.backends.direct.asyncpg.create_pool", new=AsyncMock(return_value=mock_pool)
        ):
            await backend.connect()
            with pytest.raises(RuntimeError, match="does not exist"):
                await backend.execute(statement("q", "SELECT * FROM missing"))

    async def test_close_releases_pool(self, mock_pool):
        backend = DirectBackend("postgres://db")
        with patch(
            "pathbench.backends.direct.asyncpg.create_pool", new=AsyncMock(return_value=mock_pool)
        ):
            await backend.connect()
        await backend.close()
        await backend.close()

        mock_pool.close.assert_awaited_once()

    async def test_from_settings(self):
        settings = Settings(database_url="postgres://bench", pool_min_size=3, pool_max_size=9)
        backend = DirectBackend.from_settings(settings)
        assert (backend.dsn, backend.min_size, backend.max_size) == ("postgres://bench", 3, 9)
