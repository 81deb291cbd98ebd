from typing import Any, Dict

import httpx

from pathbench.backends.base import Backend, BackendTag, Mutation, QueryResult, Rows
from pathbench.config import Settings
from pathbench.errors import BackendError
from pathbench.logging_config import get_logger
from pathbench.query import QueryDescriptor

logger = get_logger(__name__)

SQL_ENDPOINT = "/sql"


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            if payload.get(key):
                return str(payload[key])
    return f"HTTP {response.status_code}"


class HttpBackend(Backend):
    """
    SQL-over-HTTP driver: each query is one ``POST /sql`` request.

    Request body is ``{"query": sql, "params": [...]}``; the endpoint answers
    with ``{"command": ..., "rowCount": n, "rows": [...]}``.
    """

    tag = BackendTag.ALTERNATE

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpBackend":
        return cls(settings.http_url, token=settings.http_token, timeout=settings.http_timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def connect(self) -> None:
        if self._client is not None:
            return
        logger.info("Opening HTTP client for %s", self.base_url)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()

    async def execute(self, query: QueryDescriptor) -> QueryResult:
        if self._client is None:
            raise RuntimeError("HttpBackend.connect() must be awaited before execute()")

        response = await self._client.post(
            SQL_ENDPOINT, json={"query": query.sql, "params": list(query.params)}
        )
        if response.is_error:
            raise BackendError(_error_message(response), status_code=response.status_code)

        payload: Dict[str, Any] = response.json()
        if payload.get("error"):
            raise BackendError(str(payload["error"]), status_code=response.status_code)

        if query.returns_rows:
            return Rows(list(payload.get("rows") or []))
        return Mutation(int(payload.get("rowCount") or 0))
