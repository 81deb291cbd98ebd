import time
from typing import Any, Awaitable, Callable, Iterator, List, Tuple

from pathbench.backends.base import Backend, BackendTag, Mutation, Rows
from pathbench.benchmark.models import SampleRecord
from pathbench.logging_config import get_logger
from pathbench.query import QueryDescriptor

logger = get_logger(__name__)

Operation = Callable[[], Awaitable[Any]]


class SampleLog:
    """
    Append-only, run-scoped log of samples.

    Appends are plain synchronous list appends performed on the event loop
    thread, so streams of a concurrent wave never interleave inside one.
    """

    def __init__(self):
        self._records: List[SampleRecord] = []

    def append(self, record: SampleRecord) -> None:
        self._records.append(record)

    def clear(self) -> None:
        self._records = []

    def snapshot(self) -> Tuple[SampleRecord, ...]:
        return tuple(self._records)

    def for_category(self, category: str) -> List[SampleRecord]:
        return [record for record in self._records if record.category == category]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SampleRecord]:
        return iter(tuple(self._records))


def records_affected(result: Any) -> int | None:
    # drivers report -1 when the count is unknown
    match result:
        case Rows(rows=rows):
            return len(rows)
        case Mutation(affected=affected) if affected >= 0:
            return affected
        case _:
            return None


def _error_text(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class SampleRecorder:
    """Times operations and appends exactly one :class:`SampleRecord` per attempt."""

    def __init__(self, log: SampleLog):
        self.log = log

    async def _attempt(self, operation: Operation) -> Tuple[float, Any, Exception | None]:
        start = time.perf_counter()
        try:
            result = await operation()
        except Exception as exc:
            return (time.perf_counter() - start) * 1000.0, None, exc
        return (time.perf_counter() - start) * 1000.0, result, None

    def _append(
        self,
        label: str,
        backend: BackendTag,
        duration_ms: float,
        result: Any,
        error: Exception | None,
        **details: str | None,
    ) -> SampleRecord:
        if error is not None:
            logger.debug("%s on %s failed after %.2fms: %s", label, backend.value, duration_ms, error)
            record = SampleRecord(
                operation=label,
                backend=backend,
                duration_ms=duration_ms,
                success=False,
                error=_error_text(error),
                **details,
            )
        else:
            record = SampleRecord(
                operation=label,
                backend=backend,
                duration_ms=duration_ms,
                success=True,
                records_affected=records_affected(result),
                **details,
            )
        self.log.append(record)
        return record

    async def record(
        self,
        label: str,
        backend: BackendTag,
        operation: Operation,
        *,
        category: str | None = None,
        description: str | None = None,
        query_text: str | None = None,
    ) -> SampleRecord:
        """
        Await ``operation`` once and record how long it took.

        A failing operation is not retried and its exception is not
        propagated: the time to failure and the error message are recorded
        instead.

        Args:
            label: Operation label
            backend: Backend the operation runs against
            operation: Zero-argument coroutine function performing the I/O
            category: Optional category used by the per-category breakdown
            description: Optional human description
            query_text: Optional literal query text for reporting

        Returns:
            SampleRecord: The record that was appended to the log
        """
        duration_ms, result, error = await self._attempt(operation)
        return self._append(
            label,
            backend,
            duration_ms,
            result,
            error,
            category=category,
            description=description,
            query_text=query_text,
        )

    async def record_query(
        self,
        backend: Backend,
        query: QueryDescriptor | Callable[[], QueryDescriptor],
        *,
        label: str | None = None,
        category: str | None = None,
        description: str | None = None,
    ) -> SampleRecord:
        """
        Record one execution of ``query`` on ``backend``.

        ``query`` may also be a zero-argument callable returning the
        descriptor. It is called inside the timed attempt, so a statement
        that cannot be built becomes a failed sample instead of an error.
        """
        built: List[QueryDescriptor] = []

        async def operation():
            descriptor = query() if callable(query) else query
            built.append(descriptor)
            return await backend.execute(descriptor)

        duration_ms, result, error = await self._attempt(operation)
        descriptor = built[0] if built else None
        if label is None:
            label = descriptor.name if descriptor else category or "unbuilt_query"
        return self._append(
            label,
            backend.tag,
            duration_ms,
            result,
            error,
            category=category,
            description=description,
            query_text=descriptor.sql if descriptor else None,
        )
