from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union

from pathbench.query import QueryDescriptor


class BackendTag(str, Enum):
    PRIMARY = "primary"
    ALTERNATE = "alternate"


@dataclass(frozen=True)
class Rows:
    """Result of a statement that produced a row set."""

    rows: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class Mutation:
    """Acknowledgment of a statement that changed rows."""

    affected: int = 0


QueryResult = Union[Rows, Mutation]


class Backend(ABC):
    """
    One access path to the benchmark database.

    Implementations are opaque query executors: the harness only awaits
    :meth:`execute` and times it.
    """

    tag: BackendTag

    async def connect(self) -> None:
        """Open connections. Called once by the orchestrator before a run."""

    async def close(self) -> None:
        """Release connections. Called once by the orchestrator after a run."""

    @abstractmethod
    async def execute(self, query: QueryDescriptor) -> QueryResult:
        raise NotImplementedError()
