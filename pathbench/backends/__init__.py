from pathbench.backends.base import Backend, BackendTag, Mutation, QueryResult, Rows
from pathbench.backends.direct import DirectBackend
from pathbench.backends.http import HttpBackend

__all__ = [
    "Backend",
    "BackendTag",
    "DirectBackend",
    "HttpBackend",
    "Mutation",
    "QueryResult",
    "Rows",
]
