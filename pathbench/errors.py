class PathbenchError(Exception):
    """Base class for errors raised by pathbench."""


class BackendError(PathbenchError):
    """A backend rejected or failed to execute a query."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BenchmarkSetupError(PathbenchError):
    """A benchmark phase could not begin, so no report can be produced."""

    def __init__(self, phase: str, message: str):
        super().__init__(f"{phase}: {message}")
        self.phase = phase
