import datetime

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from pathbench.backends import DirectBackend, HttpBackend
from pathbench.benchmark.orchestrator import BenchmarkOrchestrator
from pathbench.config import (
    DEFAULT_ITERATIONS,
    DEFAULT_SCALE,
    MAX_ITERATIONS,
    MAX_SCALE,
    Settings,
    load_settings,
)
from pathbench.errors import BenchmarkSetupError
from pathbench.logging_config import get_logger

logger = get_logger(__name__)


class RunRequest(BaseModel):
    """
    Parameters of one benchmark run.
    """

    user_count: int = Field(
        default=DEFAULT_SCALE, ge=1, le=MAX_SCALE, description="Number of users to seed."
    )
    load_iterations: int = Field(
        default=DEFAULT_ITERATIONS,
        ge=0,
        le=MAX_ITERATIONS,
        description="Repetitions per query suite and of the sequential load test.",
    )


def get_settings() -> Settings:
    return load_settings()


def get_orchestrator(settings: Settings = Depends(get_settings)) -> BenchmarkOrchestrator:
    # fresh backends per run, never shared across requests
    return BenchmarkOrchestrator(
        DirectBackend.from_settings(settings),
        HttpBackend.from_settings(settings),
        settings,
    )


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


app = FastAPI(title="pathbench")


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": _now()}


@app.post("/benchmark/run")
async def run_benchmark(
    body: RunRequest | None = None,
    orchestrator: BenchmarkOrchestrator = Depends(get_orchestrator),
):
    body = body or RunRequest()
    try:
        report = await orchestrator.run_full_benchmark(
            scale=body.user_count, iterations=body.load_iterations
        )
    except BenchmarkSetupError as e:
        logger.error("Benchmark run failed: %s", e)
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return {
        "success": True,
        "report": report,
        "timestamp": _now(),
        "test_config": body.model_dump(),
    }
