"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from src.application.dto.responses import HealthResponse, ProviderHealthResponse
from src.config import get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


def _response(status: str, **providers: ProviderHealthResponse) -> HealthResponse:
    return HealthResponse(
        status=status,
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
        **providers,
    )


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check: service status and uptime."""
    return _response("healthy")


@router.get("/llm", response_model=HealthResponse)
async def llm_health() -> HealthResponse:
    """
    Inference service health check.

    An unavailable LLM only degrades the service: insights fall back to
    rule-based analysis.
    """
    from src.infrastructure.llm import check_llm_health

    start = time.time()
    result = (await check_llm_health())["primary"]

    llm_status = ProviderHealthResponse(
        name=result.get("provider") or "llm",
        available=bool(result.get("available")),
        model=result.get("model"),
        latency_ms=(time.time() - start) * 1000,
        error=result.get("error"),
    )
    return _response("healthy" if llm_status.available else "degraded", llm=llm_status)


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """Database health check: SQLite connectivity and latency."""
    from src.infrastructure.storage.sqlite import get_pool

    try:
        pool = await get_pool()
        start = time.time()
        available = await pool.ping()
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=available,
            latency_ms=(time.time() - start) * 1000,
        )
    except Exception as e:
        db_status = ProviderHealthResponse(name="sqlite", available=False, error=str(e))

    return _response("healthy" if db_status.available else "unhealthy", database=db_status)
