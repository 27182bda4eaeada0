"""Endpoints de health check."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.flow_json import FlowJsonKeyTablesError, get_key_tables
from config.logging import DEFAULT_SERVICE_NAME

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "skipped", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(
        status="healthy",
        service=DEFAULT_SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: tabelas de chaves do Flow JSON e Redis do cache de deploy."""
    key_tables_check = _check_key_tables()
    redis_check = await _check_redis(getattr(request.app.state, "redis_client", None))
    ready = "failed" not in {key_tables_check.status, redis_check.status}
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "flow_json_keys": key_tables_check.as_dict(),
            "redis": redis_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


def _check_key_tables() -> DependencyCheck:
    try:
        get_key_tables()
    except FlowJsonKeyTablesError as exc:
        logger.error("readiness_key_tables_failed", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    return DependencyCheck(status="ok")


async def _check_redis(redis_client: Any | None) -> DependencyCheck:
    if redis_client is None:
        return DependencyCheck(status="skipped", error="not_configured")
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(redis_client.ping(), timeout=2.0)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning("readiness_redis_check_failed", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
