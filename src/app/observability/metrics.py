"""Métricas via structured logging.

As métricas saem como logs (`metric_*`) e são agregadas fora do serviço.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    status_code: int | None = None,
) -> None:
    """Registra latência de uma operação.

    Args:
        component: Nome do componente (ex: "flow_endpoint")
        operation: Nome da operação (ex: "exchange")
        latency_ms: Latência em milissegundos
        status_code: Status HTTP devolvido, quando houver
    """
    extra: dict[str, object] = {
        "metric_type": "latency",
        "component": component,
        "operation": operation,
        "latency_ms": round(latency_ms, 2),
    }
    if status_code is not None:
        extra["status_code"] = status_code
    logger.info("metric_latency", extra=extra)


def record_flow_rejection(status_code: int, reason: str) -> None:
    """Registra um request de Flow rejeitado (400/421/427/432)."""
    logger.info(
        "metric_flow_rejection",
        extra={
            "metric_type": "counter",
            "component": "flow_endpoint",
            "status_code": status_code,
            "reason": reason,
        },
    )
