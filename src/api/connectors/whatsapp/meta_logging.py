"""Helpers de logging para a Graph API (sem PII nem tokens)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .meta_errors import MetaErrorDetail

logger = logging.getLogger(__name__)


def log_meta_error(
    detail: MetaErrorDetail,
    method: str,
    path: str,
    status_code: int,
) -> None:
    """Loga erro da Meta sem expor dados sensíveis."""
    logger.warning(
        "graph_api_error",
        extra={
            "method": method,
            "path": path,
            "status_code": status_code,
            "error_type": detail.error_type,
            "error_code": detail.error_code,
            "is_permanent": detail.is_permanent,
            "fbtrace_id": detail.fbtrace_id,
        },
    )


def log_success(
    method: str,
    path: str,
    status_code: int,
) -> None:
    """Loga sucesso sem expor dados sensíveis."""
    logger.debug(
        "graph_api_success",
        extra={
            "method": method,
            "path": path,
            "status_code": status_code,
        },
    )
