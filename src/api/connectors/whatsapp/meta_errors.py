"""Erros e helpers de parsing para a Graph API da Meta."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .http_base import HttpError

PERMANENT_STATUS_CODES = frozenset({400, 401, 403, 404, 413})
PERMANENT_ERROR_TYPES = frozenset({"OAuthException", "InvalidRequest"})


@dataclass(frozen=True)
class MetaErrorDetail:
    """Objeto `error` retornado pela Graph API."""

    error_type: str
    error_code: int
    error_message: str
    is_permanent: bool  # True se erro não é retentável
    error_subcode: int | None = None
    fbtrace_id: str | None = None


class GraphApiError(HttpError):
    """Erro de requisição à Graph API sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: MetaErrorDetail | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message, status_code=status_code, is_retryable=is_retryable)
        self.detail = detail

    @property
    def is_permanent(self) -> bool:
        return not self.is_retryable


def is_permanent_error(status_code: int, error_type: str) -> bool:
    """Classifica erro como permanente ou transitório.

    Erros permanentes: 400, 401, 403, 404, 413 e tipos OAuth/InvalidRequest
    Erros transitórios: 429 (rate limit), 500+ (server errors)
    """
    if status_code in PERMANENT_STATUS_CODES:
        return True
    return error_type in PERMANENT_ERROR_TYPES


def parse_meta_error(
    response_data: dict[str, Any],
    status_code: int = 0,
) -> MetaErrorDetail | None:
    """Extrai informações de erro do response da Meta.

    Args:
        response_data: Dict do response JSON
        status_code: Status HTTP do response (usado na classificação)

    Returns:
        MetaErrorDetail se houver erro, None se sucesso
    """
    error_obj = response_data.get("error")
    if not error_obj or not isinstance(error_obj, dict):
        return None

    error_type = str(error_obj.get("type", "unknown"))
    raw_code = error_obj.get("code", 0)
    error_code = raw_code if isinstance(raw_code, int) else 0
    raw_subcode = error_obj.get("error_subcode")

    return MetaErrorDetail(
        error_type=error_type,
        error_code=error_code,
        error_message=str(error_obj.get("message", "Erro desconhecido")),
        is_permanent=is_permanent_error(status_code or error_code, error_type),
        error_subcode=raw_subcode if isinstance(raw_subcode, int) else None,
        fbtrace_id=error_obj.get("fbtrace_id"),
    )
