"""correlation_id por request (ContextVar, async-safe).

Uso no endpoint:
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        ...
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (vazio se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id; gera um UUID v4 quando não informado.

    Returns:
        Token para reset_correlation_id().
    """
    return _correlation_id.set(correlation_id or str(uuid.uuid4()))


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id anterior."""
    _correlation_id.reset(token)
