"""Filters de logging para contexto e mascaramento.

- CorrelationIdFilter: injeta correlation_id e service
- SensitiveFieldFilter: mascara chaves de criptografia, tokens e plaintext
  passados por engano via `extra`
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "[redacted]"

SENSITIVE_FIELDS = frozenset(
    {
        "access_token",
        "app_secret",
        "encryption_key",
        "hmac_key",
        "iv",
        "flow_token",
        "plaintext",
        "decrypted_payload",
    }
)


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Se correlation_id já foi passado via `extra`, preserva o valor.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SensitiveFieldFilter(logging.Filter):
    """Mascara atributos sensíveis do record (nunca filtra o record)."""

    def __init__(self, fields: frozenset[str] = SENSITIVE_FIELDS) -> None:
        super().__init__()
        self._fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for name in self._fields:
            if getattr(record, name, None) is not None:
                setattr(record, name, REDACTED)
        return True
