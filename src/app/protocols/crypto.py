"""Protocolos e erros das operações criptográficas de Flows.

Definimos aqui a interface que a infra de crypto deve implementar. Isso permite
que coordenadores dependam de abstrações e não de implementações concretas.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

# Status HTTP definidos pelo protocolo de data exchange da Meta
FLOW_STATUS_MALFORMED = 400
FLOW_STATUS_INTEGRITY = 421
FLOW_STATUS_INVALID_TOKEN = 427
FLOW_STATUS_HMAC = 432

FLOW_SERVER_STATUSES = frozenset(
    {
        FLOW_STATUS_MALFORMED,
        FLOW_STATUS_INTEGRITY,
        FLOW_STATUS_INVALID_TOKEN,
        FLOW_STATUS_HMAC,
    }
)


class FlowServerError(Exception):
    """Falha terminal no processamento de um request de Flow.

    O status é repassado diretamente como status HTTP; o corpo expõe apenas
    a mensagem, sem detalhes internos.

    Attributes:
        status_code: 400, 421, 427 ou 432
        message: Mensagem curta e segura para o cliente
    """

    def __init__(self, status_code: int, message: str) -> None:
        if status_code not in FLOW_SERVER_STATUSES:
            raise ValueError(f"Status de Flow inválido: {status_code}")
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    @property
    def body(self) -> str:
        return json.dumps({"error": self.message})

    def __repr__(self) -> str:
        return f"FlowServerError(status_code={self.status_code}, message={self.message!r})"


class FlowMediaDownloadError(Exception):
    """Falha de transporte ao baixar mídia criptografada (não é FlowServerError)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FlowPayloadDecryptorProtocol(Protocol):
    """Decripta `encrypted_flow_data` + `encryption_metadata` em um dict."""

    def __call__(
        self,
        encrypted_flow_data: str,
        metadata: dict[str, Any],
    ) -> dict[str, Any]: ...
