"""Protocolos HTTP usados pelo app.

Evita dependência direta da camada api.
"""

from __future__ import annotations

from typing import Any, Protocol


class GraphApiClientProtocol(Protocol):
    """Contrato mínimo do transporte da Graph API.

    Retorna o corpo já parseado ou levanta erro tipado de API.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        form: dict[str, Any] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        query: dict[str, Any] | None = None,
    ) -> dict[str, Any]: ...
