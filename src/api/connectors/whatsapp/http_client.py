"""Cliente HTTP especializado para a Graph API da Meta.

Estende HttpClient genérico com comportamentos específicos:
- Bearer token validado antes de qualquer chamada
- Montagem de URL versionada (`{base}/{version}/{path}`)
- Tratamento de erros Meta (error.type, error.code) com classificação
  permanente vs transitório
- Logging estruturado sem PII (tokens, números, etc.)

Implementa `app.protocols.http_client.GraphApiClientProtocol`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .http_base import HttpClient, HttpClientConfig, is_retryable_status
from .meta_errors import GraphApiError, parse_meta_error
from .meta_logging import log_meta_error, log_success

if TYPE_CHECKING:
    import httpx

    from config.settings import WhatsAppSettings

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphApiTarget:
    """Destino da Graph API (URL base + versão)."""

    api_base_url: str
    api_version: str

    def url_for(self, path: str) -> str:
        return f"{self.api_base_url.rstrip('/')}/{self.api_version}/{path.lstrip('/')}"


class GraphApiClient(HttpClient):
    """Transporte da Graph API: verbo/path/corpo/query -> corpo parseado.

    Nunca retorna resposta mal-formada: erro Meta, status >= 400 ou JSON
    inválido resultam em GraphApiError.
    """

    def __init__(
        self,
        *,
        access_token: str,
        target: GraphApiTarget,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Inicializa cliente Graph.

        Args:
            access_token: Token de acesso (System User ou app)
            target: URL base e versão da API
            config: Configuração HTTP base
            transport: Transport httpx opcional (testes)

        Raises:
            ValueError: Se access_token está vazio
        """
        if not access_token or not access_token.strip():
            raise ValueError(
                "access_token é obrigatório para a Graph API. "
                "Verifique se WHATSAPP_ACCESS_TOKEN está configurado."
            )
        super().__init__(config, transport)
        self._access_token = access_token
        self._target = target

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        form: dict[str, Any] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        query: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Executa chamada à Graph API.

        Args:
            method: Verbo HTTP
            path: Path relativo (ex.: `/{waba_id}/flows`)
            json_body: Corpo JSON
            form: Campos de formulário (multipart quando há `files`)
            files: Arquivos multipart `{campo: (nome, bytes, content_type)}`
            query: Query string

        Returns:
            Corpo JSON parseado

        Raises:
            GraphApiError: Erro Meta, status HTTP de erro ou JSON inválido
            HttpError: Falha de conexão após retries
        """
        method = method.upper()
        response = await self.send(
            method,
            self._target.url_for(path),
            params=query,
            json=json_body,
            data=form,
            files=files,
            headers={"Authorization": f"Bearer {self._access_token}"},
        )
        return self._process_response(response, method, path)

    def _process_response(
        self,
        response: httpx.Response,
        method: str,
        path: str,
    ) -> dict[str, Any]:
        """Processa response da Graph API."""
        status_code = response.status_code
        try:
            response_data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("graph_api_invalid_json", extra={"path": path, "status_code": status_code})
            raise GraphApiError(
                "Response JSON inválido",
                status_code=status_code,
                is_retryable=is_retryable_status(status_code),
            ) from exc

        if not isinstance(response_data, dict):
            response_data = {"data": response_data}

        detail = parse_meta_error(response_data, status_code)
        if detail is not None:
            log_meta_error(detail, method, path, status_code)
            raise GraphApiError(
                f"Meta API error: {detail.error_type} ({detail.error_code})",
                status_code=status_code,
                detail=detail,
                is_retryable=not detail.is_permanent,
            )

        if status_code >= 400:
            logger.warning("graph_api_http_error", extra={"path": path, "status_code": status_code})
            raise GraphApiError(
                f"Graph API HTTP {status_code}",
                status_code=status_code,
                is_retryable=is_retryable_status(status_code),
            )

        log_success(method, path, status_code)
        return response_data


def create_graph_api_client(
    settings: WhatsAppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GraphApiClient:
    """Factory para criar cliente Graph com config padrão.

    Args:
        settings: WhatsAppSettings opcional. Se None, carrega do ambiente.
        transport: Transport httpx opcional

    Returns:
        Cliente Graph configurado.
    """
    # Import local para evitar dependência circular
    from config.settings import get_whatsapp_settings

    whatsapp = settings or get_whatsapp_settings()
    config = HttpClientConfig(
        timeout_seconds=whatsapp.request_timeout_seconds,
        max_retries=whatsapp.max_retries,
    )
    return GraphApiClient(
        access_token=whatsapp.access_token,
        target=GraphApiTarget(whatsapp.api_base_url, whatsapp.api_version),
        config=config,
        transport=transport,
    )
