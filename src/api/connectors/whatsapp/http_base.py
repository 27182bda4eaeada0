"""Cliente HTTP base para conectores da camada API."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429})

# Métodos que podem ser repetidos após timeout de leitura ou 5xx
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 2.0
    backoff_max_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


def is_retryable_status(status_code: int) -> bool:
    """429 e 5xx são transitórios."""
    return status_code in RETRYABLE_STATUS_CODES or status_code >= 500


def _should_retry_status(method: str, status_code: int) -> bool:
    if method.upper() in IDEMPOTENT_METHODS:
        return is_retryable_status(status_code)
    return status_code in RETRYABLE_STATUS_CODES


def _should_retry_exception(method: str, exc: httpx.HTTPError) -> bool:
    """POST só repete quando o request comprovadamente não saiu."""
    if method.upper() in IDEMPOTENT_METHODS:
        return True
    return isinstance(exc, httpx.ConnectError | httpx.ConnectTimeout)


class HttpClient:
    """Cliente HTTP assíncrono com retry e backoff exponencial.

    Args:
        config: Configuração de timeouts e retries
        transport: Transport httpx opcional (ex.: `httpx.MockTransport` em testes)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Executa a requisição com retry em 429/5xx e falhas de conexão.

        Métodos não idempotentes (POST) só são repetidos em 429 ou quando a
        conexão nem foi estabelecida: um timeout de leitura ou 5xx pode ter
        criado o recurso do lado da Meta.

        Na última tentativa, respostas 429/5xx são devolvidas ao chamador
        para que o corpo de erro possa ser interpretado.

        Raises:
            HttpError: Timeout/falha de conexão após esgotar as tentativas
        """
        merged_headers = {**self._config.default_headers, **(headers or {})}
        for attempt in range(self._config.max_retries + 1):
            is_last_attempt = attempt >= self._config.max_retries
            try:
                async with httpx.AsyncClient(
                    verify=self._config.verify_ssl,
                    transport=self._transport,
                    timeout=self._config.timeout_seconds,
                ) as client:
                    response = await client.request(
                        method,
                        url,
                        params=params,
                        json=json,
                        data=data,
                        files=files,
                        headers=merged_headers,
                    )
            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                if is_last_attempt or not _should_retry_exception(method, exc):
                    raise HttpError("http_connection_error", is_retryable=True) from exc
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
                continue

            if _should_retry_status(method, response.status_code) and not is_last_attempt:
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
                continue
            return response
        raise HttpError("http_retry_exhausted", is_retryable=True)


async def _backoff_sleep(attempt: int, base: float, max_seconds: float) -> None:
    backoff = min((2**attempt) * base, max_seconds)
    logger.info("http_backoff", extra={"backoff_seconds": backoff, "attempt": attempt + 1})
    await asyncio.sleep(backoff)
