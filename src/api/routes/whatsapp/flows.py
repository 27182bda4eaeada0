"""Endpoint de data exchange para WhatsApp Flows.

O router é criado por factory: o chamador injeta a regra de negócio
(`on_exchange`) e, opcionalmente, o verificador de flow_token.
"""

from __future__ import annotations

import inspect
import logging
import time
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from app.bootstrap import create_flow_exchange_handler
from app.coordinators.whatsapp.flows.exchange import is_health_check, respond_to_flow
from app.coordinators.whatsapp.flows.models import FlowHttpResponse
from app.infra.crypto import validate_flow_signature
from app.observability import (
    record_flow_rejection,
    record_latency,
    reset_correlation_id,
    set_correlation_id,
)
from app.protocols.crypto import FlowServerError
from config.settings import get_whatsapp_settings

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.coordinators.whatsapp.flows.exchange import FlowExchangeHandler, TokenVerifier
    from app.coordinators.whatsapp.flows.models import FlowContext

    ExchangeCallback = Callable[
        [FlowContext],
        FlowHttpResponse | dict[str, Any] | Awaitable[FlowHttpResponse | dict[str, Any]],
    ]

logger = logging.getLogger(__name__)

FLOW_ENDPOINT_PATH = "/flow/endpoint"
HEALTH_CHECK_RESPONSE = {"data": {"status": "active"}}


def _to_http_response(result: FlowHttpResponse | dict[str, Any]) -> FlowHttpResponse:
    if isinstance(result, FlowHttpResponse):
        return result
    if not isinstance(result, dict):
        msg = "on_exchange deve retornar FlowHttpResponse ou dict"
        raise TypeError(msg)
    data = result.get("data")
    return respond_to_flow(
        str(result.get("screen") or ""),
        data if isinstance(data, dict) else None,
    )


def _error_response(exc: FlowServerError) -> Response:
    return Response(content=exc.body, status_code=exc.status_code, headers=exc.headers)


def create_flows_router(
    on_exchange: ExchangeCallback,
    verify_token: TokenVerifier | None = None,
    handler: FlowExchangeHandler | None = None,
    *,
    skip_token_for_health_check: bool = False,
) -> APIRouter:
    """Cria router com `POST /flow/endpoint`.

    Args:
        on_exchange: Regra de negócio; recebe FlowContext e retorna
            FlowHttpResponse ou `{"screen": ..., "data": ...}`
        verify_token: Verificador de flow_token (ignorado se `handler` for passado)
        handler: FlowExchangeHandler pronto (útil em testes)
        skip_token_for_health_check: Responde `action == "ping"` sem chamar o
            verificador de flow_token. Desligado por padrão: o ping passa pelo
            mesmo gate que os demais requests.
    """
    router = APIRouter()
    exchange = handler or create_flow_exchange_handler(verify_token=verify_token)

    @router.post(FLOW_ENDPOINT_PATH)
    async def handle_flow_endpoint(request: Request) -> Response:
        """Valida assinatura, decripta e delega para `on_exchange`."""
        token = set_correlation_id(request.headers.get("x-correlation-id"))
        started_at = time.perf_counter()
        try:
            raw_body = await request.body()
            app_secret = get_whatsapp_settings().app_secret
            if app_secret and not validate_flow_signature(
                raw_body,
                request.headers.get("x-hub-signature-256"),
                app_secret.encode("utf-8"),
            ):
                logger.warning(
                    "flow_signature_invalid",
                    extra={"component": "flow_endpoint", "action": "validate_signature"},
                )
                return PlainTextResponse("Signature verification failed", status_code=401)

            try:
                decoded = exchange.decode_request(raw_body)
                if skip_token_for_health_check and is_health_check(decoded.payload):
                    return JSONResponse(content=HEALTH_CHECK_RESPONSE)
                context = await exchange.build_context(decoded)
            except FlowServerError as exc:
                record_flow_rejection(exc.status_code, exc.message)
                return _error_response(exc)

            if is_health_check(context.raw):
                return JSONResponse(content=HEALTH_CHECK_RESPONSE)

            result = on_exchange(context)
            if inspect.isawaitable(result):
                result = await result
            flow_response = _to_http_response(result)
            record_latency(
                "flow_endpoint",
                "exchange",
                (time.perf_counter() - started_at) * 1000,
                status_code=flow_response.status,
            )
            return Response(
                content=flow_response.body,
                status_code=flow_response.status,
                headers=flow_response.headers,
            )
        finally:
            reset_correlation_id(token)

    return router
