"""Coordenação do data exchange de WhatsApp Flows.

Fluxo de um request (terminal no primeiro sucesso ou erro):
    Received -> (Decrypted) -> KeyTranslated -> TokenVerified -> Dispatched

Qualquer etapa pode falhar com FlowServerError (400/421/427/432); não há
fallback silencioso. A decriptação é injetada (ver app.bootstrap) para que
o coordinator não dependa da implementação concreta de crypto.
"""

from __future__ import annotations

import inspect
import json
import logging
from typing import TYPE_CHECKING, Any

from app.flow_json import from_wire_case
from app.protocols.crypto import (
    FLOW_STATUS_INVALID_TOKEN,
    FLOW_STATUS_MALFORMED,
    FlowServerError,
)

from .models import DecodedFlowRequest, FlowAction, FlowContext, FlowHttpResponse

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols.crypto import FlowPayloadDecryptorProtocol

    TokenVerifier = Callable[[str, dict[str, Any]], bool | Awaitable[bool]]

logger = logging.getLogger(__name__)


def is_health_check(payload: dict[str, Any]) -> bool:
    """Request de health check (`action == "ping"`) enviado pela Meta."""
    return str(payload.get("action") or "").lower() == "ping"


def _parse_body(raw_body: bytes | str) -> dict[str, Any]:
    try:
        text = raw_body.decode("utf-8") if isinstance(raw_body, bytes | bytearray) else raw_body
        body = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise FlowServerError(FLOW_STATUS_MALFORMED, "Invalid JSON payload") from exc
    if not isinstance(body, dict):
        raise FlowServerError(FLOW_STATUS_MALFORMED, "Invalid JSON payload")
    return body


class FlowExchangeHandler:
    """Recebe requests do endpoint de Flow e expõe um FlowContext.

    Args:
        decrypt_payload: Função que decripta `encrypted_flow_data` + metadata
        phone_number_id: Número associado ao endpoint (repassado ao verificador)
        verify_token: Callback opcional `(flow_token, context) -> bool`,
            síncrono ou assíncrono. Retorno falso resulta em 427.
    """

    def __init__(
        self,
        *,
        decrypt_payload: FlowPayloadDecryptorProtocol,
        phone_number_id: str = "",
        verify_token: TokenVerifier | None = None,
    ) -> None:
        self._decrypt_payload = decrypt_payload
        self._phone_number_id = phone_number_id
        self._verify_token = verify_token

    async def receive(self, raw_body: bytes | str) -> FlowContext:
        """Processa o corpo bruto de um request de Flow.

        O verificador de flow_token, quando configurado, é sempre chamado
        (inclusive para `action == "ping"`).

        Args:
            raw_body: Corpo HTTP bruto (JSON, criptografado ou não)

        Returns:
            FlowContext imutável com chaves em camelCase

        Raises:
            FlowServerError: 400, 421, 427 ou 432
        """
        return await self.build_context(self.decode_request(raw_body))

    def decode_request(self, raw_body: bytes | str) -> DecodedFlowRequest:
        """Faz parse, decripta (se preciso) e traduz as chaves para camelCase.

        Raises:
            FlowServerError: 400, 421 ou 432
        """
        body = _parse_body(raw_body)

        encrypted_flow_data = body.get("encrypted_flow_data")
        encryption_metadata = body.get("encryption_metadata")
        is_encrypted = bool(encrypted_flow_data and encryption_metadata)
        if is_encrypted:
            metadata = from_wire_case(encryption_metadata)
            if not isinstance(metadata, dict):
                raise FlowServerError(FLOW_STATUS_MALFORMED, "Missing encryption metadata")
            payload = self._decrypt_payload(str(encrypted_flow_data), metadata)
        else:
            payload = body

        return DecodedFlowRequest(payload=from_wire_case(payload), encrypted=is_encrypted)

    async def build_context(self, request: DecodedFlowRequest) -> FlowContext:
        """Aplica o gate de flow_token e monta o FlowContext.

        Raises:
            FlowServerError: 427 se o verificador rejeitar o token
        """
        camel = request.payload
        action = FlowAction.from_raw(camel.get("action"))
        screen = camel.get("screen")
        screen = screen if isinstance(screen, str) else ""
        flow_token = self._extract_flow_token(camel)

        logger.info(
            "flow_request_received",
            extra={
                "component": "flow_exchange",
                "action": action.value,
                "screen": screen,
                "encrypted": request.encrypted,
            },
        )

        await self._ensure_token_valid(flow_token)

        form = camel.get("form")
        data = camel.get("data")
        return FlowContext(
            action=action,
            screen=screen,
            flow_token=flow_token,
            form=from_wire_case(form) if isinstance(form, dict) else {},
            data=from_wire_case(data) if isinstance(data, dict) else {},
            raw=camel,
        )

    @staticmethod
    def _extract_flow_token(camel: dict[str, Any]) -> str:
        token = camel.get("flowToken")
        if token is None:
            token = camel.get("flow_token")
        return "" if token is None else str(token)

    async def _ensure_token_valid(self, flow_token: str) -> None:
        if self._verify_token is None:
            return

        context = {"phone_number_id": self._phone_number_id}
        try:
            result = self._verify_token(flow_token, context)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.warning(
                "flow_token_verifier_failed",
                extra={"component": "flow_exchange", "error_type": type(exc).__name__},
            )
            raise FlowServerError(FLOW_STATUS_INVALID_TOKEN, "Invalid flow token") from exc

        if not result:
            logger.warning("flow_token_rejected", extra={"component": "flow_exchange"})
            raise FlowServerError(FLOW_STATUS_INVALID_TOKEN, "Invalid flow token")


def respond_to_flow(
    screen: str,
    data: dict[str, Any] | None = None,
    *,
    status: int = 200,
    headers: dict[str, str] | None = None,
) -> FlowHttpResponse:
    """Monta a resposta do endpoint (JSON sem recriptografia).

    Headers do chamador sobrescrevem o Content-Type padrão.
    """
    merged_headers = {"Content-Type": "application/json", **(headers or {})}
    body = json.dumps({"screen": screen, "data": data or {}}, ensure_ascii=False)
    return FlowHttpResponse(status=status, headers=merged_headers, body=body)
