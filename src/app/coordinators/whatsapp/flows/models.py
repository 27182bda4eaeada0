"""Modelos de coordenação para WhatsApp Flows."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class FlowAction(StrEnum):
    """Ações de data exchange reconhecidas."""

    DATA_EXCHANGE = "DATA_EXCHANGE"
    COMPLETE = "COMPLETE"
    BACK = "BACK"

    @classmethod
    def from_raw(cls, raw: Any) -> FlowAction:
        """Normaliza ação bruta; valores desconhecidos viram DATA_EXCHANGE."""
        normalized = str(raw or "").upper()
        if normalized == cls.COMPLETE:
            return cls.COMPLETE
        if normalized == cls.BACK:
            return cls.BACK
        return cls.DATA_EXCHANGE


@dataclass(slots=True, frozen=True)
class FlowContext:
    """Request de Flow já decriptado e em camelCase, pronto para a regra de negócio."""

    action: FlowAction
    screen: str
    flow_token: str
    form: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class DecodedFlowRequest:
    """Payload decriptado e em camelCase, antes do gate de flow_token."""

    payload: dict[str, Any]
    encrypted: bool = False


@dataclass(slots=True, frozen=True)
class FlowHttpResponse:
    """Resposta HTTP pronta para o endpoint de Flow."""

    status: int
    headers: dict[str, str]
    body: str


@dataclass(slots=True, frozen=True)
class FlowValidationPointer:
    """Ponteiro de erro de validação retornado pela Meta."""

    path: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class FlowValidationError:
    """Erro de validação do Flow JSON, com chaves em camelCase."""

    error: str
    error_type: str | None = None
    message: str | None = None
    pointers: tuple[FlowValidationPointer, ...] = ()
    hint: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class FlowCreateResult:
    """Resposta de criação de Flow."""

    flow_id: str
    success: bool
    validation_errors: tuple[FlowValidationError, ...] = ()


@dataclass(slots=True, frozen=True)
class FlowAssetUpdateResult:
    """Resposta de upload do asset FLOW_JSON."""

    success: bool
    validation_errors: tuple[FlowValidationError, ...] = ()


@dataclass(slots=True, frozen=True)
class FlowPreview:
    """URL de preview de um Flow."""

    preview_url: str
    expires_at: str


@dataclass(slots=True, frozen=True)
class DeployResult:
    """Resultado de um deploy de Flow."""

    flow_id: str
    uploaded: bool
    preview_url: str | None = None
    validation_errors: tuple[FlowValidationError, ...] = ()
