"""Router do WhatsApp: agrega os endpoints do canal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from api.routes.whatsapp.flows import create_flows_router

if TYPE_CHECKING:
    from api.routes.whatsapp.flows import ExchangeCallback
    from app.coordinators.whatsapp.flows.exchange import TokenVerifier


def create_whatsapp_router(
    on_exchange: ExchangeCallback,
    verify_token: TokenVerifier | None = None,
    *,
    skip_token_for_health_check: bool = False,
) -> APIRouter:
    """Cria router do canal com o endpoint de Flows."""
    router = APIRouter()
    router.include_router(
        create_flows_router(
            on_exchange,
            verify_token=verify_token,
            skip_token_for_health_check=skip_token_for_health_check,
        )
    )
    return router
