"""Agregador de rotas.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router(on_exchange=handle_flow))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from api.routes.health.router import router as health_router
from api.routes.whatsapp.router import create_whatsapp_router

if TYPE_CHECKING:
    from api.routes.whatsapp.flows import ExchangeCallback
    from app.coordinators.whatsapp.flows.exchange import TokenVerifier


def create_api_router(
    on_exchange: ExchangeCallback,
    verify_token: TokenVerifier | None = None,
    *,
    skip_token_for_health_check: bool = False,
) -> APIRouter:
    """Cria router principal com health checks e WhatsApp."""
    api_router = APIRouter()

    # Health checks na raiz (/health, /ready)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(
        create_whatsapp_router(
            on_exchange,
            verify_token=verify_token,
            skip_token_for_health_check=skip_token_for_health_check,
        ),
        prefix="/webhook/whatsapp",
        tags=["whatsapp"],
    )
    return api_router
