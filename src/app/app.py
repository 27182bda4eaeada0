"""Factory da aplicação ASGI (FastAPI) do endpoint de Flows.

Uso:
    from app.app import create_app

    async def handle_flow(context):
        return {"screen": "NEXT", "data": {"ok": True}}

    app = create_app(on_exchange=handle_flow)
    # uvicorn my_service:app --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_async_redis_client
from config.logging import DEFAULT_SERVICE_NAME
from config.settings import get_flows_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from api.routes.whatsapp.flows import ExchangeCallback
    from app.coordinators.whatsapp.flows.exchange import TokenVerifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: valida settings e abre Redis (se FLOW_DEPLOY_STORE=redis).

    Shutdown: fecha o cliente Redis.
    """
    logger.info("app_starting", extra={"component": "app"})
    validate_runtime_settings()
    app.state.redis_client = None

    flows = get_flows_settings()
    if flows.deploy_store == "redis" and flows.redis_url:
        app.state.redis_client = create_async_redis_client(flows.redis_url)

    yield

    logger.info("app_shutting_down", extra={"component": "app"})
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        await redis_client.aclose()


def create_app(
    on_exchange: ExchangeCallback,
    verify_token: TokenVerifier | None = None,
    *,
    skip_token_for_health_check: bool = False,
) -> FastAPI:
    """Cria a aplicação FastAPI com health checks e endpoint de Flows.

    Args:
        on_exchange: Regra de negócio do data exchange
        verify_token: Verificador opcional de flow_token
        skip_token_for_health_check: Responde ping da Meta sem verificar flow_token
    """
    initialize_app()

    fastapi_app = FastAPI(
        title=DEFAULT_SERVICE_NAME,
        description="Endpoint de data exchange de WhatsApp Flows",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.include_router(
        create_api_router(
            on_exchange,
            verify_token=verify_token,
            skip_token_for_health_check=skip_token_for_health_check,
        )
    )

    logger.info("app_configured", extra={"component": "app"})
    return fastapi_app
