"""Bootstrap da aplicação: inicialização e wiring.

Composition root: configura logging e conecta implementações concretas
(crypto, stores, cliente Graph) aos coordinators de Flows.

Uso:
    from app.bootstrap import initialize_app, create_flow_exchange_handler

    initialize_app()
    handler = create_flow_exchange_handler(verify_token=my_verifier)
"""

from __future__ import annotations

import logging
import os

from app.bootstrap.dependencies import (
    create_deploy_hash_store,
    create_flow_deployer,
    create_flow_exchange_handler,
    download_flow_media,
)
from app.observability import get_correlation_id
from config.logging import DEFAULT_SERVICE_NAME, configure_logging
from config.settings import get_flows_settings, get_whatsapp_settings

DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)

__all__ = [
    "create_deploy_hash_store",
    "create_flow_deployer",
    "create_flow_exchange_handler",
    "download_flow_media",
    "initialize_app",
    "validate_runtime_settings",
]


def initialize_app() -> None:
    """Configura logging JSON com correlation_id (LOG_LEVEL, padrão INFO)."""
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=DEFAULT_SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> list[str]:
    """Valida settings no startup.

    Em `staging`/`production` falha rápido; em outros ambientes apenas
    registra o alerta.

    Returns:
        Lista de erros encontrados.

    Raises:
        RuntimeError: Configuração inválida em ambiente estrito.
    """
    environment = os.getenv("ENVIRONMENT", "development").lower()
    errors: list[str] = []
    errors.extend(f"whatsapp: {error}" for error in get_whatsapp_settings().validate())
    errors.extend(f"flows: {error}" for error in get_flows_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return errors

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if environment in STRICT_VALIDATION_ENVS:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")
    return errors
