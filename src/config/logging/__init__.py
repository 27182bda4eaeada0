"""Logging estruturado do canal de Flows.

Uso:
    from config.logging import configure_logging

    # Uma vez, no bootstrap
    configure_logging(level="INFO")

    # Nos módulos
    logger = logging.getLogger(__name__)
    logger.info("flow_request_received", extra={"component": "flow_exchange"})

Todo record sai em JSON com service e correlation_id. Campos sensíveis
(chaves, tokens, plaintext) são mascarados antes da formatação.
"""

from config.logging.config import DEFAULT_SERVICE_NAME, configure_logging
from config.logging.filters import CorrelationIdFilter, SensitiveFieldFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "FIELD_RENAME_MAP",
    "LOG_FIELDS",
    "CorrelationIdFilter",
    "SensitiveFieldFilter",
    "configure_logging",
    "create_json_formatter",
]
