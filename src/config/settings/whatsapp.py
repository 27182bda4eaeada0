"""Settings específicas de WhatsApp.

Credenciais e transporte da Graph API usados pelo endpoint de Flows
e pelo deploy de Flow JSON.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Constantes do Graph API
GRAPH_API_VERSION: str = "v24.0"
GRAPH_API_BASE_URL: str = "https://graph.facebook.com"


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do canal WhatsApp.

    Attributes:
        app_secret: Secret do app Meta (validação X-Hub-Signature-256)
        access_token: Token de acesso à Graph API
        phone_number_id: ID do número de telefone no Meta Business
        business_account_id: ID da conta de negócios (WABA)
        api_version: Versão da Graph API (ex: v24.0)
        api_base_url: URL base da Graph API
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Máximo de tentativas em caso de erro
    """

    # Credenciais
    app_secret: str = ""
    access_token: str = ""
    phone_number_id: str = ""
    business_account_id: str = ""

    # API
    api_version: str = GRAPH_API_VERSION
    api_base_url: str = GRAPH_API_BASE_URL

    # Timeouts e retries
    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    @property
    def api_endpoint(self) -> str:
        """URL base completa da API com versão."""
        return f"{self.api_base_url.rstrip('/')}/{self.api_version}"

    def validate(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.access_token:
            errors.append("WHATSAPP_ACCESS_TOKEN não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("WHATSAPP_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("WHATSAPP_MAX_RETRIES deve ser >= 0")

        return errors


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        app_secret=os.getenv("WHATSAPP_APP_SECRET", ""),
        access_token=os.getenv("WHATSAPP_ACCESS_TOKEN", ""),
        phone_number_id=os.getenv("WHATSAPP_PHONE_NUMBER_ID", ""),
        business_account_id=os.getenv("WHATSAPP_BUSINESS_ACCOUNT_ID", ""),
        api_version=os.getenv("WHATSAPP_API_VERSION", GRAPH_API_VERSION),
        api_base_url=os.getenv("WHATSAPP_API_BASE_URL", GRAPH_API_BASE_URL),
        request_timeout_seconds=float(
            os.getenv("WHATSAPP_REQUEST_TIMEOUT_SECONDS", "30")
        ),
        max_retries=int(os.getenv("WHATSAPP_MAX_RETRIES", "3")),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
