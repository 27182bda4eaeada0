"""Settings de WhatsApp Flows.

Limites de mídia, modo estrito do Flow JSON e backend do cache de deploy.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

DeployStoreBackend = Literal["memory", "redis"]

DEFAULT_MEDIA_MAX_SIZE_BYTES = 100 * 1024 * 1024  # 100MB

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class FlowsSettings:
    """Configurações de Flows.

    Attributes:
        media_max_size_bytes: Tamanho máximo de mídia criptografada baixada da CDN
        strict_keys: Rejeita chaves snake/kebab no Flow JSON de autoria
        deploy_store: Backend do cache de hash de deploy (memory|redis)
        redis_url: URL do Redis (obrigatória quando deploy_store=redis)
        deploy_hash_ttl_seconds: TTL dos hashes no Redis (None = sem expiração)
    """

    media_max_size_bytes: int = DEFAULT_MEDIA_MAX_SIZE_BYTES
    strict_keys: bool = True
    deploy_store: DeployStoreBackend = "memory"
    redis_url: str = ""
    deploy_hash_ttl_seconds: int | None = None

    def validate(self) -> list[str]:
        """Valida configurações de Flows.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.media_max_size_bytes <= 0:
            errors.append("FLOW_MEDIA_MAX_SIZE_BYTES deve ser > 0")

        if self.deploy_store not in ("memory", "redis"):
            errors.append(f"FLOW_DEPLOY_STORE inválido: {self.deploy_store}")

        if self.deploy_store == "redis" and not self.redis_url:
            errors.append("FLOW_DEPLOY_STORE=redis requer REDIS_URL configurado")

        if self.deploy_hash_ttl_seconds is not None and self.deploy_hash_ttl_seconds <= 0:
            errors.append("FLOW_DEPLOY_HASH_TTL_SECONDS deve ser > 0")

        return errors


def _load_flows_from_env() -> FlowsSettings:
    """Carrega FlowsSettings de variáveis de ambiente."""
    store_str = os.getenv("FLOW_DEPLOY_STORE", "memory").lower()
    deploy_store: DeployStoreBackend = store_str if store_str in ("memory", "redis") else "memory"
    ttl_raw = os.getenv("FLOW_DEPLOY_HASH_TTL_SECONDS", "").strip()
    return FlowsSettings(
        media_max_size_bytes=int(
            os.getenv("FLOW_MEDIA_MAX_SIZE_BYTES", str(DEFAULT_MEDIA_MAX_SIZE_BYTES))
        ),
        strict_keys=os.getenv("FLOW_JSON_STRICT_KEYS", "true").strip().lower() in _TRUE_VALUES,
        deploy_store=deploy_store,
        redis_url=os.getenv("REDIS_URL", ""),
        deploy_hash_ttl_seconds=int(ttl_raw) if ttl_raw else None,
    )


@lru_cache(maxsize=1)
def get_flows_settings() -> FlowsSettings:
    """Retorna instância cacheada de FlowsSettings."""
    return _load_flows_from_env()
