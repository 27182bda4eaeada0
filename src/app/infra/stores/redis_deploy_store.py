"""Redis Deploy Hash Store: cache de hashes de deploy compartilhado.

Permite que várias instâncias (ou reinícios) compartilhem o último hash
implantado de cada Flow, evitando re-uploads após restart.

Contrato de Keys:
    `flow_deploy_hash:{waba_id}::{flow_name}`. Valores são hashes SHA-256 hex.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.deploy_store import DeployHashStoreProtocol, build_deploy_cache_key
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

DEPLOY_HASH_PREFIX = "flow_deploy_hash:"


class RedisDeployHashStore(DeployHashStoreProtocol):
    """Store de hashes de deploy usando Redis assíncrono.

    Args:
        async_redis_client: Cliente `redis.asyncio.Redis`
        ttl_seconds: TTL opcional das entradas (None = sem expiração)
    """

    def __init__(
        self,
        async_redis_client: AsyncRedis[bytes],
        ttl_seconds: int | None = None,
    ) -> None:
        self._redis = async_redis_client
        self._ttl_seconds = ttl_seconds

    def _key(self, waba_id: str, flow_name: str) -> str:
        return f"{DEPLOY_HASH_PREFIX}{build_deploy_cache_key(waba_id, flow_name)}"

    async def get_hash(self, waba_id: str, flow_name: str) -> str | None:
        """Lê o hash implantado."""
        try:
            value = await self._redis.get(self._key(waba_id, flow_name))
        except Exception as exc:
            raise RedisConnectionError(
                "Falha ao ler hash de deploy no Redis", operation="get_hash"
            ) from exc
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    async def set_hash(self, waba_id: str, flow_name: str, flow_hash: str) -> None:
        """Grava o hash implantado (com TTL se configurado)."""
        try:
            await self._redis.set(self._key(waba_id, flow_name), flow_hash, ex=self._ttl_seconds)
        except Exception as exc:
            raise RedisConnectionError(
                "Falha ao gravar hash de deploy no Redis", operation="set_hash"
            ) from exc
        logger.debug("flow_deploy_hash_stored", extra={"flow_name": flow_name})
