"""Factories de clientes externos (Redis)."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=4)
def create_async_redis_client(redis_url: str) -> AsyncRedis:
    """Cria cliente Redis assíncrono (um por URL).

    Args:
        redis_url: URL de conexão (ex: redis://localhost:6379/0)

    Raises:
        ValueError: Se redis_url vazio
    """
    from redis.asyncio import Redis as AsyncRedis

    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: AsyncRedis = AsyncRedis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )

    logger.info("async_redis_client_created", extra={"component": "bootstrap"})
    return client
