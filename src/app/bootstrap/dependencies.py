"""Wiring de coordinators com implementações concretas.

Único ponto onde app/ se liga a api/ (transporte Graph) e a infra/.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.bootstrap.clients import create_async_redis_client
from app.coordinators.whatsapp.flows.deploy import FlowDeployer
from app.coordinators.whatsapp.flows.exchange import FlowExchangeHandler
from app.infra.crypto import decrypt_flow_payload, download_and_decrypt_media
from app.infra.stores import MemoryDeployHashStore, RedisDeployHashStore
from config.settings import get_flows_settings, get_whatsapp_settings

if TYPE_CHECKING:
    import httpx

    from app.coordinators.whatsapp.flows.exchange import TokenVerifier
    from app.protocols.deploy_store import DeployHashStoreProtocol
    from app.protocols.http_client import GraphApiClientProtocol
    from config.settings import FlowsSettings

logger = logging.getLogger(__name__)


def create_flow_exchange_handler(
    verify_token: TokenVerifier | None = None,
    phone_number_id: str | None = None,
) -> FlowExchangeHandler:
    """Cria o handler de data exchange com a decriptação AES/HMAC."""
    pid = phone_number_id if phone_number_id is not None else get_whatsapp_settings().phone_number_id
    return FlowExchangeHandler(
        decrypt_payload=decrypt_flow_payload,
        phone_number_id=pid,
        verify_token=verify_token,
    )


def create_deploy_hash_store(settings: FlowsSettings | None = None) -> DeployHashStoreProtocol:
    """Cria o cache de hashes de deploy conforme FLOW_DEPLOY_STORE.

    Raises:
        ValueError: Backend inválido ou REDIS_URL ausente para redis
    """
    flows = settings or get_flows_settings()

    if flows.deploy_store == "redis":
        store = RedisDeployHashStore(
            create_async_redis_client(flows.redis_url),
            ttl_seconds=flows.deploy_hash_ttl_seconds,
        )
        logger.info("deploy_hash_store_created", extra={"backend": "redis"})
        return store

    if flows.deploy_store == "memory":
        logger.info("deploy_hash_store_created", extra={"backend": "memory"})
        return MemoryDeployHashStore()

    msg = f"FLOW_DEPLOY_STORE inválido: {flows.deploy_store}"
    raise ValueError(msg)


def create_flow_deployer(
    client: GraphApiClientProtocol | None = None,
    hash_store: DeployHashStoreProtocol | None = None,
) -> FlowDeployer:
    """Cria o FlowDeployer com cliente Graph e cache configurados."""
    if client is None:
        # Import local: app/ só conhece api/ através do bootstrap
        from api.connectors.whatsapp import create_graph_api_client

        client = create_graph_api_client()

    return FlowDeployer(
        client=client,
        hash_store=hash_store or create_deploy_hash_store(),
        strict_keys=get_flows_settings().strict_keys,
    )


async def download_flow_media(
    cdn_url: str,
    encryption_metadata: dict[str, Any],
    *,
    client: httpx.AsyncClient | None = None,
) -> bytes:
    """Baixa e decripta mídia de Flow com limite e timeout das settings."""
    return await download_and_decrypt_media(
        cdn_url,
        encryption_metadata,
        client=client,
        timeout_seconds=get_whatsapp_settings().request_timeout_seconds,
        max_size_bytes=get_flows_settings().media_max_size_bytes,
    )
