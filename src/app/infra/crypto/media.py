"""Download e decriptação de mídia criptografada enviada por Flows.

Mídias enviadas em componentes de upload (PhotoPicker/DocumentPicker)
chegam como `cdn_url` + `encryption_metadata`. O conteúdo baixado usa o
mesmo envelope do data exchange.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.infra.crypto.envelope import EncryptedEnvelope
from app.infra.crypto.flow_encryption import decrypt_envelope
from app.protocols.crypto import FlowMediaDownloadError

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TIMEOUT_SECONDS = 30.0


async def _fetch_media(
    client: httpx.AsyncClient,
    cdn_url: str,
    max_size_bytes: int | None,
) -> bytes:
    try:
        response = await client.get(cdn_url)
    except httpx.TimeoutException as exc:
        logger.warning("flow_media_download_timeout", extra={"component": "flow_media"})
        raise FlowMediaDownloadError("Media download timed out") from exc
    except httpx.HTTPError as exc:
        logger.warning(
            "flow_media_download_failed",
            extra={"component": "flow_media", "error_type": type(exc).__name__},
        )
        raise FlowMediaDownloadError("Media download failed") from exc

    if not response.is_success:
        logger.warning(
            "flow_media_download_failed",
            extra={"component": "flow_media", "status_code": response.status_code},
        )
        raise FlowMediaDownloadError(
            f"Failed to download media: {response.status_code}",
            status_code=response.status_code,
        )

    content = response.content
    if max_size_bytes is not None and len(content) > max_size_bytes:
        raise FlowMediaDownloadError("Media exceeds maximum size", status_code=response.status_code)
    return content


async def download_and_decrypt_media(
    cdn_url: str,
    encryption_metadata: dict[str, Any],
    *,
    client: httpx.AsyncClient | None = None,
    timeout_seconds: float = DEFAULT_MEDIA_TIMEOUT_SECONDS,
    max_size_bytes: int | None = None,
) -> bytes:
    """Baixa mídia do CDN e retorna os bytes decriptados.

    Args:
        cdn_url: URL do CDN informada no payload do Flow
        encryption_metadata: `encryptionKey`, `hmacKey`, `iv`, `encryptedHash`,
            `plaintextHash` (aceita também snake_case)
        client: Cliente httpx opcional (reutilizado pelo chamador)
        timeout_seconds: Timeout quando o cliente é criado aqui
        max_size_bytes: Limite opcional de tamanho do download

    Returns:
        Conteúdo decriptado da mídia

    Raises:
        FlowMediaDownloadError: Falha de transporte ou status não-2xx
        FlowServerError: Falha de integridade/autenticação do envelope
    """
    if client is not None:
        ciphertext_with_tag = await _fetch_media(client, cdn_url, max_size_bytes)
    else:
        async with httpx.AsyncClient(timeout=timeout_seconds) as owned_client:
            ciphertext_with_tag = await _fetch_media(owned_client, cdn_url, max_size_bytes)

    envelope = EncryptedEnvelope.from_metadata(ciphertext_with_tag, encryption_metadata)
    plaintext = decrypt_envelope(envelope)
    logger.debug(
        "flow_media_decrypted",
        extra={"component": "flow_media", "size_bytes": len(plaintext)},
    )
    return plaintext
