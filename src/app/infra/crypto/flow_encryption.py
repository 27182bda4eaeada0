"""Decriptação do endpoint de WhatsApp Flows (data exchange).

Formato do envelope:
- `encrypted_flow_data`: AES-256-CBC(plaintext) || HMAC-SHA256 truncado (10 bytes)
- `encryption_metadata`: chaves, IV e hashes SHA-256 declarados (base64)

As três verificações (hash do ciphertext, tag HMAC, hash do plaintext) são
independentes e todas obrigatórias. Comparações sempre em tempo constante.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from app.infra.crypto.constants import TAG_SIZE
from app.infra.crypto.envelope import EncryptedEnvelope, decode_base64
from app.protocols.crypto import (
    FLOW_STATUS_HMAC,
    FLOW_STATUS_INTEGRITY,
    FLOW_STATUS_MALFORMED,
    FlowServerError,
)

logger = logging.getLogger(__name__)


def _reject(status_code: int, message: str, reason: str) -> FlowServerError:
    logger.warning(
        "flow_decrypt_rejected",
        extra={"component": "flow_crypto", "status_code": status_code, "reason": reason},
    )
    return FlowServerError(status_code, message)


def _aes_cbc_decrypt(cipher_bytes: bytes, key: bytes, iv: bytes) -> bytes:
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(cipher_bytes) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def decrypt_envelope(envelope: EncryptedEnvelope) -> bytes:
    """Valida e decripta um envelope, retornando o plaintext.

    Args:
        envelope: Envelope já decodificado de base64

    Returns:
        Plaintext verificado

    Raises:
        FlowServerError: 400 (metadados ausentes), 421 (integridade) ou 432 (HMAC)
    """
    if not envelope.encryption_key or not envelope.hmac_key or not envelope.iv:
        raise _reject(FLOW_STATUS_MALFORMED, "Missing encryption metadata", "missing_metadata")

    ciphertext_with_tag = envelope.ciphertext_with_tag
    actual_hash = hashlib.sha256(ciphertext_with_tag).digest()
    if not hmac.compare_digest(actual_hash, envelope.expected_ciphertext_hash):
        raise _reject(FLOW_STATUS_INTEGRITY, "Encrypted payload hash mismatch", "ciphertext_hash")

    if len(ciphertext_with_tag) <= TAG_SIZE:
        raise _reject(FLOW_STATUS_INTEGRITY, "Invalid ciphertext length", "ciphertext_length")

    cipher_bytes = ciphertext_with_tag[:-TAG_SIZE]
    tag = ciphertext_with_tag[-TAG_SIZE:]
    computed_tag = hmac.new(envelope.hmac_key, cipher_bytes, hashlib.sha256).digest()[:TAG_SIZE]
    if not hmac.compare_digest(tag, computed_tag):
        raise _reject(FLOW_STATUS_HMAC, "HMAC validation failed", "hmac_tag")

    try:
        plaintext = _aes_cbc_decrypt(cipher_bytes, envelope.encryption_key, envelope.iv)
    except ValueError as exc:
        # Tamanho de chave/IV inválido ou padding corrompido.
        raise _reject(FLOW_STATUS_INTEGRITY, "Unable to decrypt payload", "cipher_error") from exc

    plaintext_hash = hashlib.sha256(plaintext).digest()
    if not hmac.compare_digest(plaintext_hash, envelope.expected_plaintext_hash):
        raise _reject(FLOW_STATUS_INTEGRITY, "Plaintext hash mismatch", "plaintext_hash")

    return plaintext


def decrypt_flow_payload(
    encrypted_flow_data: str,
    metadata: dict[str, Any],
) -> dict[str, Any]:
    """Decripta `encrypted_flow_data` e retorna o JSON interno.

    Args:
        encrypted_flow_data: ciphertext || tag em base64
        metadata: `encryption_metadata` (camelCase ou snake_case)

    Returns:
        Payload interno como dict

    Raises:
        FlowServerError: Em qualquer falha de formato, integridade ou parse
    """
    ciphertext_with_tag = decode_base64(encrypted_flow_data)
    envelope = EncryptedEnvelope.from_metadata(ciphertext_with_tag, metadata)
    plaintext = decrypt_envelope(envelope)

    try:
        payload = json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise _reject(
            FLOW_STATUS_MALFORMED, "Unable to parse decrypted payload", "plaintext_json"
        ) from exc

    if not isinstance(payload, dict):
        raise _reject(FLOW_STATUS_MALFORMED, "Unable to parse decrypted payload", "plaintext_json")

    return payload
