"""Validação de assinatura HMAC-SHA256 (X-Hub-Signature-256)."""

from __future__ import annotations

import hashlib
import hmac


def validate_flow_signature(payload: bytes, signature: str | None, secret: bytes) -> bool:
    """Valida assinatura HMAC-SHA256 do Meta.

    Args:
        payload: Corpo bruto da requisição
        signature: Header X-Hub-Signature-256 (`sha256=<hex>`)
        secret: App secret em bytes

    Returns:
        True se assinatura válida; False para qualquer formato inesperado
    """
    if not signature or not secret:
        return False

    algorithm, _, received = signature.partition("=")
    if algorithm != "sha256" or not received or not received.isascii():
        return False

    computed = hmac.new(secret, payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(computed, received.strip().lower())
