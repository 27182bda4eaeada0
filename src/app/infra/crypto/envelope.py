"""Envelope criptografado de Flows (ciphertext + tag + metadados)."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Any

from app.protocols.crypto import FLOW_STATUS_MALFORMED, FlowServerError

_URLSAFE_B64_RE = re.compile(r"[A-Za-z0-9_\-]+={0,2}")

# Nome autoria -> nome wire aceito como alternativa
_METADATA_FIELDS = {
    "encryptionKey": "encryption_key",
    "hmacKey": "hmac_key",
    "iv": "iv",
    "encryptedHash": "encrypted_hash",
    "plaintextHash": "plaintext_hash",
}


def decode_base64(raw_value: str) -> bytes:
    """Decodifica base64 padrão ou urlsafe, tolerando padding ausente.

    Raises:
        FlowServerError: 400 se a entrada não for base64 válido
    """
    value = raw_value.strip()
    if not value:
        return b""
    padded = value + ("=" * (-len(value) % 4))
    try:
        return base64.b64decode(padded, validate=True)
    except (ValueError, binascii.Error):
        if not _URLSAFE_B64_RE.fullmatch(value):
            raise FlowServerError(FLOW_STATUS_MALFORMED, "Invalid base64 payload") from None
        try:
            return base64.urlsafe_b64decode(padded)
        except (ValueError, binascii.Error) as exc:
            raise FlowServerError(FLOW_STATUS_MALFORMED, "Invalid base64 payload") from exc


def _metadata_field(metadata: dict[str, Any], name: str) -> str:
    value = metadata.get(name)
    if value is None:
        value = metadata.get(_METADATA_FIELDS[name])
    return "" if value is None else str(value)


@dataclass(frozen=True, slots=True)
class EncryptedEnvelope:
    """Material de uma troca criptografada, já decodificado de base64.

    Criado por request e descartado após a decriptação; nunca cacheado.
    """

    ciphertext_with_tag: bytes
    encryption_key: bytes
    hmac_key: bytes
    iv: bytes
    expected_ciphertext_hash: bytes
    expected_plaintext_hash: bytes

    def __repr__(self) -> str:
        # Nunca expor chaves em logs/tracebacks.
        return f"EncryptedEnvelope(ciphertext_with_tag=<{len(self.ciphertext_with_tag)} bytes>)"

    @classmethod
    def from_metadata(
        cls,
        ciphertext_with_tag: bytes,
        metadata: dict[str, Any],
    ) -> EncryptedEnvelope:
        """Monta envelope a partir de `encryption_metadata`.

        Aceita nomes camelCase (`encryptionKey`) ou snake_case (`encryption_key`).

        Args:
            ciphertext_with_tag: Bytes recebidos (ciphertext || tag de 10 bytes)
            metadata: Campos base64 do envelope

        Raises:
            FlowServerError: 400 se base64 inválido
        """
        return cls(
            ciphertext_with_tag=ciphertext_with_tag,
            encryption_key=decode_base64(_metadata_field(metadata, "encryptionKey")),
            hmac_key=decode_base64(_metadata_field(metadata, "hmacKey")),
            iv=decode_base64(_metadata_field(metadata, "iv")),
            expected_ciphertext_hash=decode_base64(_metadata_field(metadata, "encryptedHash")),
            expected_plaintext_hash=decode_base64(_metadata_field(metadata, "plaintextHash")),
        )
