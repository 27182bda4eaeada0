"""Módulo de criptografia para WhatsApp Flows.

Implementação do envelope AES-256-CBC + HMAC-SHA256 truncado usado no
data exchange e no download de mídias de Flows.

Localizado em app/infra/ para manter boundaries corretas:
- app/ não importa de api/ (exceto via bootstrap)
- Coordinators recebem a decriptação injetada via bootstrap
"""

from .constants import AES_KEY_SIZE, HMAC_KEY_SIZE, IV_SIZE, TAG_SIZE
from .envelope import EncryptedEnvelope, decode_base64
from .flow_encryption import decrypt_envelope, decrypt_flow_payload
from .media import download_and_decrypt_media
from .signature import validate_flow_signature

__all__ = [
    "AES_KEY_SIZE",
    "HMAC_KEY_SIZE",
    "IV_SIZE",
    "TAG_SIZE",
    "EncryptedEnvelope",
    "decode_base64",
    "decrypt_envelope",
    "decrypt_flow_payload",
    "download_and_decrypt_media",
    "validate_flow_signature",
]
