"""Configuração do pytest para o canal de WhatsApp Flows."""

import base64
import hashlib
import hmac
import os
import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from cryptography.hazmat.primitives import padding  # noqa: E402
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes  # noqa: E402

TAG_SIZE = 10


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def build_encrypted_envelope(plaintext: bytes) -> tuple[bytes, dict[str, str]]:
    """Cifra como a Meta: AES-256-CBC/PKCS7 || HMAC-SHA256[:10].

    Returns:
        (ciphertext_with_tag, metadata wire em snake_case/base64)
    """
    encryption_key = os.urandom(32)
    hmac_key = os.urandom(32)
    iv = os.urandom(16)

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(encryption_key), modes.CBC(iv)).encryptor()
    cipher_bytes = encryptor.update(padded) + encryptor.finalize()
    tag = hmac.new(hmac_key, cipher_bytes, hashlib.sha256).digest()[:TAG_SIZE]
    ciphertext_with_tag = cipher_bytes + tag

    metadata = {
        "encryption_key": _b64(encryption_key),
        "hmac_key": _b64(hmac_key),
        "iv": _b64(iv),
        "encrypted_hash": _b64(hashlib.sha256(ciphertext_with_tag).digest()),
        "plaintext_hash": _b64(hashlib.sha256(plaintext).digest()),
    }
    return ciphertext_with_tag, metadata


@pytest.fixture
def encrypt_flow_payload():
    """Factory: plaintext -> (encrypted_flow_data base64, encryption_metadata)."""

    def _encrypt(plaintext: bytes) -> tuple[str, dict[str, str]]:
        ciphertext_with_tag, metadata = build_encrypted_envelope(plaintext)
        return _b64(ciphertext_with_tag), metadata

    return _encrypt


@pytest.fixture
def encrypt_flow_media():
    """Factory: bytes -> (ciphertext_with_tag bruto, encryption_metadata)."""
    return build_encrypted_envelope
