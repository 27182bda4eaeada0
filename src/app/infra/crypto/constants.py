"""Constantes criptográficas para WhatsApp Flows."""

AES_KEY_SIZE = 32  # 256 bits (AES-256-CBC)
HMAC_KEY_SIZE = 32
IV_SIZE = 16  # bloco AES
TAG_SIZE = 10  # HMAC-SHA256 truncado
SHA256_SIZE = 32
