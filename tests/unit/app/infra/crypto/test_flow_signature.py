"""Testes de validate_flow_signature (X-Hub-Signature-256)."""

from __future__ import annotations

import hashlib
import hmac

import pytest

from app.infra.crypto import validate_flow_signature

SECRET = b"app-secret"
BODY = b'{"encrypted_flow_data":"x"}'


def _signature(body: bytes = BODY, secret: bytes = SECRET) -> str:
    return "sha256=" + hmac.new(secret, body, hashlib.sha256).hexdigest()


def test_valid_signature() -> None:
    assert validate_flow_signature(BODY, _signature(), SECRET) is True


def test_uppercase_hex_accepted() -> None:
    algorithm, _, digest = _signature().partition("=")
    assert validate_flow_signature(BODY, f"{algorithm}={digest.upper()}", SECRET) is True


@pytest.mark.parametrize(
    "signature",
    [
        None,
        "",
        "sha1=abc",
        "sha256=",
        "sha256=deadbeef",
        "sha256=ééé",
        "no-separator",
    ],
)
def test_invalid_signatures(signature: str | None) -> None:
    assert validate_flow_signature(BODY, signature, SECRET) is False


def test_wrong_secret() -> None:
    assert validate_flow_signature(BODY, _signature(secret=b"other"), SECRET) is False


def test_empty_secret() -> None:
    assert validate_flow_signature(BODY, _signature(), b"") is False
