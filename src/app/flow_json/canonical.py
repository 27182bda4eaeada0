"""Serialização canônica e hash do Flow JSON.

Usado no deploy para detectar se o Flow mudou desde o último upload.
Chaves de objetos são ordenadas; ordem de arrays é significativa.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def _canonicalize(value: Any) -> Any:
    if isinstance(value, list):
        return [_canonicalize(item) for item in value]
    if isinstance(value, dict):
        return {key: _canonicalize(value[key]) for key in sorted(value)}
    return value


def canonicalize_flow_json(value: Any) -> str:
    """Serializa a árvore de forma determinística (chaves ordenadas, sem espaços)."""
    return json.dumps(_canonicalize(value), ensure_ascii=False, separators=(",", ":"))


def compute_flow_json_hash(value: Any) -> str:
    """Retorna SHA-256 hex da serialização canônica."""
    canonical = canonicalize_flow_json(value)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
