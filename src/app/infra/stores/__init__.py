"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - memory_stores: Cache de hashes de deploy em memória (vida do processo)
    - redis_deploy_store: Cache de hashes de deploy em Redis (compartilhado)
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryDeployHashStore
from app.infra.stores.redis_deploy_store import RedisDeployHashStore

__all__ = [
    # Memory
    "MemoryDeployHashStore",
    # Redis
    "RedisDeployHashStore",
]
