"""Stores em memória.

Sem persistência entre reinícios: o conteúdo vive enquanto o processo viver.
Pode ser pré-carregado (ex.: a partir de storage persistente) antes do uso.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.protocols.deploy_store import DeployHashStoreProtocol, build_deploy_cache_key

if TYPE_CHECKING:
    from collections.abc import Mapping


class MemoryDeployHashStore(DeployHashStoreProtocol):
    """Cache de hashes de deploy em memória.

    Args:
        initial: Hashes pré-existentes por `(waba_id, flow_name)`
    """

    def __init__(self, initial: Mapping[tuple[str, str], str] | None = None) -> None:
        self._store: dict[str, str] = {}  # "waba_id::flow_name" -> hash hex
        for (waba_id, flow_name), flow_hash in (initial or {}).items():
            self.seed(waba_id, flow_name, flow_hash)

    def seed(self, waba_id: str, flow_name: str, flow_hash: str) -> None:
        """Pré-carrega um hash (sync, para uso no bootstrap)."""
        self._store[build_deploy_cache_key(waba_id, flow_name)] = flow_hash

    async def get_hash(self, waba_id: str, flow_name: str) -> str | None:
        """Retorna o hash implantado ou None."""
        return self._store.get(build_deploy_cache_key(waba_id, flow_name))

    async def set_hash(self, waba_id: str, flow_name: str, flow_hash: str) -> None:
        """Grava o hash implantado."""
        self._store[build_deploy_cache_key(waba_id, flow_name)] = flow_hash

    def __len__(self) -> int:
        return len(self._store)
