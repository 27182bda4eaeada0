"""Protocolo do cache de hashes de deploy de Flows.

O deploy compara o hash canônico do Flow JSON com o último hash enviado
para `(waba_id, flow_name)` e pula o upload quando não houve mudança.

Concorrência: a sequência ler-comparar-gravar não é atômica. Chamadores
que precisam de exatamente um upload por mudança devem serializar deploys
da mesma chave ou usar um store com lock próprio.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


def build_deploy_cache_key(waba_id: str, flow_name: str) -> str:
    """Chave canônica `waba_id::flow_name`."""
    return f"{waba_id}::{flow_name}"


class DeployHashStoreProtocol(ABC):
    """Contrato para persistência do último hash implantado por Flow."""

    @abstractmethod
    async def get_hash(self, waba_id: str, flow_name: str) -> str | None:
        """Retorna o último hash implantado, ou None se não houver."""

    @abstractmethod
    async def set_hash(self, waba_id: str, flow_name: str, flow_hash: str) -> None:
        """Grava (ou sobrescreve) o hash implantado."""
