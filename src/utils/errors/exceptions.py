"""Exceções de infraestrutura compartilhadas entre stores e clientes."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Falha transitória de um backend externo.

    Attributes:
        backend: Nome do backend (ex.: "redis")
        operation: Operação que falhou (ex.: "get_hash")
    """

    backend = "unknown"

    def __init__(self, message: str, *, operation: str = "") -> None:
        super().__init__(message)
        self.operation = operation


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""

    backend = "redis"
