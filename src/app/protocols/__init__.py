"""Protocolos e contratos do core da aplicação."""

from .crypto import (
    FLOW_SERVER_STATUSES,
    FlowMediaDownloadError,
    FlowPayloadDecryptorProtocol,
    FlowServerError,
)
from .deploy_store import DeployHashStoreProtocol, build_deploy_cache_key
from .http_client import GraphApiClientProtocol

__all__ = [
    "FLOW_SERVER_STATUSES",
    "DeployHashStoreProtocol",
    "FlowMediaDownloadError",
    "FlowPayloadDecryptorProtocol",
    "FlowServerError",
    "GraphApiClientProtocol",
    "build_deploy_cache_key",
]
