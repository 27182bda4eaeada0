"""Agregador de settings do canal de WhatsApp Flows.

Re-exporta as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.flows import (
    DeployStoreBackend,
    FlowsSettings,
    get_flows_settings,
)
from config.settings.whatsapp import (
    GRAPH_API_BASE_URL,
    GRAPH_API_VERSION,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    # Constants
    "GRAPH_API_BASE_URL",
    "GRAPH_API_VERSION",
    # Flows
    "DeployStoreBackend",
    "FlowsSettings",
    # Channel
    "WhatsAppSettings",
    "get_flows_settings",
    "get_whatsapp_settings",
]
