"""Rotas do canal WhatsApp."""

from api.routes.whatsapp.flows import FLOW_ENDPOINT_PATH, create_flows_router
from api.routes.whatsapp.router import create_whatsapp_router

__all__ = ["FLOW_ENDPOINT_PATH", "create_flows_router", "create_whatsapp_router"]
