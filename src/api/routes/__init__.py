"""Rotas HTTP da API.

- routes/whatsapp/: endpoint de data exchange de Flows
- routes/health/: health checks e readiness
- router.py: registra os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
