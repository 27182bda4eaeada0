"""Conector WhatsApp - adapter de borda para a Meta Graph API.

Este módulo é o único ponto de IO HTTP de saída para o canal WhatsApp.
Responsabilidades:
- HTTP client para Graph API (retry, backoff, erros Meta)
- Classificação de erros da Graph API
"""

from .http_base import HttpClient, HttpClientConfig, HttpError
from .http_client import GraphApiClient, GraphApiTarget, create_graph_api_client
from .meta_errors import GraphApiError, MetaErrorDetail, is_permanent_error, parse_meta_error

__all__ = [
    "GraphApiClient",
    "GraphApiError",
    "GraphApiTarget",
    "HttpClient",
    "HttpClientConfig",
    "HttpError",
    "MetaErrorDetail",
    "create_graph_api_client",
    "is_permanent_error",
    "parse_meta_error",
]
