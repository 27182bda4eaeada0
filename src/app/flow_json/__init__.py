"""Flow JSON: conversão de chaves autoria <-> wire e hash canônico.

Módulo puro (sem I/O além do carregamento único das tabelas YAML).
Usado pelo endpoint de data exchange e pelo deploy de Flows.
"""

from .canonical import canonicalize_flow_json, compute_flow_json_hash
from .case import (
    FlowJsonCaseError,
    from_wire_case,
    from_wire_key_name,
    is_component_node,
    to_wire_case,
    to_wire_key_name,
)
from .key_tables import FlowJsonKeyTables, FlowJsonKeyTablesError, get_key_tables

__all__ = [
    "FlowJsonCaseError",
    "FlowJsonKeyTables",
    "FlowJsonKeyTablesError",
    "canonicalize_flow_json",
    "compute_flow_json_hash",
    "from_wire_case",
    "from_wire_key_name",
    "get_key_tables",
    "is_component_node",
    "to_wire_case",
    "to_wire_key_name",
]
