"""Conversão de chaves do Flow JSON entre autoria (camelCase) e wire (Meta).

A Meta exige snake_case em chaves estruturais de topo e kebab-case nas
propriedades de componentes. O desenvolvedor escreve tudo em camelCase;
este módulo traduz nos dois sentidos sem tocar em valores nem em ordem
de arrays.

Prioridade autoria -> wire, por chave:
1. preserve set (chaves de protocolo)
2. tabelas de override (underscore/kebab)
3. constantes (MAIUSCULAS_COM_DIGITOS)
4. dentro de componente: camelCase -> kebab-case
5. sem alteração
"""

from __future__ import annotations

import logging
import re
from typing import Any

from app.flow_json.key_tables import FlowJsonKeyTables, get_key_tables

logger = logging.getLogger(__name__)

_CONSTANT_KEY_RE = re.compile(r"^[A-Z0-9_]+$")
_HAS_UPPER_RE = re.compile(r"[A-Z]")
_COMPONENT_TYPE_RE = re.compile(r"^[A-Z]")


class FlowJsonCaseError(ValueError):
    """Chave de autoria já em formato wire (snake/kebab) no modo estrito."""

    def __init__(self, key: str, suggestion: str, path: str = "") -> None:
        location = f" at {path}" if path else ""
        super().__init__(
            f'Flow JSON authoring should use camelCase key "{suggestion}" '
            f'instead of "{key}"{location}. Please update your source.'
        )
        self.key = key
        self.suggestion = suggestion
        self.path = path


def is_component_node(node: dict[str, Any]) -> bool:
    """Indica se o objeto é um componente de layout (ex.: `Dropdown`, `Footer`).

    Heurística estrutural: componente tem `type` string iniciando em maiúscula.
    """
    node_type = node.get("type")
    return isinstance(node_type, str) and bool(_COMPONENT_TYPE_RE.match(node_type))


def camel_to_kebab(key: str) -> str:
    """`onSelectAction` -> `on-select-action`; `maxURLSize` -> `max-url-size`."""
    hyphenated = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", key)
    hyphenated = re.sub(r"([A-Z])([A-Z][a-z])", r"\1-\2", hyphenated)
    return hyphenated.lower()


def suggest_camel_case(key: str) -> str:
    """Sugere a forma camelCase de uma chave snake/kebab."""
    camel = re.sub(r"[-_]+([a-z0-9])", lambda m: m.group(1).upper(), key, flags=re.IGNORECASE)
    if camel[:1].isupper():
        camel = camel[0].lower() + camel[1:]
    return camel


def _is_dunder(key: str) -> bool:
    return key.startswith("__") and key.endswith("__")


def _map_authoring_key(
    key: str,
    is_component: bool,
    tables: FlowJsonKeyTables,
) -> tuple[str, bool]:
    """Retorna (chave wire, casou alguma regra)."""
    if key in tables.preserve_keys:
        return key, True
    if key in tables.underscore_keys:
        return tables.underscore_keys[key], True
    if key in tables.kebab_keys:
        return tables.kebab_keys[key], True
    if _CONSTANT_KEY_RE.match(key):
        return key, True
    if is_component and _HAS_UPPER_RE.search(key):
        return camel_to_kebab(key), True
    # Chave sem maiúscula é palavra única: idêntica nos dois formatos.
    return key, not _HAS_UPPER_RE.search(key)


def _map_wire_key(key: str, tables: FlowJsonKeyTables) -> str:
    if key in tables.reverse_underscore_keys:
        return tables.reverse_underscore_keys[key]
    if key in tables.reverse_kebab_keys:
        return tables.reverse_kebab_keys[key]
    if _is_dunder(key):
        return key
    if "-" in key:
        return re.sub(r"-([a-z])", lambda m: m.group(1).upper(), key)
    if "_" in key:
        return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), key)
    return key


def to_wire_key_name(key: str, *, component: bool = False) -> str:
    """Traduz uma única chave de autoria para wire."""
    wire_key, _ = _map_authoring_key(key, component, get_key_tables())
    return wire_key


def from_wire_key_name(key: str) -> str:
    """Traduz uma única chave wire para autoria."""
    return _map_wire_key(key, get_key_tables())


def _should_enforce_camel(key: str, tables: FlowJsonKeyTables) -> bool:
    if key in tables.strict_ignore_keys or _is_dunder(key):
        return False
    return "_" in key or "-" in key


def _find_wire_cased_key(
    value: Any,
    tables: FlowJsonKeyTables,
    path: str = "$",
) -> tuple[str, str] | None:
    """Busca a primeira chave snake/kebab na árvore. Retorna (chave, caminho)."""
    if isinstance(value, list):
        for index, item in enumerate(value):
            found = _find_wire_cased_key(item, tables, f"{path}[{index}]")
            if found is not None:
                return found
        return None
    if isinstance(value, dict):
        for key, item in value.items():
            if _should_enforce_camel(key, tables):
                return key, path
            found = _find_wire_cased_key(item, tables, f"{path}.{key}")
            if found is not None:
                return found
    return None


def _to_wire(value: Any, tables: FlowJsonKeyTables, unmapped: set[str]) -> Any:
    if isinstance(value, list):
        return [_to_wire(item, tables, unmapped) for item in value]
    if isinstance(value, dict):
        is_component = is_component_node(value)
        result: dict[str, Any] = {}
        for key, item in value.items():
            wire_key, matched = _map_authoring_key(key, is_component, tables)
            if not matched:
                unmapped.add(key)
            result[wire_key] = _to_wire(item, tables, unmapped)
        return result
    return value


def to_wire_case(value: Any, *, strict: bool = True) -> Any:
    """Converte árvore de autoria (camelCase) para o formato wire da Meta.

    Args:
        value: Árvore JSON (dict/list/escalares) em camelCase
        strict: Rejeita chaves já em snake/kebab-case antes de traduzir

    Returns:
        Nova árvore com chaves no formato wire (entrada não é alterada)

    Raises:
        FlowJsonCaseError: Em modo estrito, se houver chave snake/kebab
    """
    tables = get_key_tables()
    if strict:
        found = _find_wire_cased_key(value, tables)
        if found is not None:
            key, path = found
            raise FlowJsonCaseError(key, suggest_camel_case(key), path)

    unmapped: set[str] = set()
    result = _to_wire(value, tables, unmapped)
    if unmapped:
        # Sem regra conhecida: seguem em camelCase para a Meta.
        logger.warning(
            "flow_json_unmapped_keys",
            extra={"component": "flow_json", "keys": sorted(unmapped)},
        )
    return result


def from_wire_case(value: Any) -> Any:
    """Converte árvore no formato wire da Meta para camelCase de autoria.

    Não há modo estrito: qualquer entrada wire é aceita.
    """
    tables = get_key_tables()

    def _transform(node: Any) -> Any:
        if isinstance(node, list):
            return [_transform(item) for item in node]
        if isinstance(node, dict):
            return {_map_wire_key(key, tables): _transform(item) for key, item in node.items()}
        return node

    return _transform(value)
