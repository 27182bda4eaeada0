"""Tabelas estáticas de mapeamento de chaves do Flow JSON.

As tabelas vivem em `flow_json_keys.yaml` (dado, não lógica) e são
carregadas uma única vez por processo. O resultado é imutável.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_KEY_TABLES_PATH = Path(__file__).resolve().parent / "flow_json_keys.yaml"


class FlowJsonKeyTablesError(Exception):
    """Erro ao carregar as tabelas de chaves do Flow JSON."""


@dataclass(frozen=True, slots=True)
class FlowJsonKeyTables:
    """Tabelas de override autoria <-> wire.

    Attributes:
        underscore_keys: camelCase -> snake_case (chaves de topo)
        kebab_keys: camelCase -> kebab-case (propriedades de componentes)
        reverse_underscore_keys: snake_case -> camelCase (derivada)
        reverse_kebab_keys: kebab-case -> camelCase (derivada)
        preserve_keys: chaves que nunca são transformadas
        strict_ignore_keys: chaves liberadas no modo estrito
    """

    underscore_keys: Mapping[str, str]
    kebab_keys: Mapping[str, str]
    reverse_underscore_keys: Mapping[str, str]
    reverse_kebab_keys: Mapping[str, str]
    preserve_keys: frozenset[str]
    strict_ignore_keys: frozenset[str]


def _read_mapping(raw: dict[str, Any], section: str) -> dict[str, str]:
    value = raw.get(section) or {}
    if not isinstance(value, dict):
        raise FlowJsonKeyTablesError(f"Seção '{section}' deve ser um mapeamento")
    return {str(key): str(wire) for key, wire in value.items()}


def _read_set(raw: dict[str, Any], section: str) -> frozenset[str]:
    value = raw.get(section) or []
    if not isinstance(value, list):
        raise FlowJsonKeyTablesError(f"Seção '{section}' deve ser uma lista")
    return frozenset(str(item) for item in value)


def build_key_tables(raw: dict[str, Any]) -> FlowJsonKeyTables:
    """Monta as tabelas a partir do conteúdo bruto do YAML.

    Args:
        raw: Dict com as seções do arquivo de tabelas

    Returns:
        FlowJsonKeyTables imutável com as tabelas reversas derivadas

    Raises:
        FlowJsonKeyTablesError: Se alguma seção tiver formato inválido
    """
    underscore = _read_mapping(raw, "underscore_keys")
    kebab = _read_mapping(raw, "kebab_keys")
    return FlowJsonKeyTables(
        underscore_keys=MappingProxyType(underscore),
        kebab_keys=MappingProxyType(kebab),
        reverse_underscore_keys=MappingProxyType({wire: camel for camel, wire in underscore.items()}),
        reverse_kebab_keys=MappingProxyType({wire: camel for camel, wire in kebab.items()}),
        preserve_keys=_read_set(raw, "preserve_keys"),
        strict_ignore_keys=_read_set(raw, "strict_ignore_keys"),
    )


@lru_cache(maxsize=1)
def get_key_tables() -> FlowJsonKeyTables:
    """Retorna as tabelas de chaves (cached, process-wide).

    Raises:
        FlowJsonKeyTablesError: Se o arquivo não existir ou for inválido
    """
    try:
        with _KEY_TABLES_PATH.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise FlowJsonKeyTablesError(f"Arquivo de tabelas ausente: {_KEY_TABLES_PATH.name}") from exc
    except yaml.YAMLError as exc:
        raise FlowJsonKeyTablesError(f"YAML de tabelas inválido: {exc}") from exc

    if not isinstance(raw, dict):
        raise FlowJsonKeyTablesError("YAML de tabelas deve ser um dicionário")

    tables = build_key_tables(raw)
    logger.debug(
        "flow_json_key_tables_loaded",
        extra={
            "underscore_keys": len(tables.underscore_keys),
            "kebab_keys": len(tables.kebab_keys),
            "preserve_keys": len(tables.preserve_keys),
        },
    )
    return tables
