"""Normalização de `validation_errors` retornados pela Meta no upload de Flows."""

from __future__ import annotations

import re
from typing import Any

from app.flow_json import from_wire_key_name

from .models import FlowValidationError, FlowValidationPointer

_PATH_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]+")


def extract_validation_errors(source: dict[str, Any]) -> Any:
    """Lê `validation_errors` (wire) ou `validationErrors` (autoria)."""
    if source.get("validation_errors") is not None:
        return source["validation_errors"]
    return source.get("validationErrors")


def _map_pointer(pointer: dict[str, Any]) -> FlowValidationPointer:
    path = pointer.get("path")
    extra = {from_wire_key_name(key): value for key, value in pointer.items() if key != "path"}
    return FlowValidationPointer(path=None if path is None else str(path), extra=extra)


def derive_hint(pointers: tuple[FlowValidationPointer, ...]) -> str | None:
    """Sugere a chave camelCase quando o erro aponta para uma chave wire.

    Ex.: path `screens[0].layout.children[0].data-source` ->
    "Use dataSource (camelCase). We map it to data-source."
    """
    for pointer in pointers:
        if not pointer.path:
            continue
        segments = _PATH_SEGMENT_RE.findall(pointer.path)
        if not segments:
            continue
        segment = segments[-1]
        if "-" not in segment and "_" not in segment:
            continue
        camel = from_wire_key_name(segment)
        if camel == segment:
            continue
        return f"Use {camel} (camelCase). We map it to {segment}."
    return None


def normalize_validation_errors(raw: Any) -> tuple[FlowValidationError, ...]:
    """Converte a lista bruta da Meta em FlowValidationError (camelCase).

    Entradas que não são objetos são descartadas.
    """
    if not isinstance(raw, list):
        return ()

    normalized: list[FlowValidationError] = []
    for candidate in raw:
        if not isinstance(candidate, dict):
            continue

        error_code = candidate.get("error")
        error_type = candidate.get("error_type", candidate.get("errorType"))
        message = candidate.get("message")
        raw_pointers = candidate.get("pointers")
        pointers = (
            tuple(_map_pointer(p) for p in raw_pointers if isinstance(p, dict))
            if isinstance(raw_pointers, list)
            else ()
        )
        extra = {
            from_wire_key_name(key): value
            for key, value in candidate.items()
            if key not in {"error", "error_type", "errorType", "message", "pointers"}
        }
        normalized.append(
            FlowValidationError(
                error=error_code if isinstance(error_code, str) else str(error_code or ""),
                error_type=None if error_type is None else str(error_type),
                message=None if message is None else str(message),
                pointers=pointers,
                hint=derive_hint(pointers),
                extra=extra,
            )
        )
    return tuple(normalized)
