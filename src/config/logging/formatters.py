"""Formatter JSON (python-json-logger) com campos padronizados."""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Campos presentes em todo log, na ordem de saída
LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON.

    Exemplo de output:
        {
            "asctime": "2026-02-02 10:30:00,123",
            "level": "WARNING",
            "logger": "app.infra.crypto.flow_encryption",
            "message": "flow_decrypt_rejected",
            "correlation_id": "abc-123",
            "service": "whatsapp_flows",
            "status_code": 432
        }
    """
    format_string = " ".join(f"%({field})s" for field in LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
