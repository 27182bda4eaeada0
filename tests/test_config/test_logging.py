"""Testes para config.logging.

Cobre: configure_logging, CorrelationIdFilter, SensitiveFieldFilter,
create_json_formatter.
"""

from __future__ import annotations

import json
import logging

import pytest

from config.logging import (
    DEFAULT_SERVICE_NAME,
    FIELD_RENAME_MAP,
    LOG_FIELDS,
    CorrelationIdFilter,
    SensitiveFieldFilter,
    configure_logging,
    create_json_formatter,
)
from config.logging.config import VALID_LOG_LEVELS
from config.logging.filters import REDACTED


def _record(msg: str = "message", **attrs: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestConfigureLogging:
    """Testes para configure_logging."""

    def test_default_level(self) -> None:
        """Configura logging com nível padrão INFO."""
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_level_is_case_insensitive(self) -> None:
        configure_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_invalid_level_raises(self) -> None:
        """Nível inválido levanta ValueError."""
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="VERBOSE")

    def test_replaces_handlers_and_adds_filters(self) -> None:
        """Substitui handlers existentes por um único handler com filters."""
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]

        configure_logging(correlation_id_getter=lambda: "corr-1")

        assert len(root.handlers) == 1
        filter_types = {type(f) for f in root.handlers[0].filters}
        assert filter_types == {CorrelationIdFilter, SensitiveFieldFilter}

    def test_constants(self) -> None:
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS
        assert DEFAULT_SERVICE_NAME == "whatsapp_flows"


class TestCorrelationIdFilter:
    """Testes para CorrelationIdFilter."""

    def test_adds_correlation_id_and_service(self) -> None:
        record = _record()
        assert CorrelationIdFilter("svc", lambda: "corr-123").filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.service == "svc"

    def test_preserves_explicit_correlation_id(self) -> None:
        """Preserva correlation_id passado via extra."""
        record = _record(correlation_id="explicit-id")
        CorrelationIdFilter("svc", lambda: "from-getter").filter(record)
        assert record.correlation_id == "explicit-id"

    def test_empty_without_getter(self) -> None:
        record = _record()
        CorrelationIdFilter("svc").filter(record)
        assert record.correlation_id == ""


class TestSensitiveFieldFilter:
    """Testes para SensitiveFieldFilter."""

    def test_masks_sensitive_attributes(self) -> None:
        record = _record(flow_token="tok-secret", hmac_key=b"k", status_code=421)
        assert SensitiveFieldFilter().filter(record) is True
        assert record.flow_token == REDACTED
        assert record.hmac_key == REDACTED
        assert record.status_code == 421

    def test_custom_fields(self) -> None:
        record = _record(customer_phone="5511999999999")
        SensitiveFieldFilter(frozenset({"customer_phone"})).filter(record)
        assert record.customer_phone == REDACTED


class TestCreateJsonFormatter:
    """Testes para create_json_formatter."""

    def test_fields_and_renames(self) -> None:
        assert LOG_FIELDS == ("asctime", "levelname", "name", "message", "correlation_id", "service")
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_formats_record_as_json(self) -> None:
        """Formata record como JSON com campos renomeados e extras."""
        record = _record(
            "flow_decrypt_rejected",
            correlation_id="abc-123",
            service="whatsapp_flows",
            status_code=432,
        )
        output = json.loads(create_json_formatter().format(record))

        assert output["message"] == "flow_decrypt_rejected"
        assert output["level"] == "INFO"
        assert output["logger"] == "test.logger"
        assert output["correlation_id"] == "abc-123"
        assert output["status_code"] == 432
