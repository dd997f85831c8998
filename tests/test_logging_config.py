"""
Tests for logging configuration.
"""
import logging

import pytest

from casa_nala.logging_config import RequestIDFilter, request_id_var, resolve_level, setup_logging


class TestLoggingConfiguration:
    """Test logging setup and configuration."""

    def test_setup_logging_default_level(self, monkeypatch):
        """setup_logging defaults to INFO."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        setup_logging()
        assert logging.getLogger("casa_nala").level == logging.INFO

    def test_setup_logging_respects_env_var(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logging()
        assert logging.getLogger("casa_nala").level == logging.WARNING

    def test_setup_logging_explicit_level(self):
        setup_logging(level="ERROR")
        assert logging.getLogger("casa_nala").level == logging.ERROR

    def test_setup_logging_invalid_level_defaults_to_info(self):
        setup_logging(level="INVALID_LEVEL")
        assert logging.getLogger("casa_nala").level == logging.INFO

    def test_third_party_noise_reduced_outside_debug(self):
        setup_logging(level="INFO")
        assert logging.getLogger("openai").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_store_failures_are_logged(self, db_session, order_payload, caplog):
        """A failed order write is logged with its traceback."""
        from unittest.mock import patch
        from sqlalchemy.exc import OperationalError
        from casa_nala.services.orders import create_order

        setup_logging(level="INFO")
        with patch.object(db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("x"))):
            with caplog.at_level(logging.ERROR, logger="casa_nala"):
                create_order(db_session, order_payload())

        records = [r for r in caplog.records if r.name == "casa_nala.services.orders"]
        assert records and records[0].exc_info is not None
        assert records[0].getMessage() == "Error creating order"


class TestRequestID:

    def test_filter_uses_current_request_id(self):
        record = logging.LogRecord("casa_nala", logging.INFO, __file__, 1, "hola", None, None)
        token = request_id_var.set("req-123")
        try:
            RequestIDFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "req-123"

    def test_filter_outside_request(self):
        record = logging.LogRecord("casa_nala", logging.INFO, __file__, 1, "hola", None, None)
        RequestIDFilter().filter(record)
        assert record.request_id == "-"

    def test_response_echoes_request_id(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "abc-1"})
        assert resp.headers["X-Request-ID"] == "abc-1"

    def test_response_gets_generated_request_id(self, client):
        assert client.get("/health").headers["X-Request-ID"]

    @pytest.mark.parametrize("value,expected", [
        ("debug", "DEBUG"), (" error ", "ERROR"), ("verbose", "INFO"),
    ])
    def test_resolve_level(self, value, expected):
        assert resolve_level(value) == expected
