"""Unit tests for structlog configuration and sensitive-field redaction."""

from __future__ import annotations

import io
import json
import logging
from typing import Iterator

import pytest
import structlog

from mp_docstore.observability.logging import (
    DEFAULT_SENSITIVE_FIELDS,
    JsonLoggerFactory,
    SensitiveFieldsFilter,
    get_logger,
)


# ---------------------------------------------------------------------------
# SensitiveFieldsFilter
# ---------------------------------------------------------------------------


class TestSensitiveFieldsFilter:
    def test_defaults_cover_password(self) -> None:
        assert "password" in DEFAULT_SENSITIVE_FIELDS

    def test_redact_is_case_insensitive(self) -> None:
        out = SensitiveFieldsFilter().redact({"Password": "x", "title": "t"})
        assert out == {"Password": "[REDACTED]", "title": "t"}

    def test_redact_deep(self) -> None:
        data = {"filter": {"and": {"token": "abc"}}, "items": [{"secret": 1}, 2]}
        out = SensitiveFieldsFilter().redact_deep(data)
        assert out == {"filter": {"and": {"token": "[REDACTED]"}}, "items": [{"secret": "[REDACTED]"}, 2]}

    def test_custom_fields(self) -> None:
        out = SensitiveFieldsFilter(frozenset({"ssn"})).redact({"ssn": "1", "password": "p"})
        assert out == {"ssn": "[REDACTED]", "password": "p"}


# ---------------------------------------------------------------------------
# JsonLoggerFactory / get_logger
# ---------------------------------------------------------------------------


@pytest.fixture
def json_logging() -> Iterator[io.StringIO]:
    stream = io.StringIO()
    JsonLoggerFactory.configure(logging.DEBUG, stream=stream)
    yield stream
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


class TestJsonLogging:
    def test_emits_json_with_redaction(self, json_logging: io.StringIO) -> None:
        get_logger("docstore.test", collection="notes").info("repository.created", password="hunter2")
        line = json_logging.getvalue().strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "repository.created"
        assert payload["collection"] == "notes"
        assert payload["password"] == "[REDACTED]"
        assert payload["level"] == "info"

    def test_get_logger_binds_initial_values(self) -> None:
        logger = get_logger(__name__, component="repo")
        assert logger is not None
