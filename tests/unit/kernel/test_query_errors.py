"""Unit tests for the error hierarchy and query error messages."""

from __future__ import annotations

import json

import pytest

from mp_docstore.config.validation import ConfigError
from mp_docstore.kernel.errors import (
    ApplicationError,
    BadSortFormatError,
    BaseError,
    DomainError,
    InvalidFilterFormatError,
    NonFilterableFieldError,
    NotFoundError,
    QueryError,
    ValidationError,
)


# ---------------------------------------------------------------------------
# BaseError
# ---------------------------------------------------------------------------


class TestBaseError:
    def test_default_code(self) -> None:
        assert BaseError("boom").code == "base_error"

    def test_explicit_code_wins(self) -> None:
        assert BaseError("boom", code="custom").code == "custom"

    def test_to_dict(self) -> None:
        err = BaseError("boom", detail={"k": 1})
        assert err.to_dict() == {"code": "base_error", "message": "boom", "detail": {"k": 1}}

    def test_str_is_json(self) -> None:
        payload = json.loads(str(BaseError("boom")))
        assert payload["message"] == "boom"

    def test_cause_is_chained(self) -> None:
        original = ValueError("inner")
        err = BaseError("outer", cause=original)
        assert err.__cause__ is original
        assert "inner" in err.to_dict()["cause"]


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            InvalidFilterFormatError("x"),
            NonFilterableFieldError(["x"]),
            BadSortFormatError(),
        ],
    )
    def test_query_errors_are_validation_errors(self, error: BaseError) -> None:
        assert isinstance(error, QueryError)
        assert isinstance(error, ValidationError)
        assert isinstance(error, DomainError)

    def test_not_found_is_domain_error(self) -> None:
        assert isinstance(NotFoundError("Note", "1"), DomainError)

    def test_config_error_is_application_error(self) -> None:
        assert isinstance(ConfigError("bad"), ApplicationError)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class TestMessages:
    def test_invalid_filter_format(self) -> None:
        err = InvalidFilterFormatError("unexpected token", operator="between")
        assert err.message == "Invalid filter format: unexpected token"
        assert err.operator == "between"
        assert err.code == "invalid_filter_format"

    def test_single_non_filterable_field(self) -> None:
        err = NonFilterableFieldError(["secret"])
        assert err.message == "Field is not filterable: secret"
        assert err.fields == ["secret"]
        assert err.errors == [{"field": "secret", "reason": "not_filterable"}]

    def test_many_non_filterable_fields(self) -> None:
        err = NonFilterableFieldError(["secret", "token"])
        assert err.message == "Fields are not filterable: secret, token"

    def test_bad_sort_format_without_reason(self) -> None:
        assert BadSortFormatError().message == "Bad sort format"

    def test_bad_sort_format_with_reason(self) -> None:
        assert BadSortFormatError("empty sort token").message == "Bad sort format: empty sort token"

    def test_not_found_with_identifier(self) -> None:
        err = NotFoundError("notes", "abc")
        assert err.message == "notes 'abc' not found"
        assert err.resource == "notes"
        assert err.identifier == "abc"
        assert err.detail == {"resource": "notes", "id": "abc"}

    def test_not_found_without_identifier(self) -> None:
        assert NotFoundError("notes").message == "notes not found"

    def test_validation_error_to_dict_has_errors(self) -> None:
        err = ValidationError("bad", errors=[{"field": "a"}])
        assert err.to_dict()["errors"] == [{"field": "a"}]
