"""Tests for enum_handler.core.errors."""

from __future__ import annotations

import pytest

from enum_handler.core.errors import (
    ConditionError,
    EnumDefinitionError,
    EnumHandlerError,
    ErrorCategory,
    ErrorContext,
    IllegalValueError,
    KeyAttributeError,
    UndefinedContextError,
)


class TestErrorContext:
    """ErrorContext serialization."""

    def test_to_dict_skips_none(self):
        ctx = ErrorContext(model="User", attribute="status")
        assert ctx.to_dict() == {"model": "User", "attribute": "status"}

    def test_metadata_is_merged(self):
        ctx = ErrorContext(attribute="status", metadata={"key": "egg"})
        assert ctx.to_dict() == {"attribute": "status", "key": "egg"}


class TestCategories:
    """Each subclass carries its default category."""

    @pytest.mark.parametrize(
        "error_class, category",
        [
            (EnumHandlerError, ErrorCategory.INTERNAL),
            (IllegalValueError, ErrorCategory.VALIDATION),
            (ConditionError, ErrorCategory.QUERY),
            (EnumDefinitionError, ErrorCategory.CONFIG),
            (KeyAttributeError, ErrorCategory.CONFIG),
            (UndefinedContextError, ErrorCategory.CONTEXT),
        ],
    )
    def test_default_category(self, error_class, category):
        assert error_class("boom").category is category

    def test_category_override(self):
        error = EnumHandlerError("boom", category=ErrorCategory.QUERY)
        assert error.category is ErrorCategory.QUERY

    def test_value_errors_are_value_errors(self):
        assert issubclass(IllegalValueError, ValueError)
        assert issubclass(ConditionError, ValueError)

    def test_key_attribute_error_is_definition_error(self):
        with pytest.raises(EnumDefinitionError):
            raise KeyAttributeError("second key")


class TestWithContext:
    """Fluent context API."""

    def test_returns_self(self):
        error = IllegalValueError("bad")
        assert error.with_context(attribute="status") is error

    def test_known_fields_and_metadata(self):
        error = IllegalValueError("bad").with_context(model="User", value="bogus", key="egg")
        assert error.context.model == "User"
        assert error.context.value == "bogus"
        assert error.context.metadata == {"key": "egg"}

    def test_raise_in_one_expression(self):
        with pytest.raises(EnumDefinitionError, match="Empty enum") as info:
            raise EnumDefinitionError("Empty enum").with_context(attribute="status")
        assert info.value.context.attribute == "status"


class TestSerialization:
    """to_dict and repr."""

    def test_to_dict(self):
        error = IllegalValueError("bad", valid_values=["active"]).with_context(attribute="status")
        assert error.to_dict() == {
            "error_type": "IllegalValueError",
            "message": "bad",
            "category": "VALIDATION",
            "context": {"attribute": "status"},
            "valid_values": ["active"],
        }

    def test_cause_is_chained(self):
        cause = KeyError("x")
        error = ConditionError("wrapped", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == str(cause)

    def test_repr(self):
        assert repr(UndefinedContextError("no ctx")) == "UndefinedContextError('no ctx', category=CONTEXT)"
