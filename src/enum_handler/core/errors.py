"""
Structured error types for enum-handler.

Every failure raised by the library is an ``EnumHandlerError`` carrying a
category and a structured context (model, attribute, offending value), so
callers can log or report it without parsing the message.

Manifesto:
    - **Typed hierarchy:** one subclass per failure domain
    - **Rich context:** errors know which model/attribute/value was involved
    - **Error chaining:** the original exception is kept as ``cause``
    - **Pythonic catching:** value errors are also ``ValueError``

Architecture:
    ::

        EnumHandlerError (category, context, cause)
        ├── IllegalValueError      (VALIDATION, also ValueError)
        ├── ConditionError         (QUERY, also ValueError)
        ├── UndefinedContextError  (CONTEXT)
        └── EnumDefinitionError    (CONFIG)
            └── KeyAttributeError

Examples:
    >>> error = IllegalValueError("Illegal status value", valid_values=["active"])
    >>> error.with_context(model="User", attribute="status", value="bogus")
    IllegalValueError('Illegal status value', category=VALIDATION)
    >>> error.to_dict()["context"]["attribute"]
    'status'

Tags:
    error-handling, exception-hierarchy, error-context, enum-handler
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    VALIDATION = "VALIDATION"     # Illegal label or code
    CONFIG = "CONFIG"             # Bad enum definition
    CONTEXT = "CONTEXT"           # Polymorphic context missing or unknown
    QUERY = "QUERY"               # Condition could not be rewritten
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only non-None fields are serialized by ``to_dict()``; anything that does
    not fit a named field goes into ``metadata``.

    Attributes:
        model: Name of the model class
        attribute: Enum attribute involved
        value: The offending value (label, code or key)
        context: Polymorphic context name, if any
        metadata: Additional key-value pairs
    """

    model: str | None = None
    attribute: str | None = None
    value: Any = None
    context: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["model", "attribute", "value", "context"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class EnumHandlerError(Exception):
    """
    Base exception for all enum-handler errors.

    Subclasses set ``default_category``; instances may override it.
    ``with_context()`` adds metadata fluently and returns the error so it
    can be raised in the same expression.

    Examples:
        >>> raise EnumDefinitionError("Empty enum").with_context(attribute="status")
        Traceback (most recent call last):
        ...
        EnumDefinitionError: Empty enum
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> EnumHandlerError:
        """
        Add context to this error (fluent API).

        Usage:
            raise IllegalValueError("Illegal value").with_context(
                model="User", attribute="status", value="bogus"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class IllegalValueError(EnumHandlerError, ValueError):
    """
    A label or code that is not part of the enum.

    ``valid_values`` lists what would have been accepted, so the message can
    be rebuilt or shown in a UI.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, valid_values: list[Any] | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.valid_values = list(valid_values or [])

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.valid_values:
            result["valid_values"] = self.valid_values
        return result


class ConditionError(EnumHandlerError, ValueError):
    """A query condition that cannot be translated or rewritten."""

    default_category = ErrorCategory.QUERY


# =============================================================================
# DEFINITION / CONTEXT ERRORS
# =============================================================================


class EnumDefinitionError(EnumHandlerError):
    """An enum definition that is malformed or collides with the model."""

    default_category = ErrorCategory.CONFIG


class KeyAttributeError(EnumDefinitionError):
    """A second, different key attribute was declared for keyed enums."""


class UndefinedContextError(EnumHandlerError):
    """The polymorphic context is blank or has no enum translations."""

    default_category = ErrorCategory.CONTEXT


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "EnumHandlerError",
    "IllegalValueError",
    "ConditionError",
    "EnumDefinitionError",
    "KeyAttributeError",
    "UndefinedContextError",
]
