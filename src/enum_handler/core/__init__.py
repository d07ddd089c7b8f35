"""ORM-independent building blocks: translation tables, registry, errors, settings, logging."""

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
from enum_handler.core.inflection import dehumanize, humanize, normalize_values, pluralize
from enum_handler.core.keyed import KeyedEnumTable
from enum_handler.core.registry import EnumRegistry, clear_model_registry, model_for_table, register_model
from enum_handler.core.table import Choice, EnumTable

__all__ = [
    "Choice",
    "ConditionError",
    "EnumDefinitionError",
    "EnumHandlerError",
    "EnumRegistry",
    "EnumTable",
    "ErrorCategory",
    "ErrorContext",
    "IllegalValueError",
    "KeyAttributeError",
    "KeyedEnumTable",
    "UndefinedContextError",
    "clear_model_registry",
    "dehumanize",
    "humanize",
    "model_for_table",
    "normalize_values",
    "pluralize",
    "register_model",
]
