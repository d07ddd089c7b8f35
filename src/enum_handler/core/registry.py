"""
Per-class enum state and the table-name -> model registry.

Every enum-handled class owns one ``EnumRegistry``: the translation tables
for each (context, attribute), the instance attribute that stores each raw
code, keyed enum tables and the names of the members generated for them.

The module-level model registry lets condition sanitizing resolve a joined
table name (``{"users": {"status": "active"}}``) back to its model class.

Examples:
    >>> reg = EnumRegistry("User")
    >>> reg.register(EnumTable("status", ["active", "terminated"]), raw_key="_status")
    >>> reg.defined_for("status")
    True
    >>> reg.table("status").code_for("active")
    'active'
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from enum_handler.core.errors import UndefinedContextError
from enum_handler.core.keyed import KeyedEnumTable
from enum_handler.core.table import EnumTable

DEFAULT_CONTEXT = ""


@dataclass
class EnumRegistry:
    """Everything ``define_enum`` records about one class."""

    owner: str
    tables: dict[str, dict[str, EnumTable]] = field(default_factory=dict)
    attribute_contexts: dict[str, str] = field(default_factory=dict)
    raw_keys: dict[str, str] = field(default_factory=dict)
    keyed: dict[str, KeyedEnumTable] = field(default_factory=dict)
    key_attribute: str | None = None
    polymorphic_attribute: str | None = None
    generated: dict[str, str] = field(default_factory=dict)

    @property
    def has_enums(self) -> bool:
        return bool(self.tables) or bool(self.keyed)

    def register(self, table: EnumTable, raw_key: str) -> None:
        self.tables.setdefault(table.context, {})[table.attribute] = table
        self.attribute_contexts[table.attribute] = table.context
        self.raw_keys[table.attribute] = raw_key

    def register_keyed(self, table: KeyedEnumTable, raw_key: str) -> KeyedEnumTable:
        existing = self.keyed.get(table.attribute)
        if existing is not None:
            existing.merge(table)
            table = existing
        self.keyed[table.attribute] = table
        self.key_attribute = table.key_attribute
        self.raw_keys[table.attribute] = raw_key
        return table

    def defined_for(self, attribute: str) -> bool:
        return self.table(attribute) is not None

    def contexts_for(self, attribute: str) -> list[str]:
        return [ctx for ctx, tables in self.tables.items() if attribute in tables]

    def table(self, attribute: str, context: str | None = None) -> EnumTable | None:
        if context is None:
            context = self.attribute_contexts.get(attribute)
            if context is None:
                return None
        return self.tables.get(context, {}).get(attribute)

    def require_table(self, attribute: str, context: str | None = None) -> EnumTable:
        """Like ``table`` but raise when the context has no translations."""
        table = self.table(attribute, context)
        if table is None:
            ctx = self.attribute_contexts.get(attribute, DEFAULT_CONTEXT) if context is None else context
            raise UndefinedContextError(
                f"Looks like the enum translation context {ctx!r} has not yet been defined "
                f"for {self.owner}.{attribute}"
            ).with_context(model=self.owner, attribute=attribute, context=ctx)
        return table

    def copy(self, owner: str) -> EnumRegistry:
        clone = copy.deepcopy(self)
        clone.owner = owner
        return clone


# =============================================================================
# Table name -> model registry
# =============================================================================

_MODELS_BY_TABLE: dict[str, type] = {}


def unquote(name: str) -> str:
    """Strip one level of matching quotes: ``"users"``, `` `users` ``, ``'users'``."""
    if len(name) >= 2 and name[0] in "'\"`" and name[-1] == name[0]:
        return name[1:-1]
    if len(name) >= 2 and name[0] == "[" and name[-1] == "]":
        return name[1:-1]
    return name


def register_model(model: type) -> None:
    table_name = getattr(model, "__tablename__", None)
    if isinstance(table_name, str):
        _MODELS_BY_TABLE[table_name] = model


def model_for_table(table_name: str) -> Any:
    return _MODELS_BY_TABLE.get(unquote(table_name))


def clear_model_registry() -> None:
    """Forget every registered model (primarily for testing)."""
    _MODELS_BY_TABLE.clear()


__all__ = [
    "DEFAULT_CONTEXT",
    "EnumRegistry",
    "register_model",
    "model_for_table",
    "clear_model_registry",
    "unquote",
]
