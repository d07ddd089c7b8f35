"""
Keyed enums: codes whose meaning depends on another attribute.

The typical case is a preferences or settings row: the ``cooking_method``
column holds ``1``, but whether that means ``"braised"`` or ``"poached"``
depends on the row's ``food_type``.

Examples:
    >>> table = KeyedEnumTable.from_definition(
    ...     "cooking_method", "food_type",
    ...     {("fowl", "beef"): {"braised": 1, "roasted": 2}, "egg": {"poached": 1, "fried": 2}},
    ... )
    >>> table.read(1, "egg")
    'poached'
    >>> table.coerce("roasted", "beef")
    2
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from enum_handler.core.errors import IllegalValueError
from enum_handler.core.inflection import dehumanize, humanize, is_blank, normalize_values
from enum_handler.core.table import Choice, _sort_key


@dataclass
class KeyedEnumTable:
    """Per-key label/code mappings for one attribute."""

    attribute: str
    key_attribute: str
    tables: dict[str, dict[str, Any]] = field(default_factory=dict)
    strict: bool = True

    @classmethod
    def from_definition(
        cls,
        attribute: str,
        key_attribute: str,
        key_values: Mapping[Any, Any],
        strict: bool = True,
    ) -> KeyedEnumTable:
        """Expand grouped keys so every key value has its own mapping."""
        tables: dict[str, dict[str, Any]] = {}
        for key, values in key_values.items():
            mapping = normalize_values(values)
            keys = key if isinstance(key, (list, tuple, frozenset)) else [key]
            for k in keys:
                tables[str(k)] = mapping
        return cls(attribute=attribute, key_attribute=key_attribute, tables=tables, strict=strict)

    def merge(self, other: KeyedEnumTable) -> None:
        self.tables.update(other.tables)
        self.strict = other.strict

    @property
    def keys(self) -> list[str]:
        return list(self.tables)

    @property
    def labels(self) -> list[str]:
        labels: list[str] = []
        for mapping in self.tables.values():
            labels.extend(label for label in mapping if label not in labels)
        return labels

    def table_for(self, key: Any) -> dict[str, Any] | None:
        if key is None:
            return None
        return self.tables.get(str(key))

    def validate(self, key: Any, label: Any) -> bool:
        """False if ``key`` is not keyed; raise for an unknown label; else True."""
        mapping = self.table_for(key)
        if mapping is None:
            return False
        if dehumanize(label) not in mapping:
            error = IllegalValueError(
                f"Illegal {self.attribute} value specified ({label!r}) - "
                f"valid values are {', '.join(mapping)}",
                valid_values=list(mapping),
            )
            raise error.with_context(attribute=self.attribute, value=label, key=str(key))
        return True

    def code_for(self, label: Any, key: Any) -> Any:
        if self.validate(key, label):
            return self.table_for(key)[dehumanize(label)]
        return label

    def has_code(self, code: Any) -> bool:
        """True if ``code`` is stored under any key."""
        if isinstance(code, bool):
            return False
        return any(code == value for mapping in self.tables.values() for value in mapping.values())

    def label_for(self, code: Any, key: Any) -> str | None:
        mapping = self.table_for(key)
        if mapping is None:
            return None
        for label, value in mapping.items():
            if value == code:
                return label
        return None

    def choices_for_key(self, key: Any) -> list[Choice]:
        mapping = self.table_for(key) or {}
        return sorted(
            (Choice(code, label) for label, code in mapping.items()),
            key=lambda choice: _sort_key(choice.id),
        )

    def choices_list_for_key(self, key: Any, humanize: bool = False) -> list[str]:
        labels = list(self.table_for(key) or {})
        if humanize:
            labels = [_humanize(label) for label in labels]
        return labels

    def read(self, raw: Any, key_raw: Any) -> Any:
        if self.table_for(key_raw) is None:
            return raw
        label = self.label_for(raw, key_raw)
        return raw if label is None else label

    def coerce(self, value: Any, key_raw: Any) -> Any:
        if is_blank(value):
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return value

        mapping = self.table_for(key_raw)
        if mapping is None:
            return value
        label = dehumanize(value)
        if label in mapping:
            return mapping[label]
        if self.strict:
            self.validate(key_raw, value)
        return value


def _humanize(label: Any) -> str:
    return humanize(label)


__all__ = ["KeyedEnumTable"]
