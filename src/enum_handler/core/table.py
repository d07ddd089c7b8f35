"""
The label <-> code translation table for a single enum attribute.

An ``EnumTable`` knows everything about one attribute in one context: the
label to code mapping, the named sets that group labels, whether
assignments are validated (``strict``) and what to report when the stored
value is NULL (``nil``). The ORM layer never looks at the mapping directly;
reads, writes and query operands all go through the methods below.

Manifesto:
    Applications talk in labels (``"active"``), the database stores codes
    (``0`` or ``"active"``). Sets (``"inactive" -> ["suspended", "terminated"]``)
    let callers query or test a group of labels as if it were one. Sets are
    never a storable value.

Examples:
    >>> table = EnumTable("status", {"active": 0, "suspended": 1, "terminated": 2},
    ...                   sets={"inactive": ["suspended", "terminated"]})
    >>> table.code_for("active")
    0
    >>> table.code_for("inactive")
    [1, 2]
    >>> table.read(2)
    'terminated'
    >>> table.coerce("Suspended")
    1

Tags:
    enum, translation-table, sets, validation, enum-handler
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from enum_handler.core.errors import EnumDefinitionError, IllegalValueError
from enum_handler.core.inflection import dehumanize, humanize, is_blank, normalize_values


class Choice(NamedTuple):
    """A (code, label) pair, e.g. for building select boxes."""

    id: Any
    name: str


def _unique(items: Iterable[Any]) -> list[Any]:
    result: list[Any] = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


def _sort_key(value: Any) -> tuple[str, Any]:
    # Codes of one enum normally share a type; fall back to text for mixed codes.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return ("", value)
    return ("~", str(value))


@dataclass
class EnumTable:
    """Label/code mapping plus sets and options for one attribute."""

    attribute: str
    values: dict[str, Any]
    sets: dict[str, list[str]] = field(default_factory=dict)
    strict: bool = True
    nil: Any = None
    context: str = ""
    primary: bool = False

    def __post_init__(self) -> None:
        self.values = normalize_values(self.values)
        self.sets = {str(name): list(members) for name, members in (self.sets or {}).items()}

        clashes = sorted(set(self.sets) & set(self.values))
        if clashes:
            raise EnumDefinitionError(
                f"Set names {clashes!r} clash with {self.attribute} labels"
            ).with_context(attribute=self.attribute)

        members = [member for group in self.sets.values() for member in group]
        illegals = [m for m in members if m not in self.values and m not in self.sets]
        if illegals:
            raise EnumDefinitionError(
                f"set values {illegals!r} are not part of the defined enums"
            ).with_context(attribute=self.attribute)

        self._labels_by_code = {code: label for label, code in self.values.items()}

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def labels(self) -> list[str]:
        return list(self.values)

    @property
    def codes(self) -> list[Any]:
        return list(self.values.values())

    def has_label(self, label: Any) -> bool:
        return isinstance(label, str) and label in self.values

    def has_code(self, code: Any) -> bool:
        if isinstance(code, bool):
            # True == 1, but a flag is not the integer code 1
            return any(stored is code for stored in self._labels_by_code)
        try:
            return code in self._labels_by_code
        except TypeError:
            return False

    def is_set(self, name: Any) -> bool:
        return isinstance(name, str) and name in self.sets

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    def code_for(self, value: Any, include_sets: bool = True) -> Any:
        """Return the persisted code for a label (or list of labels).

        A set name (when ``include_sets``) yields the list of its members'
        codes. Lists are flattened and de-duplicated.
        """
        if isinstance(value, (list, tuple)):
            codes: list[Any] = []
            for item in value:
                code = self.code_for(item, include_sets)
                codes.extend(code if isinstance(code, list) else [code])
            return _unique(codes)

        label = dehumanize(value)
        if self.has_label(label):
            return self.values[label]
        if include_sets and self.is_set(label):
            return self.code_for(self.expand(label), include_sets)
        raise self._illegal(value, self.labels)

    def label_for(self, code: Any) -> str | None:
        """Return the label stored under ``code``, or None."""
        if not self.has_code(code):
            return None
        return self._labels_by_code[code]

    def query_code(self, value: Any) -> Any:
        """Translate a query operand: labels and sets to codes, codes as-is."""
        if isinstance(value, (list, tuple, set, frozenset)):
            codes: list[Any] = []
            for item in value:
                code = self.query_code(item)
                codes.extend(code if isinstance(code, list) else [code])
            return _unique(codes)

        label = dehumanize(value)
        if self.has_label(label) or self.is_set(label):
            return self.code_for(label)
        if self.has_code(value) or not self.strict:
            return value
        raise self._illegal(value, self.labels)

    def validate(self, value: Any) -> None:
        """Raise ``IllegalValueError`` unless ``value`` is a label (str) or a code."""
        if isinstance(value, str):
            if not self.has_label(value):
                raise self._illegal(value, self.labels)
        elif not self.has_code(value):
            raise self._illegal(value, self.codes)

    # ------------------------------------------------------------------
    # Sets and choices
    # ------------------------------------------------------------------

    def expand(self, value: Any = None, humanize: bool = False) -> list[Any]:
        """Expand a label or set into its labels; None means every label."""
        if value is None:
            labels = self.labels
        else:
            labels = self._expand(dehumanize(value), set())
        return [_humanize(label) for label in labels] if humanize else labels

    def _expand(self, value: Any, seen: set[str]) -> list[str]:
        if self.has_label(value):
            return [value]
        if self.is_set(value):
            if value in seen:
                return []
            seen.add(value)
            return _unique(
                label for member in self.sets[value] for label in self._expand(member, seen)
            )
        raise self._illegal(value, self.labels + list(self.sets))

    def matches(self, value: Any, match_value: Any) -> bool:
        """True if ``value`` (label or code) falls under ``match_value`` (label or set)."""
        label = value if isinstance(value, str) else self.label_for(value)
        return label in self.expand(match_value)

    def choices_list(
        self,
        include_sets: bool = False,
        set_name: str | Iterable[str] | None = None,
        humanize: bool = False,
    ) -> list[Any]:
        """Labels sorted alphabetically, or the members of the given set(s)."""
        if set_name is not None:
            names = [set_name] if isinstance(set_name, str) else list(set_name)
            result = _unique(label for name in names for label in self.expand(name))
        else:
            result = self.labels
            if include_sets:
                result += list(self.sets)
            result = sorted(result, key=str)
        if humanize:
            result = [_humanize(label) for label in result]
        return result

    def choices(self) -> list[Choice]:
        """``Choice(id=code, name=label)`` pairs ordered by code."""
        return sorted(
            (Choice(code, label) for label, code in self.values.items()),
            key=lambda choice: _sort_key(choice.id),
        )

    # ------------------------------------------------------------------
    # Attribute semantics
    # ------------------------------------------------------------------

    def coerce(self, value: Any) -> Any:
        """Return the raw value to persist for an assignment of ``value``."""
        if is_blank(value):
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            if self.strict:
                self.validate(value)
            return value

        label = dehumanize(value)
        if not isinstance(label, str):
            if self.strict:
                self.validate(label)
            return value
        if self.strict:
            self.validate(label)
            return self.values[label]
        return self.values.get(label, value)

    def read(self, raw: Any) -> Any:
        """Return the label for a raw stored value."""
        value = self.label_for(raw)
        if value is None and not self.strict:
            value = raw
        if value is None:
            value = self.nil
        return value

    def _illegal(self, value: Any, valid: list[Any]) -> IllegalValueError:
        error = IllegalValueError(
            f"Illegal {self.attribute} value specified ({value!r}) - "
            f"valid values are {', '.join(str(v) for v in valid)}",
            valid_values=valid,
        )
        error.with_context(attribute=self.attribute, value=value, context=self.context or None)
        return error


def _humanize(label: Any) -> str:
    return humanize(label)


__all__ = ["Choice", "EnumTable"]
