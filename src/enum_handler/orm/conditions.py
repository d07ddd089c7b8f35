"""
Condition sanitizing: enum labels inside hash conditions, assignments and
hand-written SQL fragments.

Three entry points, one per way a caller can spell a condition:

* ``sanitize_conditions(User, {"status": "inactive"})`` - keyword/hash
  style, including nested ``{"users": {"status": "active"}}`` for joined
  tables.
* ``sanitize_assignment(User, {"status": "terminated"})`` - the SET part of
  an ``update()``; sets are not assignable here.
* ``rewrite_bind_variables(User, "status = ? AND role <> ?", ["inactive", "customer"])``
  - ``?`` placeholder fragments, rewritten into a ``text()`` clause with
  named binds.

Manifesto:
    The fragment rewriter is a string-substitution utility: it looks at the
    comparison in front of each placeholder, finds the column, and if that
    column is an enum, swaps labels for codes and adjusts the operator
    (``=`` -> ``IN`` for sets, ``!label`` flips the sense). It does not parse
    SQL and does not try to.

Examples:
    >>> rewritten = rewrite_bind_variables(User, "status = ?", ["inactive"])
    >>> rewritten.sql
    'users.status IN :p0'
    >>> rewritten.params
    {'p0': ['suspended', 'terminated']}

Tags:
    sql, conditions, bind-variables, rewriting, enum-handler
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import TextClause, bindparam, text

from enum_handler.core.errors import ConditionError
from enum_handler.core.logging import get_logger
from enum_handler.core.registry import EnumRegistry, model_for_table, unquote
from enum_handler.core.settings import get_settings
from enum_handler.orm.comparator import check_keyed_code

logger = get_logger(__name__)

_COLLECTIONS = (list, tuple, set, frozenset)

_PLACEHOLDER = re.compile(r"\(\s*\?\s*\)|\?")
_CONNECTIVE = re.compile(r"\b(?:and|or)\b", re.IGNORECASE)
_COLUMN = re.compile(r"^\(*\s*(?:([^\s.()]+)\.)?([^\s.()=<>!]+)")
_NOT_EQUAL = re.compile(r"(<>|!=)\s*$")
_EQUAL = re.compile(r"(?<![<>!])=\s*$")
_NOT_IN = re.compile(r"\bNOT\s+IN\s*$", re.IGNORECASE)
_IN = re.compile(r"\bIN\s*$", re.IGNORECASE)
# Same shape SQLAlchemy's text() treats as a bind parameter.
_COLON = re.compile(r"(?<![:\w\\]):(?=\w)")


@dataclass(frozen=True)
class RewrittenStatement:
    """SQL with ``:pN`` binds plus their values; list values bind expanding."""

    sql: str
    params: dict[str, Any] = field(default_factory=dict)
    expanding: tuple[str, ...] = ()

    def to_text(self) -> TextClause:
        binds = [
            bindparam(name, value=value, expanding=name in self.expanding)
            for name, value in self.params.items()
        ]
        clause = text(self.sql)
        return clause.bindparams(*binds) if binds else clause


# =============================================================================
# Hash conditions
# =============================================================================


def _registry(model: Any) -> EnumRegistry | None:
    getter = getattr(model, "_enum_registry", None)
    return getter() if getter is not None else None


def _column_criterion(column: Any, value: Any) -> Any:
    if value is None:
        return column.is_(None)
    if isinstance(value, _COLLECTIONS):
        return column.in_(list(value))
    return column == value


def _is_expression(candidate: Any) -> bool:
    return hasattr(candidate, "__clause_element__")


def _criterion(model: Any, key: str, value: Any) -> Any:
    registry = _registry(model)
    if registry is not None and registry.defined_for(key):
        # The hybrid comparator does the translation (sets, lists, "!label").
        return getattr(model, key) == value
    if registry is not None and key in registry.keyed:
        # Raw codes only; the keyed comparator rejects labels
        return _column_criterion(getattr(model, key), value)

    column = getattr(model, key, None)
    if not _is_expression(column):
        # Scopes, predicates and other class members are not columns
        table = getattr(model, "__table__", None)
        column = table.c.get(key) if table is not None else None
    if column is None:
        raise ConditionError(f"{model.__name__} has no attribute or column {key!r}").with_context(
            model=model.__name__, attribute=key
        )
    return _column_criterion(column, value)


def _table_conditions(model: Any, table_name: str, conditions: Mapping[str, Any]) -> list[Any]:
    target = model_for_table(table_name)
    if target is not None:
        return sanitize_conditions(target, conditions)

    metadata = getattr(model, "metadata", None)
    table = metadata.tables.get(unquote(table_name)) if metadata is not None else None
    if table is None:
        raise ConditionError(f"Unknown table {table_name!r} in conditions").with_context(
            model=getattr(model, "__name__", None), table=table_name
        )

    criteria = []
    for key, value in conditions.items():
        if key not in table.c:
            raise ConditionError(f"Table {table.name!r} has no column {key!r}").with_context(
                attribute=key, table=table.name
            )
        criteria.append(_column_criterion(table.c[key], value))
    return criteria


def sanitize_conditions(model: Any, conditions: Mapping[str, Any]) -> list[Any]:
    """Turn ``{attribute: value}`` (or ``{table: {column: value}}``) into criteria."""
    criteria: list[Any] = []
    for key, value in conditions.items():
        if isinstance(value, Mapping):
            criteria.extend(_table_conditions(model, key, value))
        else:
            criteria.append(_criterion(model, key, value))
    return criteria


def sanitize_assignment(model: Any, values: Mapping[str, Any]) -> dict[Any, Any]:
    """Translate labels for an ``update().values(...)`` keyed by mapped attributes."""
    registry = _registry(model)
    result: dict[Any, Any] = {}
    for key, value in values.items():
        if registry is not None and key in registry.raw_keys:
            target = getattr(model, registry.raw_keys[key])
            if registry.defined_for(key) and isinstance(value, str):
                value = model.db_code(key, value, include_sets=False)
            elif key in registry.keyed:
                value = check_keyed_code(model, key, value)
        else:
            target = getattr(model, key, None)
            if not _is_expression(target):
                raise ConditionError(f"{model.__name__} has no attribute {key!r}").with_context(
                    model=model.__name__, attribute=key
                )
        result[target] = value
    return result


# =============================================================================
# ``?`` fragment rewriting
# =============================================================================


def _escape_colons(segment: str) -> str:
    return _COLON.sub(r"\\:", segment)


def _table_name(model: Any) -> str | None:
    name = getattr(model, "__tablename__", None)
    if isinstance(name, str):
        return name
    table = getattr(model, "__table__", None)
    return getattr(table, "name", None)


def _enum_attribute_for_column(model: Any, registry: EnumRegistry, column: str) -> str | None:
    if registry.defined_for(column) or column in registry.keyed:
        return column
    for attribute, raw_key in registry.raw_keys.items():
        if not (registry.defined_for(attribute) or attribute in registry.keyed):
            continue
        prop = getattr(getattr(model, raw_key, None), "property", None)
        columns = getattr(prop, "columns", None) or []
        if any(getattr(col, "name", None) == column for col in columns):
            return attribute
    return None


def _negate(segment: str) -> str:
    for pattern, replacement in (
        (_NOT_EQUAL, "="),
        (_EQUAL, "<>"),
        (_NOT_IN, "IN"),
        (_IN, "NOT IN"),
    ):
        rewritten, count = pattern.subn(replacement, segment)
        if count:
            return rewritten
    return segment


def _translate_segment(
    model: Any,
    registry: EnumRegistry,
    segment: str,
    value: Any,
    table_name: str | None,
    qualify: bool,
) -> tuple[str, Any]:
    portion = _CONNECTIVE.split(segment)[-1].strip()
    match = _COLUMN.match(portion)
    if match is None:
        return segment, value

    qualifier, column = match.group(1), match.group(2).strip("`\"[]")
    attribute = _enum_attribute_for_column(model, registry, column)
    if attribute is None:
        return segment, value

    if qualify and qualifier is None and table_name:
        offset = segment.rfind(portion) + match.start(2)
        segment = f"{segment[:offset]}{table_name}.{segment[offset:]}"

    if attribute in registry.keyed:
        return segment, check_keyed_code(model, attribute, value)

    table = registry.require_table(attribute)
    if isinstance(value, _COLLECTIONS):
        value = table.query_code(list(value))
    elif isinstance(value, str):
        if value.startswith("!"):
            segment, value = _negate(segment), value[1:]
        value = table.query_code(value)
    return segment, value


def rewrite_bind_variables(model: Any, statement: str, values: Sequence[Any]) -> RewrittenStatement:
    """Rewrite a ``?`` fragment into named binds, translating enum labels.

    Raises:
        ConditionError: placeholder count and value count differ
    """
    values = list(values)
    pieces = _PLACEHOLDER.split(statement)
    if len(pieces) - 1 != len(values):
        raise ConditionError(
            f"Statement has {len(pieces) - 1} placeholders but {len(values)} values were given"
        ).with_context(model=getattr(model, "__name__", None), statement=statement)

    registry = _registry(model)
    translate = registry is not None and registry.has_enums
    table_name = _table_name(model)
    qualify = get_settings().qualify_columns

    parts: list[str] = []
    params: dict[str, Any] = {}
    expanding: list[str] = []
    for index, (piece, value) in enumerate(zip(pieces, values)):
        name = f"p{index}"
        segment = piece.rstrip()
        if translate:
            segment, value = _translate_segment(model, registry, segment, value, table_name, qualify)

        if isinstance(value, _COLLECTIONS):
            value = list(value)
            if not _IN.search(segment):
                segment = _NOT_EQUAL.sub("NOT IN", segment, count=1)
                segment = _EQUAL.sub("IN", segment, count=1)
            expanding.append(name)
            placeholder = f":{name}"
        else:
            placeholder = f"(:{name})" if _IN.search(segment) else f":{name}"

        params[name] = value
        separator = " " if segment.strip() else ""
        parts.append(f"{_escape_colons(segment)}{separator}{placeholder}")

    parts.append(_escape_colons(pieces[-1].rstrip()))
    rewritten = RewrittenStatement("".join(parts).strip(), params, tuple(expanding))
    logger.debug(
        "conditions_rewritten",
        model=getattr(model, "__name__", None),
        statement=statement,
        sql=rewritten.sql,
    )
    return rewritten


__all__ = [
    "RewrittenStatement",
    "rewrite_bind_variables",
    "sanitize_assignment",
    "sanitize_conditions",
]
