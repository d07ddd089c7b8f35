"""Hybrid comparator that translates enum labels in query expressions.

``User.status == "inactive"`` becomes ``users.status IN ('suspended', 'terminated')``
without the caller knowing how the codes are stored.
"""

from __future__ import annotations

import operator
from typing import Any

from sqlalchemy.ext.hybrid import Comparator
from sqlalchemy.sql import operators
from sqlalchemy.sql.elements import ClauseElement

from enum_handler.core.errors import ConditionError


def _is_sql(value: Any) -> bool:
    return isinstance(value, ClauseElement) or hasattr(value, "__clause_element__")


class EnumComparator(Comparator):
    """Rewrites right-hand operands of ``==``, ``!=``, ``in_`` and ``not_in``.

    * label            -> ``col = code``
    * set or list      -> ``col IN (...)``
    * ``"!label"``     -> the negated comparison
    * ``None``         -> ``IS NULL`` / ``IS NOT NULL``

    Any other operator (``like``, ``>``, ordering...) is applied to the raw
    column untouched.
    """

    def __init__(self, expression: Any, model: type, attribute: str):
        super().__init__(expression)
        self.model = model
        self.attribute = attribute

    def _table(self):
        return self.model._enum_registry().require_table(self.attribute)

    def operate(self, op: Any, *other: Any, **kwargs: Any) -> Any:
        column = self.__clause_element__()
        if other and (op is operator.eq or op is operator.ne):
            return self._compare(column, other[0], negate=op is operator.ne)
        if other and (op is operators.in_op or op is operators.not_in_op):
            values = other[0]
            if isinstance(values, (list, tuple, set, frozenset)):
                codes = self._table().query_code(list(values))
                return column.in_(codes) if op is operators.in_op else column.not_in(codes)
        return op(column, *other, **kwargs)

    def reverse_operate(self, op: Any, other: Any, **kwargs: Any) -> Any:
        return op(other, self.__clause_element__(), **kwargs)

    def _bulk_update_tuples(self, value: Any) -> list[tuple[Any, Any]]:
        # update(Model).values({Model.attr: "label"}) routes through here
        column = self.expression
        if value is None or _is_sql(value):
            return [(column, value)]
        return [(column, self._table().coerce(value))]

    def _compare(self, column: Any, value: Any, negate: bool) -> Any:
        if value is None:
            return column.is_not(None) if negate else column.is_(None)
        if _is_sql(value):
            return column != value if negate else column == value
        if isinstance(value, str) and value.startswith("!"):
            value, negate = value[1:], not negate

        code = self._table().query_code(value)
        if isinstance(code, list):
            return column.not_in(code) if negate else column.in_(code)
        return column != code if negate else column == code

def check_keyed_code(model: type, attribute: str, value: Any) -> Any:
    """Return ``value`` if it is usable as a raw keyed code in SQL, else raise.

    A keyed label only has a code once the row's key is known, so labels
    cannot be translated inside a query or a bulk assignment.

    Raises:
        ConditionError: ``value`` is a label (or anything else that is not a code)
    """
    if value is None or _is_sql(value):
        return value
    if isinstance(value, (list, tuple, set, frozenset)):
        return [check_keyed_code(model, attribute, item) for item in value]

    keyed = model._enum_registry().keyed[attribute]
    if keyed.has_code(value):
        return value
    raise ConditionError(
        f"{model.__name__}.{attribute} is keyed by {keyed.key_attribute}; {value!r} is not a "
        f"stored code. Translate labels with {model.__name__}.db_{attribute}_code(label, key)"
    ).with_context(model=model.__name__, attribute=attribute, value=value)


class KeyedComparator(Comparator):
    """Compares keyed enum attributes on raw codes and rejects labels."""

    def __init__(self, expression: Any, model: type, attribute: str):
        super().__init__(expression)
        self.model = model
        self.attribute = attribute

    def operate(self, op: Any, *other: Any, **kwargs: Any) -> Any:
        column = self.__clause_element__()
        if other and op in (operator.eq, operator.ne, operators.in_op, operators.not_in_op):
            other = (check_keyed_code(self.model, self.attribute, other[0]), *other[1:])
        return op(column, *other, **kwargs)

    def reverse_operate(self, op: Any, other: Any, **kwargs: Any) -> Any:
        return op(other, self.__clause_element__(), **kwargs)

    def _bulk_update_tuples(self, value: Any) -> list[tuple[Any, Any]]:
        return [(self.expression, check_keyed_code(self.model, self.attribute, value))]


__all__ = ["EnumComparator", "KeyedComparator", "check_keyed_code"]
