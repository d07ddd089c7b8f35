"""Query scopes generated for enum labels and sets.

For ``User.define_enum("status", [...], primary=True)`` this generates
``User.active()`` / ``User.not_active()``; without ``primary`` the names
carry the attribute: ``User.role_customer()`` / ``User.role_not_customer()``.

A scope returns ``select(cls).where(...)``, or narrows a statement passed
in, so scopes compose with each other and with relationships::

    session.scalars(User.active()).all()
    session.scalars(Book.mint(select(Book).where(with_parent(user, User.books)))).all()
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, select

from enum_handler.core.logging import get_logger
from enum_handler.core.table import EnumTable
from enum_handler.orm.attributes import install

logger = get_logger(__name__)


def scope_names(table: EnumTable, value: str) -> tuple[str, str]:
    """(positive, negated) scope names for a label or set."""
    if table.primary:
        return value, f"not_{value}"
    return f"{table.attribute}_{value}", f"{table.attribute}_not_{value}"


def _scope(attribute: str, value: str, negate: bool, name: str) -> classmethod:
    def scope(cls: Any, stmt: Select[Any] | None = None) -> Select[Any]:
        criterion = cls.enum_criterion(attribute, value, negate=negate)
        return (select(cls) if stmt is None else stmt).where(criterion)

    scope.__name__ = scope.__qualname__ = name
    scope.__doc__ = f"Rows whose {attribute} is {'not ' if negate else ''}{value!r}."
    return classmethod(scope)


def install_scopes(cls: type, table: EnumTable) -> list[str]:
    names: list[str] = []
    for value in list(table.values) + list(table.sets):
        positive, negative = scope_names(table, value)
        install(cls, positive, _scope(table.attribute, value, False, positive), table.attribute)
        install(cls, negative, _scope(table.attribute, value, True, negative), table.attribute)
        names.extend([positive, negative])

    logger.debug("enum_scopes_generated", model=cls.__name__, attribute=table.attribute, scopes=names)
    return names


__all__ = ["install_scopes", "scope_names"]
