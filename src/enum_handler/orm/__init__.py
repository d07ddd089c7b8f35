"""SQLAlchemy integration: the mixin, its declarative base and session helpers."""

from enum_handler.orm.base import EnumBase
from enum_handler.orm.comparator import EnumComparator, KeyedComparator
from enum_handler.orm.conditions import (
    RewrittenStatement,
    rewrite_bind_variables,
    sanitize_assignment,
    sanitize_conditions,
)
from enum_handler.orm.mixin import EnumHandlerMixin
from enum_handler.orm.session import EnumSession, create_enum_engine, enum_session_factory

__all__ = [
    "EnumBase",
    "EnumComparator",
    "EnumHandlerMixin",
    "EnumSession",
    "KeyedComparator",
    "RewrittenStatement",
    "create_enum_engine",
    "enum_session_factory",
    "rewrite_bind_variables",
    "sanitize_assignment",
    "sanitize_conditions",
]
