"""
enum-handler: symbolic enum attributes for SQLAlchemy models.

Columns store compact codes; models expose labels, label predicates,
generated query scopes, named sets of labels and translation of labels
inside query conditions.

Quick start::

    from sqlalchemy import String
    from sqlalchemy.orm import Mapped, mapped_column
    from enum_handler import EnumBase

    class User(EnumBase):
        __tablename__ = "users"
        id: Mapped[int] = mapped_column(primary_key=True)
        _status: Mapped[str | None] = mapped_column("status", String(20))

    User.define_enum("status", ["active", "suspended", "terminated"], primary=True,
                     sets={"inactive": ["suspended", "terminated"]})
"""

__version__ = "0.1.0"

from enum_handler.core import (
    Choice,
    ConditionError,
    EnumDefinitionError,
    EnumHandlerError,
    EnumTable,
    ErrorCategory,
    IllegalValueError,
    KeyAttributeError,
    KeyedEnumTable,
    UndefinedContextError,
    dehumanize,
    humanize,
)
from enum_handler.core.logging import configure_logging, get_logger
from enum_handler.core.settings import EnumHandlerSettings, clear_settings_cache, get_settings
from enum_handler.orm import (
    EnumBase,
    EnumHandlerMixin,
    RewrittenStatement,
    create_enum_engine,
    enum_session_factory,
)

__all__ = [
    "Choice",
    "ConditionError",
    "EnumBase",
    "EnumDefinitionError",
    "EnumHandlerError",
    "EnumHandlerMixin",
    "EnumHandlerSettings",
    "EnumTable",
    "ErrorCategory",
    "IllegalValueError",
    "KeyAttributeError",
    "KeyedEnumTable",
    "RewrittenStatement",
    "UndefinedContextError",
    "__version__",
    "clear_settings_cache",
    "configure_logging",
    "create_enum_engine",
    "dehumanize",
    "enum_session_factory",
    "get_logger",
    "get_settings",
    "humanize",
]
