"""
EnumHandlerMixin - symbolic enum attributes for SQLAlchemy models.

Persisted columns hold codes (``0``/``1``/``2`` or short strings); the
rest of the application reads and writes labels. Mix the class in (or
derive from ``EnumBase``), map the raw column under a private attribute,
then declare the enum::

    class User(EnumBase):
        __tablename__ = "users"

        id: Mapped[int] = mapped_column(primary_key=True)
        _status: Mapped[str | None] = mapped_column("status", String(20))

    User.define_enum(
        "status",
        ["active", "suspended", "terminated"],
        primary=True,
        sets={"inactive": ["suspended", "terminated"]},
    )

    user = User(status="Active")        # stored as "active"
    user.is_active()                    # True
    session.scalars(User.inactive())    # status IN ('suspended', 'terminated')
    select(User).where(User.status != "inactive")

Manifesto:
    - **Labels everywhere:** reads, writes, predicates and queries speak labels
    - **Strict by default:** illegal assignments raise ``IllegalValueError``
    - **Sets are views:** a set can be queried and tested, never stored
    - **No monkey-patching:** translation happens in a hybrid comparator and
      in explicit sanitizing helpers, not inside SQLAlchemy internals

Polymorphic enums:
    A host class that stores values on behalf of other classes (preferences
    keyed by ``owner_type``) calls ``supports_polymorphic_enum_handling("owner")``;
    clients then call ``Host.define_enum("value", {...}, context=Client)``
    and each row is interpreted within the context named by its
    ``owner_type``.

Keyed enums:
    ``define_keyed_enum("cooking_method", "food_type", {...})`` interprets
    the codes of one attribute through the value of another.

Plain classes:
    The mixin also works on classes that are not mapped. The raw value then
    lives in an ordinary instance attribute (``_status``) and no scopes are
    generated.

Tags:
    sqlalchemy, enum, mixin, hybrid, scopes, polymorphic, enum-handler
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import Select, TextClause, Update, select, update

from enum_handler.core.errors import EnumDefinitionError, KeyAttributeError, UndefinedContextError
from enum_handler.core.inflection import dehumanize as _dehumanize
from enum_handler.core.inflection import humanize as _humanize
from enum_handler.core.inflection import is_blank
from enum_handler.core.keyed import KeyedEnumTable
from enum_handler.core.logging import get_logger
from enum_handler.core.registry import DEFAULT_CONTEXT, EnumRegistry, register_model
from enum_handler.core.settings import get_settings
from enum_handler.core.table import Choice, EnumTable
from enum_handler.orm import attributes
from enum_handler.orm import conditions as sql_conditions
from enum_handler.orm.scopes import install_scopes

logger = get_logger(__name__)


def _context_name(context: Any) -> str:
    if context is None:
        return DEFAULT_CONTEXT
    if isinstance(context, type):
        return context.__name__
    return str(context)


class EnumHandlerMixin:
    """Adds ``define_enum`` and friends to a model class."""

    # =========================================================================
    # Registry
    # =========================================================================

    @classmethod
    def _enum_registry(cls) -> EnumRegistry:
        registry = cls.__dict__.get("__enum_registry__")
        if registry is None:
            inherited = getattr(cls, "__enum_registry__", None)
            registry = inherited.copy(cls.__name__) if inherited is not None else EnumRegistry(cls.__name__)
            setattr(cls, "__enum_registry__", registry)
        return registry

    @classmethod
    def _lookup_table(cls, attribute: str, context: Any = None) -> EnumTable | None:
        registry = cls._enum_registry()
        if attribute not in registry.attribute_contexts:
            return None
        return registry.require_table(attribute, None if context is None else _context_name(context))

    @classmethod
    def _require_table(cls, attribute: str, context: Any = None) -> EnumTable:
        table = cls._lookup_table(attribute, context)
        if table is None:
            raise EnumDefinitionError(f"No enum is defined for {cls.__name__}.{attribute}").with_context(
                model=cls.__name__, attribute=attribute
            )
        return table

    # =========================================================================
    # Definitions
    # =========================================================================

    @classmethod
    def define_enum(
        cls,
        attribute: str,
        values: Any,
        *,
        sets: Mapping[str, Iterable[str]] | None = None,
        primary: bool = False,
        strict: bool | None = None,
        nil: Any = None,
        context: Any = None,
        column: str | None = None,
    ) -> EnumTable:
        """Declare ``attribute`` as an enum.

        Args:
            attribute: Public attribute name (``"status"``)
            values: ``{label: code}``, a list of labels (stored as text) or an
                ``enum.Enum`` class
            sets: Named groups of labels, e.g. ``{"inactive": ["suspended", "terminated"]}``
            primary: Generate ``is_active()``/``active()`` instead of
                ``is_status_active()``/``status_active()``
            strict: Reject unknown values on assignment (default from settings)
            nil: Label reported when the stored value is NULL
            context: Client class (or name) for polymorphic hosts
            column: Instance attribute holding the raw code (default ``_<attribute>``)
        """
        settings = get_settings()
        registry = cls._enum_registry()
        ctx = _context_name(context)
        if ctx and registry.polymorphic_attribute is None:
            raise EnumDefinitionError(
                f"{cls.__name__} does not support polymorphic enum handling; "
                f"call supports_polymorphic_enum_handling() before defining contexts"
            ).with_context(model=cls.__name__, attribute=attribute, context=ctx)

        raw_key = column or registry.raw_keys.get(attribute) or f"_{attribute}"
        attributes.check_raw_key(cls, raw_key, attribute)

        table = EnumTable(
            attribute=attribute,
            values=values,
            sets={name: list(members) for name, members in (sets or {}).items()},
            strict=settings.strict_default if strict is None else strict,
            nil=nil,
            context=ctx,
            primary=primary,
        )

        if not ctx and attribute in registry.attribute_contexts:
            # Labels, sets or primary may have changed; regenerate from scratch
            stale = attributes.uninstall(cls, attribute)
            logger.debug("enum_members_removed", model=cls.__name__, attribute=attribute, members=stale)

        registry.register(table, raw_key)
        register_model(cls)

        attributes.install(cls, attribute, attributes.enum_attribute(cls, attribute, raw_key), attribute)
        attributes.install_class_methods(cls, table)
        if not ctx:
            attributes.install_predicates(cls, table)
            attributes.install_setters(cls, table)
            if settings.generate_scopes and attributes.is_mapped(cls):
                install_scopes(cls, table)

        logger.debug(
            "enum_defined",
            model=cls.__name__,
            attribute=attribute,
            context=ctx or None,
            values=len(table.values),
            sets=sorted(table.sets),
            primary=primary,
            strict=table.strict,
        )
        return table

    @classmethod
    def define_keyed_enum(
        cls,
        attribute: str,
        key_attribute: str,
        key_values: Mapping[Any, Any],
        *,
        strict: bool | None = None,
        column: str | None = None,
    ) -> KeyedEnumTable:
        """Declare ``attribute`` whose labels depend on the value of ``key_attribute``.

        ``key_values`` maps a key value (or a tuple of key values) to the
        ``{label: code}`` mapping - or label list - used under that key::

            Dish.define_keyed_enum("cooking_method", "food_type", {
                ("fowl", "beef"): {"braised": 1, "roasted": 2, "grilled": 3},
                "egg": {"poached": 1, "fried": 2, "scrambled": 3},
            })

        The key attribute must be set before the keyed attribute is assigned.
        """
        registry = cls._enum_registry()
        if registry.key_attribute is not None and key_attribute != registry.key_attribute:
            raise KeyAttributeError(
                f"Only one key attribute currently allowed - it has already been set to "
                f"{registry.key_attribute!r}"
            ).with_context(model=cls.__name__, attribute=attribute)

        raw_key = column or registry.raw_keys.get(attribute) or f"_{attribute}"
        attributes.check_raw_key(cls, raw_key, attribute)

        table = KeyedEnumTable.from_definition(
            attribute,
            key_attribute,
            key_values,
            strict=get_settings().strict_default if strict is None else strict,
        )
        table = registry.register_keyed(table, raw_key)
        register_model(cls)

        attributes.install(cls, attribute, attributes.keyed_attribute(cls, attribute, raw_key), attribute)
        attributes.install_keyed_members(cls, table)

        logger.debug(
            "keyed_enum_defined",
            model=cls.__name__,
            attribute=attribute,
            key_attribute=key_attribute,
            keys=table.keys,
        )
        return table

    @classmethod
    def supports_polymorphic_enum_handling(cls, attribute_name: str) -> None:
        """Let other classes define enums on this one, selected by ``<attribute_name>_type``."""
        registry = cls._enum_registry()
        registry.polymorphic_attribute = f"{attribute_name}_type"
        logger.debug(
            "polymorphic_enum_enabled",
            model=cls.__name__,
            polymorphic_attribute=registry.polymorphic_attribute,
        )

    # =========================================================================
    # Class-level queries
    # =========================================================================

    @classmethod
    def has_enums(cls) -> bool:
        return cls._enum_registry().has_enums

    @classmethod
    def enum_defined_for(cls, attribute: str) -> bool:
        return cls._enum_registry().defined_for(attribute)

    @classmethod
    def db_code(cls, attribute: str, value: Any, include_sets: bool = True, context: Any = None) -> Any:
        """The code stored for ``value``; non-enum attributes pass ``value`` through."""
        table = cls._lookup_table(attribute, context)
        if table is None:
            return value
        return table.code_for(value, include_sets)

    @classmethod
    def db_value(cls, attribute: str, code: Any, context: Any = None) -> Any:
        """The label stored under ``code``."""
        table = cls._lookup_table(attribute, context)
        if table is None:
            return code
        return table.label_for(code)

    @classmethod
    def validate_enum_value(cls, attribute: str, value: Any, context: Any = None) -> None:
        cls._require_table(attribute, context).validate(value)

    @classmethod
    def enum_values(
        cls,
        attribute: str,
        value: Any = None,
        humanize: bool = False,
        context: Any = None,
    ) -> list[Any]:
        """Expand a label or set into labels (every label when ``value`` is None)."""
        return cls._require_table(attribute, context).expand(value, humanize=humanize)

    @classmethod
    def enum_matches(cls, attribute: str, value: Any, match_value: Any, context: Any = None) -> bool:
        """True if ``value`` (label or code) is ``match_value`` or a member of that set."""
        return cls._require_table(attribute, context).matches(value, match_value)

    @classmethod
    def choices_list(
        cls,
        attribute: str,
        include_sets: bool = False,
        set_name: str | Iterable[str] | None = None,
        humanize: bool = False,
        context: Any = None,
    ) -> list[Any]:
        return cls._require_table(attribute, context).choices_list(
            include_sets=include_sets, set_name=set_name, humanize=humanize
        )

    @classmethod
    def enum_choices(cls, attribute: str, context: Any = None) -> list[Choice]:
        return cls._require_table(attribute, context).choices()

    @classmethod
    def keyed_db_code(cls, attribute: str, label: Any, key: Any) -> Any:
        keyed = cls._enum_registry().keyed.get(attribute)
        if keyed is None:
            raise EnumDefinitionError(f"No keyed enum is defined for {cls.__name__}.{attribute}")
        return keyed.code_for(label, key)

    @staticmethod
    def humanize(value: Any) -> str:
        return _humanize(value)

    @staticmethod
    def dehumanize(value: Any) -> Any:
        return _dehumanize(value)

    # =========================================================================
    # Query helpers
    # =========================================================================

    @classmethod
    def enum_criterion(cls, attribute: str, value: Any, negate: bool = False) -> Any:
        column = getattr(cls, attribute)
        return column != value if negate else column == value

    @classmethod
    def enum_conditions(cls, conditions: Mapping[str, Any]) -> list[Any]:
        return sql_conditions.sanitize_conditions(cls, conditions)

    @classmethod
    def where_enum(cls, **conditions: Any) -> Select[Any]:
        """``select(cls)`` filtered by keyword conditions, labels translated."""
        return select(cls).where(*cls.enum_conditions(conditions))

    @classmethod
    def sanitize_assignment(cls, values: Mapping[str, Any]) -> dict[Any, Any]:
        return sql_conditions.sanitize_assignment(cls, values)

    @classmethod
    def enum_update(cls, **values: Any) -> Update:
        """``update(cls)`` with labels translated; add ``.where(...)`` as needed."""
        return update(cls).values(cls.sanitize_assignment(values))

    @classmethod
    def rewrite_conditions(cls, statement: str, values: Sequence[Any]) -> sql_conditions.RewrittenStatement:
        return sql_conditions.rewrite_bind_variables(cls, statement, values)

    @classmethod
    def where_sql(cls, statement: str, *values: Any) -> TextClause:
        """A ``text()`` clause from a ``?`` fragment, labels translated."""
        return cls.rewrite_conditions(statement, values).to_text()

    # =========================================================================
    # Instance access
    # =========================================================================

    def read_attribute(self, name: str) -> Any:
        """The raw persisted value behind ``name``."""
        raw_key = type(self)._enum_registry().raw_keys.get(name, name)
        return getattr(self, raw_key, None)

    def write_attribute(self, name: str, value: Any) -> None:
        """Store a raw value behind ``name`` without translation."""
        raw_key = type(self)._enum_registry().raw_keys.get(name, name)
        setattr(self, raw_key, value)

    def _enum_evaluation_context(self, attribute: str) -> str:
        registry = type(self)._enum_registry()
        contexts = registry.contexts_for(attribute)
        if registry.polymorphic_attribute is None or contexts == [DEFAULT_CONTEXT]:
            return DEFAULT_CONTEXT

        context = self.read_attribute(registry.polymorphic_attribute)
        if is_blank(context):
            if DEFAULT_CONTEXT in contexts:
                return DEFAULT_CONTEXT
            raise UndefinedContextError(
                f"Value for polymorphic parameter {registry.polymorphic_attribute} has not been set yet"
            ).with_context(model=type(self).__name__, attribute=attribute)
        return str(context)

    def _enum_table(self, attribute: str) -> EnumTable:
        registry = type(self)._enum_registry()
        return registry.require_table(attribute, self._enum_evaluation_context(attribute))

    def _read_enum(self, attribute: str) -> Any:
        return self._enum_table(attribute).read(self.read_attribute(attribute))

    def _write_enum(self, attribute: str, value: Any) -> None:
        table = self._enum_table(attribute)
        raw = table.coerce(value)
        if raw is not None and not table.strict and not table.has_code(raw):
            logger.debug(
                "non_strict_passthrough",
                model=type(self).__name__,
                attribute=attribute,
                value=raw,
            )
        self.write_attribute(attribute, raw)

    def _read_keyed(self, attribute: str) -> Any:
        keyed = type(self)._enum_registry().keyed[attribute]
        return keyed.read(self.read_attribute(attribute), getattr(self, keyed.key_attribute, None))

    def _write_keyed(self, attribute: str, value: Any) -> None:
        keyed = type(self)._enum_registry().keyed[attribute]
        raw = keyed.coerce(value, getattr(self, keyed.key_attribute, None))
        self.write_attribute(attribute, raw)


__all__ = ["EnumHandlerMixin"]
