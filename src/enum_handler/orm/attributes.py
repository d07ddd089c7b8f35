"""
Generated members for enum attributes.

``define_enum("status", ...)`` ends up here to install:

* the ``status`` attribute itself (a hybrid on mapped classes, a plain
  property elsewhere) that reads labels and writes codes
* predicates: ``is_active()`` (primary) / ``is_status_active()``
* setters: ``set_status_to_active()``
* class methods: ``status_choices()``, ``status_choices_list()``,
  ``statuses()`` and ``validate_status_value()``

Every generated name is recorded in the class registry; generating a name
that already belongs to something else is a definition error.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.hybrid import hybrid_property

from enum_handler.core.errors import EnumDefinitionError
from enum_handler.core.inflection import pluralize
from enum_handler.core.keyed import KeyedEnumTable
from enum_handler.core.table import EnumTable
from enum_handler.orm.comparator import EnumComparator, KeyedComparator


def is_mapped(cls: type) -> bool:
    return sa_inspect(cls, raiseerr=False) is not None


def check_raw_key(cls: type, raw_key: str, attribute: str) -> None:
    """On a mapped class the raw code must live in a mapped attribute."""
    mapper = sa_inspect(cls, raiseerr=False)
    if mapper is None:
        return
    if raw_key not in mapper.attrs:
        raise EnumDefinitionError(
            f"{cls.__name__}.{raw_key} is not a mapped attribute; map the {attribute!r} "
            f"column as {raw_key!r} (e.g. {raw_key}: Mapped[...] = mapped_column({attribute!r}, ...)) "
            f"or pass column=..."
        ).with_context(model=cls.__name__, attribute=attribute)


def install(cls: type, name: str, member: Any, attribute: str) -> None:
    """Set ``cls.<name>`` unless it would clobber something we did not generate."""
    registry = cls._enum_registry()
    owner = registry.generated.get(name)
    taken = any(name in klass.__dict__ for klass in cls.__mro__)
    if (owner is None and taken) or (owner is not None and owner != attribute):
        raise EnumDefinitionError(
            f"{cls.__name__}.{name} already exists; cannot generate it for enum {attribute!r}"
        ).with_context(model=cls.__name__, attribute=attribute)
    setattr(cls, name, member)
    registry.generated[name] = attribute


def uninstall(cls: type, attribute: str) -> list[str]:
    """Remove members generated for ``attribute`` on ``cls`` ahead of a redefinition.

    The attribute itself stays. Members inherited from a parent class are
    left alone (and stay recorded) since they do not live on ``cls``.
    """
    registry = cls._enum_registry()
    removed: list[str] = []
    for name, owner in list(registry.generated.items()):
        if owner != attribute or name == attribute or name not in cls.__dict__:
            continue
        delattr(cls, name)
        del registry.generated[name]
        removed.append(name)
    return removed


def _named(fn: Callable[..., Any], name: str, doc: str | None) -> Callable[..., Any]:
    fn.__name__ = name
    fn.__qualname__ = name
    fn.__doc__ = doc
    return fn


# =============================================================================
# The attribute itself
# =============================================================================


def enum_attribute(cls: type, attribute: str, raw_key: str) -> Any:
    """Hybrid (mapped classes) or property (plain classes) for ``attribute``."""

    def fget(self: Any) -> Any:
        return self._read_enum(attribute)

    def fset(self: Any, value: Any) -> None:
        self._write_enum(attribute, value)

    _named(fget, attribute, f"Enum attribute {attribute!r}; stored in {raw_key!r}.")

    if not is_mapped(cls):
        return property(fget, fset)

    def comparator(owner: Any) -> EnumComparator:
        return EnumComparator(getattr(owner, raw_key), cls, attribute)

    return hybrid_property(fget, fset).comparator(comparator)


def keyed_attribute(cls: type, attribute: str, raw_key: str) -> Any:
    """Keyed enums compare on raw codes; the key decides only how they read.

    Labels given to a query or a bulk update raise ``ConditionError``.
    """

    def fget(self: Any) -> Any:
        return self._read_keyed(attribute)

    def fset(self: Any, value: Any) -> None:
        self._write_keyed(attribute, value)

    _named(fget, attribute, f"Keyed enum attribute {attribute!r}; stored in {raw_key!r}.")

    if not is_mapped(cls):
        return property(fget, fset)

    def comparator(owner: Any) -> KeyedComparator:
        return KeyedComparator(getattr(owner, raw_key), cls, attribute)

    return hybrid_property(fget, fset).comparator(comparator)


# =============================================================================
# Predicates, setters, class methods
# =============================================================================


def predicate_name(table: EnumTable, value: str) -> str:
    # Primary enums drop the attribute prefix: is_active() vs is_status_active()
    return f"is_{value}" if table.primary else f"is_{table.attribute}_{value}"


def install_predicates(cls: type, table: EnumTable) -> None:
    attribute = table.attribute

    for label in table.values:
        def is_label(self: Any, _label: str = label) -> bool:
            return getattr(self, attribute) == _label

        name = predicate_name(table, label)
        install(cls, name, _named(is_label, name, f"True if {attribute} is {label!r}."), attribute)

    for set_name in table.sets:
        def in_set(self: Any, _set: str = set_name) -> bool:
            return getattr(self, attribute) in type(self).enum_values(attribute, _set)

        name = predicate_name(table, set_name)
        install(cls, name, _named(in_set, name, f"True if {attribute} is in set {set_name!r}."), attribute)


def install_setters(cls: type, table: EnumTable) -> None:
    attribute = table.attribute
    for label in table.values:
        def set_to(self: Any, _label: str = label) -> None:
            setattr(self, attribute, _label)

        name = f"set_{attribute}_to_{label}"
        install(cls, name, _named(set_to, name, f"Set {attribute} to {label!r}."), attribute)


def install_class_methods(cls: type, table: EnumTable) -> None:
    attribute = table.attribute

    def choices(owner: type, context: Any = None) -> list[Any]:
        return owner.enum_choices(attribute, context=context)

    def choices_list(owner: type, **options: Any) -> list[Any]:
        return owner.choices_list(attribute, **options)

    def validate(owner: type, value: Any, context: Any = None) -> None:
        owner.validate_enum_value(attribute, value, context=context)

    members = {
        f"{attribute}_choices": (choices, f"(code, label) choices for {attribute}."),
        f"{attribute}_choices_list": (choices_list, f"Labels for {attribute}."),
        pluralize(attribute): (choices_list, f"Labels for {attribute}."),
        f"validate_{attribute}_value": (validate, f"Raise unless value is legal for {attribute}."),
    }
    for name, (fn, doc) in members.items():
        install(cls, name, classmethod(_named(_copy(fn), name, doc)), attribute)


def install_keyed_members(cls: type, table: KeyedEnumTable) -> None:
    attribute = table.attribute

    def choices_for_key(owner: type, key: Any) -> list[Any]:
        return owner._enum_registry().keyed[attribute].choices_for_key(key)

    def choices_list_for_key(owner: type, key: Any, humanize: bool = False) -> list[str]:
        return owner._enum_registry().keyed[attribute].choices_list_for_key(key, humanize=humanize)

    def db_code(owner: type, label: Any, key: Any) -> Any:
        return owner._enum_registry().keyed[attribute].code_for(label, key)

    def db_value(owner: type, code: Any, key: Any) -> Any:
        return owner._enum_registry().keyed[attribute].label_for(code, key)

    def validate(owner: type, key: Any, label: Any) -> bool:
        return owner._enum_registry().keyed[attribute].validate(key, label)

    members = {
        f"{attribute}_choices_for_key": choices_for_key,
        f"{attribute}_choices_list_for_key": choices_list_for_key,
        f"db_{attribute}_code": db_code,
        f"db_{attribute}_value": db_value,
        f"validate_keyed_{attribute}_value": validate,
    }
    for name, fn in members.items():
        install(cls, name, classmethod(_named(fn, name, None)), attribute)

    for label in table.labels:
        def is_label(self: Any, _label: str = label) -> bool:
            return getattr(self, attribute) == _label

        def set_to(self: Any, _label: str = label) -> None:
            setattr(self, attribute, _label)

        name = f"is_{attribute}_{label}"
        install(cls, name, _named(is_label, name, f"True if {attribute} is {label!r}."), attribute)
        name = f"set_{attribute}_to_{label}"
        install(cls, name, _named(set_to, name, f"Set {attribute} to {label!r}."), attribute)


def _copy(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Fresh function object so two generated names never share ``__name__``."""

    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return fn(*args, **kwargs)

    return wrapper


__all__ = [
    "check_raw_key",
    "enum_attribute",
    "install",
    "install_class_methods",
    "install_keyed_members",
    "install_predicates",
    "install_setters",
    "is_mapped",
    "keyed_attribute",
    "predicate_name",
    "uninstall",
]
