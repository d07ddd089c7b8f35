"""Label text helpers: humanize, dehumanize, pluralize and value normalization."""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from typing import Any

from enum_handler.core.errors import EnumDefinitionError

_WHITESPACE = re.compile(r"\s")
_ES_SUFFIX = re.compile(r"(s|x|z|ch|sh)$")
_CONSONANT_Y = re.compile(r"[^aeiou]y$")


def humanize(value: Any) -> str:
    """``"big_dog"`` -> ``"Big dog"``."""
    text = str(value).replace("_", " ").strip()
    if not text:
        return text
    return text[0].upper() + text[1:].lower()


def dehumanize(value: Any) -> Any:
    """Turn user input back into a label.

    Strings are lower-cased with each whitespace character replaced by an
    underscore, so ``"Big Dog"``, ``"big dog"`` and ``"big_dog"`` all become
    ``"big_dog"``. Enum members become their lower-cased name. Anything else
    is returned untouched.
    """
    if isinstance(value, enum.Enum):
        return value.name.lower()
    if isinstance(value, str):
        return _WHITESPACE.sub("_", value).lower()
    return value


def pluralize(word: str) -> str:
    if _CONSONANT_Y.search(word):
        return word[:-1] + "ies"
    if _ES_SUFFIX.search(word):
        return word + "es"
    return word + "s"


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return not value
    return False


def normalize_values(values: Any) -> dict[str, Any]:
    """Build the label -> code mapping for an enum definition.

    * mapping: used as given (``{"active": 0, "terminated": 1}``)
    * ``enum.Enum`` subclass: lower-cased member names to member values
    * sequence of labels: each label is stored as itself with underscores
      turned into spaces (``"big_dog"`` is persisted as ``"big dog"``)
    """
    if isinstance(values, type) and issubclass(values, enum.Enum):
        mapping = {member.name.lower(): member.value for member in values}
    elif isinstance(values, Mapping):
        mapping = dict(values)
    elif isinstance(values, (list, tuple)):
        mapping = {label: str(label).replace("_", " ") for label in values}
    else:
        raise EnumDefinitionError(
            f"Enum values must be a mapping, a sequence of labels or an Enum class, "
            f"got {type(values).__name__}"
        )

    if not mapping:
        raise EnumDefinitionError("Enum definition has no values")

    bad_labels = [label for label in mapping if not isinstance(label, str) or not label]
    if bad_labels:
        raise EnumDefinitionError(f"Enum labels must be non-empty strings: {bad_labels!r}")

    seen: dict[Any, str] = {}
    for label, code in mapping.items():
        if code in seen:
            raise EnumDefinitionError(
                f"Code {code!r} is used by both {seen[code]!r} and {label!r}"
            )
        seen[code] = label

    return mapping


__all__ = ["humanize", "dehumanize", "pluralize", "is_blank", "normalize_values"]
