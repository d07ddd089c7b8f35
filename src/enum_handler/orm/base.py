"""Declarative base with enum handling built in.

Uses SQLAlchemy 2.0 ``DeclarativeBase`` with a ``type_annotation_map``
that maps Python built-in types to portable SA column types, plus the
``EnumHandlerMixin`` so every model can ``define_enum``.

Applications that already own a declarative base can mix
``EnumHandlerMixin`` into it instead.
"""

from __future__ import annotations

import datetime

from sqlalchemy import JSON, DateTime, Integer, Text
from sqlalchemy.orm import DeclarativeBase

from enum_handler.orm.mixin import EnumHandlerMixin


class EnumBase(EnumHandlerMixin, DeclarativeBase):
    """Shared declarative base for enum-handled models.

    ``type_annotation_map``:

    * ``str``   -> ``Text``
    * ``int``   -> ``Integer``
    * ``bool``  -> ``Integer``  (SQLite has no native BOOLEAN)
    * ``datetime.datetime`` -> ``DateTime``
    * ``dict``  -> ``JSON``
    """

    type_annotation_map = {
        str: Text,
        int: Integer,
        bool: Integer,  # SQLite compat: 0/1
        datetime.datetime: DateTime,
        dict: JSON,
    }


__all__ = ["EnumBase"]
