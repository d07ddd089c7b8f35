"""Tests for the declarative base and engine/session helpers."""

from __future__ import annotations

import datetime

from sqlalchemy import JSON, DateTime, Integer, Text, inspect, text

from enum_handler import EnumBase, EnumHandlerMixin, create_enum_engine, enum_session_factory
from enum_handler.orm.session import EnumSession
from tests._support.models import User


class TestEnumBase:
    """Verify the declarative base type_annotation_map and mixin."""

    def test_type_map_str(self):
        assert EnumBase.type_annotation_map[str] is Text

    def test_type_map_int(self):
        assert EnumBase.type_annotation_map[int] is Integer

    def test_type_map_bool(self):
        assert EnumBase.type_annotation_map[bool] is Integer

    def test_type_map_datetime(self):
        assert EnumBase.type_annotation_map[datetime.datetime] is DateTime

    def test_type_map_dict(self):
        assert EnumBase.type_annotation_map[dict] is JSON

    def test_mixin(self):
        assert issubclass(EnumBase, EnumHandlerMixin)

    def test_tables_created(self, engine):
        assert {"users", "books", "preferences", "dishes", "book_tags"} <= set(inspect(engine).get_table_names())


class TestEngine:
    def test_memory_engine_shares_connection(self, engine):
        with engine.begin() as conn:
            conn.execute(text("CREATE TABLE scratch (id INTEGER)"))
        with engine.connect() as conn:
            assert conn.execute(text("SELECT count(*) FROM scratch")).scalar() == 0

    def test_foreign_keys_enabled(self, engine):
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_file_engine_uses_wal(self, tmp_path):
        eng = create_enum_engine(f"sqlite:///{tmp_path / 'enums.db'}")
        with eng.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        eng.dispose()


class TestSession:
    def test_factory_produces_enum_session(self, engine):
        with enum_session_factory(engine)() as session:
            assert isinstance(session, EnumSession)
            assert session.expire_on_commit is False

    def test_attributes_survive_commit(self, engine):
        with enum_session_factory(engine)() as session:
            user = User(name="gina", status="active", role="customer")
            session.add(user)
            session.commit()
            assert "_status" not in inspect(user).expired_attributes
            assert user.status == "active"
