"""Tests for the enum-handler CLI (inspect, translate, rewrite, config, --version)."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from enum_handler.cli.app import app
from enum_handler.cli.utils import load_model, parse_value

runner = CliRunner()

MODELS = "tests._support.models"


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("enum-handler ")

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "inspect" in result.output


class TestInspect:
    def test_json(self):
        result = runner.invoke(app, ["inspect", f"{MODELS}:Book", "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["model"] == "Book"
        (condition,) = payload["enums"]
        assert condition["attribute"] == "condition"
        assert condition["values"] == {"mint": 0, "used": 1, "excellent": 2}
        assert condition["sets"] == {"primo": ["mint", "excellent"]}
        assert condition["primary"] is True

    def test_contexts_and_keys(self):
        contexts = json.loads(runner.invoke(app, ["inspect", f"{MODELS}:Preference", "--json"]).output)
        assert [e["context"] for e in contexts["enums"]] == ["User", "Book"]

        keyed = json.loads(runner.invoke(app, ["inspect", f"{MODELS}:Dish", "--json"]).output)
        assert [e["context"] for e in keyed["enums"]] == ["food_type=fowl", "food_type=beef", "food_type=egg"]

    def test_table(self):
        result = runner.invoke(app, ["inspect", f"{MODELS}:User"])
        assert result.exit_code == 0
        assert "User enums" in result.output

    def test_bad_model_path(self):
        result = runner.invoke(app, ["inspect", "no_such_module:Thing"])
        assert result.exit_code == 2


class TestTranslate:
    def test_labels_and_sets(self):
        result = runner.invoke(app, ["translate", f"{MODELS}:Book", "condition", "used", "primo", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"value": "used", "code": 1},
            {"value": "primo", "code": [0, 2]},
        ]

    def test_list_value(self):
        result = runner.invoke(app, ["translate", f"{MODELS}:Book", "condition", "mint,used", "--json"])
        assert json.loads(result.output) == [{"value": ["mint", "used"], "code": [0, 1]}]

    def test_context(self):
        result = runner.invoke(
            app, ["translate", f"{MODELS}:Preference", "value", "email", "--context", "User", "--json"]
        )
        assert json.loads(result.output) == [{"value": "email", "code": "e"}]

    def test_illegal_label_exits_1(self):
        result = runner.invoke(app, ["translate", f"{MODELS}:Book", "condition", "shabby"])
        assert result.exit_code == 1
        assert "Illegal condition value" in result.output

    def test_table_output(self):
        result = runner.invoke(app, ["translate", f"{MODELS}:User", "status", "inactive"])
        assert result.exit_code == 0
        assert "suspended" in result.output


class TestRewrite:
    def test_json(self):
        result = runner.invoke(
            app, ["rewrite", f"{MODELS}:User", "status = ? AND role = ?", "inactive", "customer", "--json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "sql": "users.status IN :p0 AND users.role = :p1",
            "params": {"p0": ["suspended", "terminated"], "p1": "customer"},
        }

    def test_numbers_and_lists(self):
        result = runner.invoke(app, ["rewrite", f"{MODELS}:Book", "condition = ? AND id > ?", "mint,used", "2", "--json"])
        assert json.loads(result.output)["params"] == {"p0": [0, 1], "p1": 2}

    def test_mismatch_exits_1(self):
        result = runner.invoke(app, ["rewrite", f"{MODELS}:User", "status = ?"])
        assert result.exit_code == 1

    def test_plain_output(self):
        result = runner.invoke(app, ["rewrite", f"{MODELS}:User", "status = ?", "!active"])
        assert result.exit_code == 0
        assert "users.status <> :p0" in result.output


class TestConfig:
    def test_json(self, monkeypatch):
        monkeypatch.setenv("ENUM_HANDLER_QUALIFY_COLUMNS", "false")
        result = runner.invoke(app, ["config", "show", "--format", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["qualify_columns"] is False

    def test_env(self):
        result = runner.invoke(app, ["config", "show", "--format", "env"])
        assert result.exit_code == 0
        assert "ENUM_HANDLER_STRICT_DEFAULT=True" in result.output

    def test_table(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "generate_scopes" in result.output

    def test_unknown_format(self):
        result = runner.invoke(app, ["config", "show", "--format", "yaml"])
        assert result.exit_code == 2


class TestUtils:
    @pytest.mark.parametrize(
        "raw, expected",
        [("active", "active"), ("42", 42), ("-3", -3), ("a,b", ["a", "b"]), ("1, 2", [1, 2])],
    )
    def test_parse_value(self, raw, expected):
        assert parse_value(raw) == expected

    def test_parse_value_without_numbers(self):
        assert parse_value("42", numbers=False) == "42"

    def test_load_model(self):
        from tests._support.models import User

        assert load_model(f"{MODELS}:User") is User

    @pytest.mark.parametrize("path", ["nocolon", f"{MODELS}:Missing", "json:dumps"])
    def test_load_model_rejects(self, path):
        import typer

        with pytest.raises(typer.BadParameter):
            load_model(path)
