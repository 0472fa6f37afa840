# tests/test_cli.py
"""Tests for the configloader command line interface."""

import json

import pytest
from click.testing import CliRunner

from configloader.cli import _parse_overrides, cli

TARGET = "sample_structures:ConfigWithEmbeds"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def mock_file(tmp_path):
    path = tmp_path / "mock.json"
    path.write_text(json.dumps({
        "Config": {"Field1": "value1", "Field2": 2, "Nested": {"Field3": True}},
        "Field4": 3.14,
    }))
    return str(path)


def invoke(runner, *args):
    return runner.invoke(cli, list(args), obj={})


class TestCheck:

    def test_ok(self, runner, mock_file):
        result = invoke(runner, "-t", TARGET, "-m", mock_file, "check")
        assert result.exit_code == 0, result.output
        assert "OK: 4 field(s) loaded into ConfigWithEmbeds" in result.output

    def test_unknown_field(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"FieldX": "valueX"}))
        result = invoke(runner, "-t", TARGET, "-m", str(path), "check")
        assert result.exit_code == 1
        assert "Unknown configuration field: 'FieldX'" in result.output

    def test_bad_target(self, runner):
        result = invoke(runner, "-t", "sample_structures:Missing", "check")
        assert result.exit_code == 1
        assert "cannot import target" in result.output

    def test_target_not_dataclass(self, runner):
        result = invoke(runner, "-t", "sample_structures:NOT_A_DATACLASS", "check")
        assert result.exit_code == 1
        assert "is not a dataclass" in result.output

    def test_missing_mock_file(self, runner):
        result = invoke(runner, "-t", TARGET, "-m", "/nonexistent/mock.json", "check")
        assert result.exit_code == 1

    def test_parse_strings_flag(self, runner):
        """A quoted JSON string for an int field only passes with --parse-strings."""
        strict = invoke(runner, "-t", TARGET, "--overrides", 'Field2:"7"', "check")
        assert strict.exit_code == 1
        assert "expected 'integer'" in strict.output

        lenient = invoke(runner, "-t", TARGET, "--overrides", 'Field2:"7"', "--parse-strings", "get", "Field2")
        assert lenient.exit_code == 0, lenient.output
        assert json.loads(lenient.output) == 7

    def test_alias_tag_option(self, runner):
        result = invoke(runner, "-t", TARGET, "--overrides", "field4:2.5", "--alias-tag", "yaml", "get", "Field4")
        assert json.loads(result.output) == 2.5


class TestDumpAndGet:

    def test_dump(self, runner, mock_file):
        result = invoke(runner, "-t", TARGET, "-m", mock_file, "dump")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["config"]["Nested"]["Field3"] is True
        assert data["Field4"] == 3.14

    def test_dump_flat(self, runner, mock_file):
        result = invoke(runner, "-t", TARGET, "-m", mock_file, "dump", "--flat")
        assert json.loads(result.output) == {
            "Config.Field1": "value1",
            "Config.Field2": 2,
            "Config.Nested.Field3": True,
            "Field4": 3.14,
        }

    def test_get_with_override(self, runner, mock_file):
        result = invoke(runner, "-t", TARGET, "-m", mock_file,
                        "--overrides", "Field1:newvalue1,Field2:5", "get", "Config.Field1")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == "newvalue1"

    def test_get_unknown(self, runner, mock_file):
        result = invoke(runner, "-t", TARGET, "-m", mock_file, "get", "Nope")
        assert result.exit_code == 1
        assert "Key not found: Nope" in result.output

    def test_later_mock_file_wins(self, runner, mock_file, tmp_path):
        second = tmp_path / "second.toml"
        second.write_text('Field4 = 1.5\n')
        result = invoke(runner, "-t", TARGET, "-m", mock_file, "-m", str(second), "get", "Field4")
        assert json.loads(result.output) == 1.5


class TestExplain:

    def test_layers_shown(self, runner, mock_file):
        result = invoke(runner, "-t", TARGET, "-m", mock_file,
                        "--overrides", 'Field1:"newvalue1"', "explain")
        assert result.exit_code == 0, result.output
        assert "config.Field1 = 'newvalue1'  ← override:Field1" in result.output
        assert "Field4 = 3.14  ← mock:Field4" in result.output

    def test_nothing_loaded(self, runner):
        result = invoke(runner, "-t", TARGET, "explain")
        assert result.output.strip() == "No fields loaded"


class TestParseOverrides:

    def test_json_and_plain_values(self):
        assert _parse_overrides('a:1,b:true,c:text,d:"q"') == {"a": 1, "b": True, "c": "text", "d": "q"}

    def test_empty(self):
        assert _parse_overrides(None) == {}
