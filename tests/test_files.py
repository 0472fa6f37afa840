# tests/test_files.py
"""
Tests for mock data files.

Covers:
    - load_mock_file() for JSON, TOML and .env files
    - flattening of nested objects/tables into dotted paths
    - MockLoader.from_file()
"""

import json

import pytest
import toml

from configloader.exceptions import MockFileError
from configloader.loader import MockLoader, load_mock_file
from configloader.utils import expand_path, flatten_mapping
from sample_structures import Config, ConfigWithEmbeds

NESTED = {"Field1": "value1", "Field2": 2, "Nested": {"Field3": True}}
FLAT = {"Field1": "value1", "Field2": 2, "Nested.Field3": True}


@pytest.fixture
def json_mock(tmp_path):
    path = tmp_path / "mock.json"
    path.write_text(json.dumps(NESTED))
    return str(path)


@pytest.fixture
def toml_mock(tmp_path):
    path = tmp_path / "mock.toml"
    path.write_text(toml.dumps(NESTED))
    return str(path)


@pytest.fixture
def dotenv_mock(tmp_path):
    path = tmp_path / ".env"
    path.write_text("Field1=value1\nField2=2\nNested.Field3=true\n")
    return str(path)


class TestLoadMockFile:

    def test_json(self, json_mock):
        assert load_mock_file(json_mock) == FLAT

    def test_toml(self, toml_mock):
        assert load_mock_file(toml_mock) == FLAT

    def test_dotenv(self, dotenv_mock):
        """Values from .env files are parsed into scalars."""
        assert load_mock_file(dotenv_mock) == FLAT

    def test_dotted_keys_kept(self, tmp_path):
        """Keys that are already dotted pass through flattening."""
        path = tmp_path / "mock.json"
        path.write_text(json.dumps({"Config.Nested": {"Field3": False}, "Field4": 1.5}))
        assert load_mock_file(str(path)) == {"Config.Nested.Field3": False, "Field4": 1.5}

    def test_expands_env_var_path(self, tmp_path, monkeypatch, json_mock):
        monkeypatch.setenv("MOCK_DIR", str(tmp_path))
        assert load_mock_file("$MOCK_DIR/mock.json") == FLAT

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            load_mock_file("/nonexistent/mock.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{invalid json")
        with pytest.raises(MockFileError):
            load_mock_file(str(path))

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text('[section\nkey = "broken')
        with pytest.raises(MockFileError):
            load_mock_file(str(path))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "mock.yaml"
        path.write_text("Field1: value1")
        with pytest.raises(MockFileError, match="Unsupported"):
            load_mock_file(str(path))

    def test_top_level_not_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(MockFileError, match="object"):
            load_mock_file(str(path))


class TestFromFile:

    def test_from_json(self, json_mock):
        config = MockLoader.from_file(json_mock).load(Config())
        assert (config.Field1, config.Field2, config.Nested.Field3) == ("value1", 2, True)

    def test_from_toml_with_override(self, toml_mock):
        loader = MockLoader.from_file(toml_mock)
        loader.override("Nested.Field3", False)
        assert loader.load(Config()).Nested.Field3 is False

    def test_kwargs_forwarded(self, tmp_path):
        """Constructor keywords are passed through."""
        path = tmp_path / "mock.toml"
        path.write_text(toml.dumps({"Config": {"field1": "tagged"}, "field4": 2.5}))
        config = MockLoader.from_file(str(path), alias_tag="yaml").load(ConfigWithEmbeds())
        assert config.Field1 == "tagged"
        assert config.Field4 == 2.5


class TestUtils:

    def test_flatten_mapping(self):
        assert flatten_mapping({"a": {"b": {"c": 1}}, "d": 2}) == {"a.b.c": 1, "d": 2}

    def test_flatten_drops_empty_tables(self):
        assert flatten_mapping({"a": {}}) == {}

    def test_expand_path_none(self):
        assert expand_path(None) is None

    def test_expand_user(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_path("~/mock.json") == str(tmp_path / "mock.json")
