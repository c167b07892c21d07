"""Tests for configuration loading and ValidationOptions."""

import json
import os
import tempfile

import pytest

from kubelint.core.config import as_bool, as_int, get_config_value, load_config
from kubelint.core.pipeline import ValidationOptions


class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_file_returns_empty_dict(self):
        """Test that a missing config file is not an error."""
        assert load_config("/nonexistent/kubelint.json") == {}

    def test_invalid_json_returns_empty_dict(self):
        """Test that a broken config file is ignored."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "kubelint.json")
            with open(path, "w") as f:
                f.write("{not json")
            assert load_config(path) == {}

    def test_loads_json(self):
        """Test loading a valid config file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "kubelint.json")
            with open(path, "w") as f:
                json.dump({"validation": {"workers": 4}}, f)
            assert load_config(path) == {"validation": {"workers": 4}}


class TestGetConfigValue:
    """Tests for get_config_value()."""

    def test_nested_lookup(self):
        """Test walking nested keys."""
        config = {"validation": {"strict": True}}
        assert get_config_value(["validation", "strict"], False, config) is True

    def test_default(self, monkeypatch):
        """Test the default when neither config nor environment has a value."""
        monkeypatch.delenv("VALIDATION_WORKERS", raising=False)
        assert get_config_value(["validation", "workers"], 1, {}) == 1

    def test_environment_fallback(self, monkeypatch):
        """Test the upper-snake environment variable fallback."""
        monkeypatch.setenv("VALIDATION_STRICT", "true")
        assert get_config_value(["validation", "strict"], False, {}) == "true"

    def test_config_wins_over_environment(self, monkeypatch):
        """Test that the config file takes precedence."""
        monkeypatch.setenv("VALIDATION_WORKERS", "8")
        assert get_config_value(["validation", "workers"], 1, {"validation": {"workers": 2}}) == 2


class TestCoercion:
    """Tests for as_bool() and as_int()."""

    def test_as_bool(self):
        """Test boolean coercion of strings and values."""
        assert as_bool("yes") is True
        assert as_bool("0") is False
        assert as_bool(True) is True
        with pytest.raises(ValueError):
            as_bool("maybe")

    def test_as_int(self):
        """Test integer coercion."""
        assert as_int("4") == 4
        with pytest.raises(ValueError):
            as_int(True)


class TestValidationOptions:
    """Tests for ValidationOptions.from_config()."""

    def test_defaults(self, monkeypatch):
        """Test default options."""
        for name in ("VALIDATION_STRICT", "VALIDATION_WORKERS", "VALIDATION_DISCOVER_CRDS"):
            monkeypatch.delenv(name, raising=False)
        assert ValidationOptions.from_config({}) == ValidationOptions()

    def test_from_config(self):
        """Test options read from the validation section."""
        config = {"validation": {"strict": True, "workers": 3, "discover_crds": False}}
        options = ValidationOptions.from_config(config)

        assert options == ValidationOptions(strict=True, workers=3, discover_crds=False)

    def test_from_environment(self, monkeypatch):
        """Test string values from the environment."""
        monkeypatch.setenv("VALIDATION_STRICT", "1")
        monkeypatch.setenv("VALIDATION_WORKERS", "0")
        options = ValidationOptions.from_config({})

        assert options.strict is True
        assert options.workers == 1
