"""
Tests for validation option resolution.

Precedence: overrides > environment > settings > defaults.
"""

import pytest

from schema_builder.config import ValidationOptions, resolve_validation_options


class TestResolveValidationOptions:

    def test_defaults(self):
        assert resolve_validation_options() == ValidationOptions(True, True, True)

    def test_instance_is_returned_unchanged(self, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_USE_DEFAULTS", "false")
        options = ValidationOptions()
        assert resolve_validation_options(options) is options

    def test_settings(self):
        options = resolve_validation_options(settings={"coerce_types": "no", "other": 1})
        assert options.coerce_types is False
        assert options.remove_additional is True

    def test_environment_beats_settings(self, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_REMOVE_ADDITIONAL", "0")
        options = resolve_validation_options(settings={"remove_additional": True})
        assert options.remove_additional is False

    def test_overrides_beat_environment(self, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_COERCE_TYPES", "false")
        options = resolve_validation_options({"coerce_types": True})
        assert options.coerce_types is True

    def test_none_override_is_ignored(self, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_USE_DEFAULTS", "off")
        assert resolve_validation_options({"use_defaults": None}).use_defaults is False

    @pytest.mark.parametrize("text,expected", [
        ("1", True), ("TRUE", True), ("yes", True), ("On", True),
        ("0", False), ("false", False), ("No", False), ("off", False),
    ])
    def test_environment_booleans(self, monkeypatch, text, expected):
        monkeypatch.setenv("SCHEMA_BUILDER_USE_DEFAULTS", text)
        assert resolve_validation_options().use_defaults is expected

    def test_invalid_boolean(self, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_COERCE_TYPES", "maybe")
        with pytest.raises(ValueError, match="SCHEMA_BUILDER_COERCE_TYPES"):
            resolve_validation_options()

    def test_unknown_override(self):
        with pytest.raises(ValueError, match="Unknown validation option 'strict'"):
            resolve_validation_options({"strict": True})

    def test_to_dict(self):
        assert ValidationOptions(coerce_types=False).to_dict() == {
            "coerce_types": False,
            "remove_additional": True,
            "use_defaults": True,
        }
