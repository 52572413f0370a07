"""Tests for ParsingConfiguration."""

import json

import pytest

from kra_reader.shared import (
    ConfigValidationError,
    ParsingConfiguration,
    ShouldLoadFiles,
)


def only_paint_layers(node):
    return node.nodetype == "paintlayer"


class TestPresets:
    """Tests for the preset constructors."""

    def test_metadata_only(self):
        """Test the default configuration."""
        config = ParsingConfiguration.metadata_only()
        assert config == ParsingConfiguration()
        assert config.should_load_files is ShouldLoadFiles.NEVER
        assert not config.loads_any_files
        assert not config.should_load_composited_images

    def test_everything(self):
        """Test loading every payload."""
        config = ParsingConfiguration.everything()
        assert config.loads_any_files
        assert config.should_load_composited_images
        assert config.should_load(object())

    def test_conditional(self):
        """Test that the condition decides per node."""

        class FakeNode:
            def __init__(self, nodetype):
                self.nodetype = nodetype

        config = ParsingConfiguration.conditional(only_paint_layers)
        assert config.should_load(FakeNode("paintlayer"))
        assert not config.should_load(FakeNode("shapelayer"))


class TestValidation:
    """Tests for configuration validation."""

    def test_condition_required(self):
        """Test CONDITION without a callable."""
        with pytest.raises(ConfigValidationError) as excinfo:
            ParsingConfiguration(should_load_files=ShouldLoadFiles.CONDITION)
        assert excinfo.value.field_name == "load_condition"
        assert excinfo.value.suggestions

    def test_condition_not_callable(self):
        """Test CONDITION with something that cannot be called."""
        with pytest.raises(ConfigValidationError):
            ParsingConfiguration(
                should_load_files=ShouldLoadFiles.CONDITION, load_condition="paintlayer"
            )

    def test_condition_without_mode(self):
        """Test a condition that would be ignored."""
        with pytest.raises(ConfigValidationError):
            ParsingConfiguration(load_condition=only_paint_layers)

    def test_mode_type(self):
        """Test that the mode must be an enum member."""
        with pytest.raises(ConfigValidationError):
            ParsingConfiguration(should_load_files="ALWAYS")


class TestSerialization:
    """Tests for dictionary and JSON conversion."""

    def test_to_dict(self):
        """Test the dictionary form of a conditional configuration."""
        data = ParsingConfiguration.conditional(only_paint_layers).to_dict()
        assert data == {
            "should_load_files": "CONDITION",
            "load_condition": "only_paint_layers",
            "should_load_composited_images": False,
        }

    def test_to_json(self):
        """Test the JSON form."""
        data = json.loads(ParsingConfiguration.everything().to_json())
        assert data["should_load_files"] == "ALWAYS"
        assert data["load_condition"] is None

    def test_from_dict(self):
        """Test restoring a configuration."""
        config = ParsingConfiguration.everything()
        assert ParsingConfiguration.from_dict(config.to_dict()) == config

    def test_from_dict_rejects_condition(self):
        """Test that a condition cannot be restored."""
        with pytest.raises(ConfigValidationError):
            ParsingConfiguration.from_dict({"should_load_files": "CONDITION"})

    def test_from_dict_unknown_mode(self):
        """Test an unknown mode name."""
        with pytest.raises(ConfigValidationError) as excinfo:
            ParsingConfiguration.from_dict({"should_load_files": "SOMETIMES"})
        assert "SOMETIMES" in str(excinfo.value)

    def test_override(self):
        """Test creating a modified copy."""
        config = ParsingConfiguration.metadata_only()
        changed = config.override(should_load_composited_images=True)
        assert changed.should_load_composited_images
        assert not config.should_load_composited_images
