"""
Tests for emitter configuration.
"""

import pytest
from pydantic import ValidationError

from xml_emitter import ConfigurationError, EmitterConfig, load_emitter_config
from xml_emitter.config import config_from_mapping


class TestEmitterConfig:
    """Test configuration defaults and validation."""

    def test_defaults(self):
        config = EmitterConfig()
        assert config.line_separator == "\n"
        assert config.indent_string == "  "
        assert config.perform_indent is False
        assert config.write_document_declaration is True
        assert config.normalize_empty_elements is True
        assert config.cdata_to_characters is False
        assert config.keep_element_names_stack is True
        assert config.autopad_comments is True

    def test_immutable(self):
        config = EmitterConfig()
        with pytest.raises(ValidationError):
            config.perform_indent = True

    def test_rejects_unknown_options(self):
        with pytest.raises(ValidationError):
            EmitterConfig(indent=4)

    @pytest.mark.parametrize("separator", ["", " ", "\n\n", "<br/>"])
    def test_invalid_line_separator(self, separator):
        with pytest.raises(ValidationError, match="line_separator"):
            EmitterConfig(line_separator=separator)

    def test_invalid_indent_string(self):
        with pytest.raises(ValidationError, match="indent_string"):
            EmitterConfig(indent_string="--")

    def test_pretty_and_compact(self):
        assert EmitterConfig.pretty().perform_indent is True
        assert EmitterConfig.compact().perform_indent is False
        assert EmitterConfig.pretty(indent_string="\t").indent_string == "\t"

    def test_with_options_validates(self):
        config = EmitterConfig().with_options(perform_indent=True)
        assert config.perform_indent is True
        with pytest.raises(ValidationError):
            EmitterConfig().with_options(line_separator="x")


class TestConfigLoading:
    """Test YAML configuration loading."""

    def test_load_top_level(self, tmp_path):
        path = tmp_path / "emitter.yaml"
        path.write_text("perform_indent: true\nindent_string: \"    \"\n")
        config = load_emitter_config(path)
        assert config.perform_indent is True
        assert config.indent_string == "    "

    def test_load_emitter_section(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("emitter:\n  autopad_comments: false\n")
        assert load_emitter_config(path).autopad_comments is False

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_emitter_config(path) == EmitterConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Failed to read"):
            load_emitter_config(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("perform_indent: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_emitter_config(path)

    def test_invalid_values(self):
        with pytest.raises(ConfigurationError, match="Invalid emitter config"):
            config_from_mapping({"perform_indent": "sometimes"})

    def test_non_mapping(self):
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            config_from_mapping(["perform_indent"])
