"""
Emitter configuration.

Options are fixed when the emitter is created. Configurations can be built
in code or loaded from a YAML file.
"""

from pathlib import Path
from typing import Any, Dict, Union

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .types import ConfigurationError


logger = structlog.get_logger(__name__)

LINE_SEPARATORS = ("\n", "\r\n", "\r")


class EmitterConfig(BaseModel):
    """Options controlling how events are written."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    line_separator: str = Field("\n", description="Newline sequence used in pretty mode")
    indent_string: str = Field("  ", description="One indentation unit used in pretty mode")
    perform_indent: bool = Field(False, description="Enable pretty-printing")
    write_document_declaration: bool = Field(True, description="Write <?xml ...?> before the first markup")
    normalize_empty_elements: bool = Field(True, description="Write empty elements as <tag/>")
    cdata_to_characters: bool = Field(False, description="Write CDATA events as escaped text")
    keep_element_names_stack: bool = Field(True, description="Remember open element names")
    autopad_comments: bool = Field(True, description="Surround comment bodies with spaces")

    @field_validator("line_separator")
    @classmethod
    def validate_line_separator(cls, v):
        if v not in LINE_SEPARATORS:
            raise ValueError(f"line_separator must be one of {LINE_SEPARATORS!r}")
        return v

    @field_validator("indent_string")
    @classmethod
    def validate_indent_string(cls, v):
        if any(c not in " \t" for c in v):
            raise ValueError("indent_string may only contain spaces and tabs")
        return v

    @classmethod
    def pretty(cls, **overrides) -> "EmitterConfig":
        """Create configuration for indented, human-readable output."""
        return cls(**{"perform_indent": True, **overrides})

    @classmethod
    def compact(cls, **overrides) -> "EmitterConfig":
        """Create configuration for output without added whitespace."""
        return cls(**{"perform_indent": False, **overrides})

    def with_options(self, **changes) -> "EmitterConfig":
        """Return a validated copy with some options changed."""
        return type(self)(**{**self.model_dump(), **changes})


def load_emitter_config(path: Union[str, Path]) -> EmitterConfig:
    """
    Load emitter configuration from a YAML file.

    The options may sit at the top level of the document or under an
    ``emitter`` key.

    Args:
        path: YAML file path

    Returns:
        Validated configuration
    """
    config_path = Path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to read emitter config", path=str(config_path), error=str(e))
        raise ConfigurationError(f"Failed to read {config_path}: {e}") from e

    return config_from_mapping(data, source=str(config_path))


def config_from_mapping(data: Any, source: str = "<mapping>") -> EmitterConfig:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Emitter config in {source} must be a mapping")

    options: Dict[str, Any] = data.get("emitter", data)
    if not isinstance(options, dict):
        raise ConfigurationError(f"'emitter' section in {source} must be a mapping")

    try:
        config = EmitterConfig(**options)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid emitter config in {source}: {e}") from e

    logger.debug("Loaded emitter config", source=source, perform_indent=config.perform_indent)
    return config
