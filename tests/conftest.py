import io
from typing import Generator

import pytest

from xml_emitter import Emitter, EmitterConfig


class FailingSink:
    """Sink whose writes always fail."""

    def __init__(self):
        self.attempts = 0

    def write(self, data: bytes) -> int:
        self.attempts += 1
        raise OSError("disk full")


@pytest.fixture
def sink() -> Generator[io.BytesIO, None, None]:
    """In-memory byte sink."""
    buffer = io.BytesIO()
    yield buffer
    buffer.close()


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture
def pretty_config() -> EmitterConfig:
    """Pretty-printing configuration with two-space indentation."""
    return EmitterConfig(perform_indent=True, indent_string="  ", line_separator="\n")


@pytest.fixture
def emitter() -> Emitter:
    """Emitter with default (compact) configuration."""
    return Emitter()


@pytest.fixture
def pretty_emitter(pretty_config) -> Emitter:
    return Emitter(pretty_config)


@pytest.fixture
def bare_emitter() -> Emitter:
    """Compact emitter that does not write the XML declaration."""
    return Emitter(EmitterConfig(write_document_declaration=False))
