"""
Streaming XML document emitter.

This package writes XML 1.0/1.1 text from a sequence of document events:
- Namespace scoping with minimal declarations
- Attribute and text escaping
- Optional pretty-printing
- Deterministic attribute and declaration order
"""

from .config import EmitterConfig, load_emitter_config
from .emitter import DocumentState, Emitter
from .events import (
    CData, Characters, Comment, EmptyElement, EndElement, ProcessingInstruction,
    StartDocument, StartElement, Whitespace, write_events,
)
from .indent import IndentController, IndentState
from .logging import configure_logging, get_logger
from .names import Attribute, Name
from .namespace import NamespaceStack
from .tree import emit_tree, serialize_tree
from .types import (
    ConfigurationError, DocumentStartAlreadyEmitted, EmitterError, EmitterErrorKind,
    EmitterIOError, EndElementMismatch, InvalidName, InvalidPayload,
    InvalidWhitespaceEvent, UnexpectedEvent, XmlVersion,
)

__all__ = [
    # Core classes
    "Emitter",
    "NamespaceStack",
    "IndentController",
    # Configuration
    "EmitterConfig",
    "load_emitter_config",
    # Logging
    "configure_logging",
    "get_logger",
    # Names and state
    "Name",
    "Attribute",
    "DocumentState",
    "IndentState",
    "XmlVersion",
    # Events
    "StartDocument",
    "ProcessingInstruction",
    "Comment",
    "StartElement",
    "EmptyElement",
    "EndElement",
    "Characters",
    "CData",
    "Whitespace",
    "write_events",
    # Trees
    "emit_tree",
    "serialize_tree",
    # Exceptions
    "EmitterError",
    "EmitterErrorKind",
    "EmitterIOError",
    "DocumentStartAlreadyEmitted",
    "UnexpectedEvent",
    "InvalidWhitespaceEvent",
    "InvalidName",
    "InvalidPayload",
    "EndElementMismatch",
    "ConfigurationError",
]
