"""
Type definitions for the XML emitter.
"""

from enum import Enum
from typing import Optional


class EmitterErrorKind(Enum):
    """Kinds of failures reported by the emitter."""
    IO_ERROR = "io_error"
    DOCUMENT_START_ALREADY_EMITTED = "document_start_already_emitted"
    UNEXPECTED_EVENT = "unexpected_event"
    INVALID_WHITESPACE_EVENT = "invalid_whitespace_event"
    INVALID_NAME = "invalid_name"
    INVALID_PAYLOAD = "invalid_payload"
    END_ELEMENT_MISMATCH = "end_element_mismatch"


class XmlVersion(Enum):
    """XML versions the emitter can declare."""
    V1_0 = "1.0"
    V1_1 = "1.1"

    def __str__(self) -> str:
        return self.value


class EmitterError(Exception):
    """Base exception for emitter errors."""

    kind: EmitterErrorKind = EmitterErrorKind.UNEXPECTED_EVENT

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class EmitterIOError(EmitterError):
    """The byte sink failed while writing."""
    kind = EmitterErrorKind.IO_ERROR

    def __init__(self, cause: BaseException):
        super().__init__(f"Input/output error: {cause}", cause)


class DocumentStartAlreadyEmitted(EmitterError):
    """The XML declaration was already written."""
    kind = EmitterErrorKind.DOCUMENT_START_ALREADY_EMITTED


class UnexpectedEvent(EmitterError):
    """The event is not allowed in the current document state."""
    kind = EmitterErrorKind.UNEXPECTED_EVENT


class InvalidWhitespaceEvent(EmitterError):
    """A whitespace event carried non-whitespace characters."""
    kind = EmitterErrorKind.INVALID_WHITESPACE_EVENT


class InvalidName(EmitterError):
    """A name or namespace binding is not valid XML."""
    kind = EmitterErrorKind.INVALID_NAME


class InvalidPayload(EmitterError):
    """Content would make the output ill-formed."""
    kind = EmitterErrorKind.INVALID_PAYLOAD


class EndElementMismatch(EmitterError):
    """End element name does not match the open element."""
    kind = EmitterErrorKind.END_ELEMENT_MISMATCH

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected end of element '{expected}', got '{actual}'")


class ConfigurationError(Exception):
    """Emitter configuration could not be loaded."""
    pass
