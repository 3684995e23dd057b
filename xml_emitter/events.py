"""
Document event objects.

Each event carries the payload of one ``Emitter.emit_*`` call, so a document
can be built as a list of events and replayed onto an emitter.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Tuple, Union

from .names import Name
from .types import XmlVersion


@dataclass(frozen=True)
class StartDocument:
    version: XmlVersion = XmlVersion.V1_0
    encoding: str = "utf-8"
    standalone: Optional[bool] = None


@dataclass(frozen=True)
class ProcessingInstruction:
    name: str
    data: Optional[str] = None


@dataclass(frozen=True)
class Comment:
    content: str


@dataclass(frozen=True)
class StartElement:
    """Opening of an element; ``namespace`` lists bindings to declare on it."""
    name: Union[Name, str]
    attributes: Tuple[Any, ...] = field(default_factory=tuple)
    namespace: Optional[Any] = None


@dataclass(frozen=True)
class EmptyElement:
    name: Union[Name, str]
    attributes: Tuple[Any, ...] = field(default_factory=tuple)
    namespace: Optional[Any] = None


@dataclass(frozen=True)
class EndElement:
    name: Optional[Union[Name, str]] = None


@dataclass(frozen=True)
class Characters:
    content: str


@dataclass(frozen=True)
class CData:
    content: str


@dataclass(frozen=True)
class Whitespace:
    content: str


Event = Union[
    StartDocument, ProcessingInstruction, Comment, StartElement, EmptyElement,
    EndElement, Characters, CData, Whitespace,
]


def write_events(emitter, sink, events: Iterable[Event]) -> int:
    """
    Emit every event of a stream in order.

    Args:
        emitter: Emitter to drive
        sink: Byte sink
        events: Events to emit

    Returns:
        Number of events emitted
    """
    count = 0
    for event in events:
        emitter.emit(sink, event)
        count += 1
    return count
