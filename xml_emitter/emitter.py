"""
Streaming XML emitter.

The emitter turns document events into XML text written to a byte sink.
It keeps only what the open elements need: the namespace bindings in scope,
the indentation context and the names of the open elements.
"""

import codecs
import functools
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import structlog

from . import escape
from .config import EmitterConfig
from .events import (
    CData, Characters, Comment, EmptyElement, EndElement, Event,
    ProcessingInstruction, StartDocument, StartElement, Whitespace,
)
from .indent import IndentController
from .names import (
    NS_NO_PREFIX, NS_XML_PREFIX, NS_XML_URI, NS_XMLNS_PREFIX, NS_XMLNS_URI,
    Attribute, Name, as_name, is_ncname, is_whitespace_char,
)
from .namespace import NamespaceStack
from .types import (
    DocumentStartAlreadyEmitted, EmitterError, EmitterIOError, EndElementMismatch,
    InvalidName, InvalidPayload, InvalidWhitespaceEvent, UnexpectedEvent, XmlVersion,
)


logger = structlog.get_logger(__name__)

_ENCODING_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9._-]*")

NameLike = Union[Name, str]
AttributesLike = Union[Mapping, Iterable[Union[Attribute, Tuple[NameLike, str]]], None]
NamespaceLike = Union[Mapping, Iterable[Tuple[Optional[str], str]], None]


class DocumentState(Enum):
    """Where the emitter is in the document."""
    BEFORE_DOCUMENT = "before_document"
    IN_PROLOG = "in_prolog"
    IN_ELEMENT = "in_element"
    AFTER_DOCUMENT = "after_document"


@dataclass(frozen=True)
class OpenElement:
    """An element whose start tag has been written."""

    qualified: str
    local: str
    prefix: str
    namespace: Optional[str]

    def matches(self, name: Name) -> bool:
        if name.local != self.local:
            return False
        if name.namespace is not None:
            if name.namespace != (self.namespace or ""):
                return False
            return name.prefix is None or name.prefix == self.prefix
        return name.effective_prefix == self.prefix


@dataclass
class PreparedTag:
    """A validated start tag ready to be written."""

    element: OpenElement
    declarations: List[Tuple[str, str]]
    attribute_count: int
    data: bytes


def _event(method):
    """Count successful events and log rejected ones."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            result = method(self, *args, **kwargs)
        except EmitterIOError:
            raise
        except EmitterError as e:
            self.logger.debug("Event rejected",
                              operation=method.__name__,
                              kind=e.kind.value,
                              error=e.message)
            raise
        self.stats["events_emitted"] += 1
        return result
    return wrapper


class Emitter:
    """
    Event-driven XML writer.

    Every ``emit_*`` method takes the byte sink as its first argument; the
    sink is any object with a ``write(bytes)`` method and is not owned by
    the emitter. Methods raise an ``EmitterError`` subclass on failure. A
    rejected event leaves both the output and the emitter untouched. An
    ``EmitterIOError`` means the sink failed part way and the emitter
    should be discarded.

    Not thread-safe.
    """

    def __init__(self, config: Optional[EmitterConfig] = None):
        """
        Initialize emitter.

        Args:
            config: Emitter configuration
        """
        self.config = config or EmitterConfig()
        self.logger = logger.bind(component="Emitter")

        self._nst = NamespaceStack()
        self._indent = IndentController(
            line_separator=self.config.line_separator,
            indent_string=self.config.indent_string,
            enabled=self.config.perform_indent,
        )
        self._elements: List[OpenElement] = []
        self._depth = 0
        self._root_closed = False

        self.start_document_emitted = False
        self.version = XmlVersion.V1_0
        self.encoding = "utf-8"

        self.stats = {
            "events_emitted": 0,
            "elements_written": 0,
            "attributes_written": 0,
            "namespace_declarations": 0,
            "bytes_written": 0,
        }

        self.logger.debug("Emitter initialized",
                          perform_indent=self.config.perform_indent,
                          write_document_declaration=self.config.write_document_declaration)

    # State inspection

    @property
    def namespace_stack(self) -> NamespaceStack:
        """Namespace bindings currently in scope."""
        return self._nst

    @property
    def depth(self) -> int:
        """Number of open elements."""
        return self._depth

    @property
    def indent_level(self) -> int:
        return self._indent.level

    @property
    def indent_depth(self) -> int:
        return self._indent.depth

    @property
    def state(self) -> DocumentState:
        if self._depth > 0:
            return DocumentState.IN_ELEMENT
        if self._root_closed:
            return DocumentState.AFTER_DOCUMENT
        if self.start_document_emitted:
            return DocumentState.IN_PROLOG
        return DocumentState.BEFORE_DOCUMENT

    def get_emitter_stats(self) -> Dict[str, int]:
        """Get emission statistics."""
        return self.stats.copy()

    # Output

    def _encode(self, text: str, escaped: bool = False) -> bytes:
        return escape.encode(text, self.encoding, escaped=escaped)

    def _write(self, sink, *chunks: bytes) -> None:
        """Write chunks in order, stopping at the first failure."""
        for chunk in chunks:
            if not chunk:
                continue
            try:
                sink.write(chunk)
            except OSError as e:
                self.logger.error("Sink write failed", error=str(e))
                raise EmitterIOError(e) from e
            self.stats["bytes_written"] += len(chunk)

    def _check_document_started(self, sink) -> None:
        if self.start_document_emitted:
            return
        if self.config.write_document_declaration:
            self._write_declaration(sink, XmlVersion.V1_0, "utf-8", None)
        else:
            self.start_document_emitted = True

    def _require_element(self, what: str) -> None:
        if self._depth == 0:
            raise UnexpectedEvent(f"{what} is only allowed inside an element")

    # Events

    @_event
    def emit_start_document(self, sink, version: Union[XmlVersion, str] = XmlVersion.V1_0,
                            encoding: str = "utf-8", standalone: Optional[bool] = None) -> None:
        """
        Write the XML declaration.

        Args:
            sink: Byte sink
            version: XML version to declare
            encoding: Encoding to declare and to encode the output with
            standalone: Standalone flag, omitted when None
        """
        if self.start_document_emitted:
            raise DocumentStartAlreadyEmitted("Document start is already emitted")
        self._write_declaration(sink, version, encoding, standalone)

    def _write_declaration(self, sink, version: Union[XmlVersion, str], encoding: str,
                           standalone: Optional[bool]) -> None:
        try:
            version = XmlVersion(version) if not isinstance(version, XmlVersion) else version
        except ValueError:
            raise InvalidPayload(f"Unsupported XML version: {version!r}")
        encoding = self._check_encoding(encoding)

        declaration = f'<?xml version="{version.value}" encoding="{encoding}"'
        if standalone is not None:
            declaration += f' standalone="{"yes" if standalone else "no"}"'
        declaration += "?>"

        whitespace = self._indent.before_markup()

        self.start_document_emitted = True
        self.version = version
        self.encoding = encoding
        self._indent.wrote_markup()

        self.logger.debug("Document started", version=version.value, encoding=encoding)
        self._write(sink, self._encode(whitespace), self._encode(declaration))

    @staticmethod
    def _check_encoding(encoding: str) -> str:
        if not isinstance(encoding, str) or not _ENCODING_NAME_RE.fullmatch(encoding):
            raise InvalidPayload(f"Invalid encoding name: {encoding!r}")
        try:
            codecs.lookup(encoding)
            ascii_compatible = "<?xml".encode(encoding) == b"<?xml"
        except (LookupError, UnicodeError):
            raise InvalidPayload(f"Unknown encoding: {encoding}")
        if not ascii_compatible:
            raise InvalidPayload(f"Encoding {encoding} is not ASCII compatible")
        return encoding

    @_event
    def emit_processing_instruction(self, sink, name: str, data: Optional[str] = None) -> None:
        if not isinstance(name, str) or not is_ncname(name):
            raise InvalidName(f"Invalid processing instruction target: {name!r}")
        if name.lower() == "xml":
            raise InvalidName("Processing instruction target 'xml' is reserved")
        text = f"<?{name}"
        if data is not None:
            text += " " + escape.check_pi_data(data, self.version)
        text += "?>"
        encoded = self._encode(text)

        self._check_document_started(sink)
        whitespace = self._indent.before_markup()
        self._indent.wrote_markup()
        self._write(sink, self._encode(whitespace), encoded)

    @_event
    def emit_comment(self, sink, content: str) -> None:
        if not isinstance(content, str):
            raise InvalidPayload("Comment content must be a string")
        if self.config.autopad_comments:
            if not content.startswith(" "):
                content = " " + content
            if not content.endswith(" "):
                content += " "
        escape.check_comment(content, self.version)
        encoded = self._encode(f"<!--{content}-->")

        self._check_document_started(sink)
        whitespace = self._indent.before_markup()
        self._indent.wrote_markup()
        self._write(sink, self._encode(whitespace), encoded)

    @_event
    def emit_start_element(self, sink, name: NameLike, attributes: AttributesLike = (),
                           namespace: NamespaceLike = None) -> None:
        """
        Write a start tag and open the element.

        Args:
            sink: Byte sink
            name: Element name
            attributes: Attributes as ``Attribute`` objects, pairs or a mapping
            namespace: Bindings to declare on this element, prefix to URI
        """
        tag = self._prepare_start(name, attributes, namespace)
        encoded = tag.data + b">"

        self._check_document_started(sink)
        whitespace = self._indent.before_markup()

        self._nst.push_empty()
        for prefix, uri in tag.declarations:
            self._nst.put(prefix, uri)
        self._indent.push()
        if self.config.keep_element_names_stack:
            self._elements.append(tag.element)
        self._depth += 1
        self._count_tag(tag)

        self._write(sink, self._encode(whitespace), encoded)

    @_event
    def emit_empty_element(self, sink, name: NameLike, attributes: AttributesLike = (),
                           namespace: NamespaceLike = None) -> None:
        """Write an element without content; nesting is unchanged."""
        tag = self._prepare_start(name, attributes, namespace)
        if self.config.normalize_empty_elements:
            encoded = tag.data + b"/>"
        else:
            encoded = tag.data + b"></" + self._encode(tag.element.qualified) + b">"

        self._check_document_started(sink)
        whitespace = self._indent.before_markup()

        self._indent.wrote_markup()
        if self._depth == 0:
            self._root_closed = True
            self.logger.debug("Document root closed", root=tag.element.qualified)
        self._count_tag(tag)

        self._write(sink, self._encode(whitespace), encoded)

    @_event
    def emit_end_element(self, sink, name: Optional[NameLike] = None) -> None:
        """
        Write the end tag of the innermost open element.

        Args:
            sink: Byte sink
            name: Expected element name; required when element names are not kept
        """
        self._require_element("End element")

        if self.config.keep_element_names_stack:
            element = self._elements[-1]
            if name is not None:
                given = as_name(name)
                if not element.matches(given):
                    raise EndElementMismatch(element.qualified, given.to_qualified())
            qualified = element.qualified
        else:
            if name is None:
                raise UnexpectedEvent("End element name is required when element names are not kept")
            qualified = as_name(name).to_qualified()

        encoded = self._encode(f"</{qualified}>")
        whitespace = self._indent.before_end_element()

        self._indent.pop()
        self._nst.pop()
        if self.config.keep_element_names_stack:
            self._elements.pop()
        self._depth -= 1
        if self._depth == 0:
            self._root_closed = True
            self.logger.debug("Document root closed", root=qualified)

        self._write(sink, self._encode(whitespace), encoded)

    @_event
    def emit_characters(self, sink, content: str) -> None:
        self._require_element("Character data")
        encoded = self._encode(escape.escape_text(content, self.version), escaped=True)

        self._indent.wrote_text()
        self._write(sink, encoded)

    @_event
    def emit_cdata(self, sink, content: str) -> None:
        """Write a CDATA section, or escaped text when configured to."""
        self._require_element("CDATA section")
        if self.config.cdata_to_characters:
            encoded = self._encode(escape.escape_text(content, self.version), escaped=True)
        else:
            escape.check_cdata(content, self.version)
            encoded = self._encode(f"<![CDATA[{content}]]>")

        self._indent.wrote_text()
        self._write(sink, encoded)

    @_event
    def emit_whitespace(self, sink, content: str) -> None:
        self._require_element("Whitespace")
        if not isinstance(content, str) or not all(is_whitespace_char(c) for c in content):
            raise InvalidWhitespaceEvent(f"Whitespace event contains non-whitespace: {content!r}")
        if not content:
            return

        self._indent.wrote_text()
        self._write(sink, self._encode(content))

    def flush_end(self, sink) -> None:
        """Close every open element with a synthesized end tag."""
        if self._depth and not self.config.keep_element_names_stack:
            raise UnexpectedEvent("Cannot close elements whose names were not kept")
        closed = 0
        while self._depth:
            self.emit_end_element(sink)
            closed += 1
        self.logger.debug("Flushed open elements", closed=closed)

    def emit(self, sink, event: Event) -> None:
        """Dispatch a single event object to the matching ``emit_*`` method."""
        if isinstance(event, StartDocument):
            self.emit_start_document(sink, event.version, event.encoding, event.standalone)
        elif isinstance(event, ProcessingInstruction):
            self.emit_processing_instruction(sink, event.name, event.data)
        elif isinstance(event, Comment):
            self.emit_comment(sink, event.content)
        elif isinstance(event, StartElement):
            self.emit_start_element(sink, event.name, event.attributes, event.namespace)
        elif isinstance(event, EmptyElement):
            self.emit_empty_element(sink, event.name, event.attributes, event.namespace)
        elif isinstance(event, EndElement):
            self.emit_end_element(sink, event.name)
        elif isinstance(event, Characters):
            self.emit_characters(sink, event.content)
        elif isinstance(event, CData):
            self.emit_cdata(sink, event.content)
        elif isinstance(event, Whitespace):
            self.emit_whitespace(sink, event.content)
        else:
            raise UnexpectedEvent(f"Unknown event type: {type(event).__name__}")

    # Start tag preparation

    def _count_tag(self, tag: PreparedTag) -> None:
        self.stats["elements_written"] += 1
        self.stats["attributes_written"] += tag.attribute_count
        self.stats["namespace_declarations"] += len(tag.declarations)

    def _enclosing(self, prefix: str) -> str:
        # An unbound default namespace is the same as no namespace.
        uri = self._nst.resolve(prefix)
        if uri is None and prefix == NS_NO_PREFIX:
            return ""
        return uri

    def _prepare_start(self, name: NameLike, attributes: AttributesLike,
                       namespace: NamespaceLike) -> PreparedTag:
        """Validate a start tag and render it without the closing bracket."""
        if self._root_closed:
            raise UnexpectedEvent("Document already has a root element")

        name = as_name(name)
        attrs = _normalize_attributes(attributes)
        required: Dict[str, str] = {}

        for prefix, uri in _normalize_namespace(namespace):
            self._require_binding(required, prefix, uri)

        if name.namespace is not None:
            self._require_binding(required, name.effective_prefix, name.namespace)
        elif name.prefix is not None:
            self._check_prefix_bound(required, name.prefix)
        if name.prefix == NS_XMLNS_PREFIX:
            raise InvalidName("Element names cannot use the 'xmlns' prefix")

        resolved_attrs = []
        seen = set()
        for attr in attrs:
            attr_name = attr.name
            if attr_name.prefix is None:
                if attr_name.local == NS_XMLNS_PREFIX:
                    raise InvalidName("Namespace declarations must be passed as bindings, not attributes")
                if attr_name.namespace:
                    raise InvalidName(f"Namespaced attribute '{attr_name.local}' needs a prefix")
                attr_ns = None
            elif attr_name.prefix == NS_XMLNS_PREFIX:
                raise InvalidName("Namespace declarations must be passed as bindings, not attributes")
            elif attr_name.namespace is not None:
                self._require_binding(required, attr_name.prefix, attr_name.namespace)
                attr_ns = attr_name.namespace
            else:
                attr_ns = self._check_prefix_bound(required, attr_name.prefix)

            key = (attr_ns or "", attr_name.local)
            if key in seen:
                raise InvalidPayload(f"Duplicate attribute '{attr_name.to_qualified()}'")
            seen.add(key)
            if not isinstance(attr.value, str):
                raise InvalidPayload(f"Value of attribute '{attr_name.to_qualified()}' must be a string")
            resolved_attrs.append((key, attr_name.to_qualified(), attr.value))

        declarations = sorted(
            (prefix, uri) for prefix, uri in required.items()
            if self._enclosing(prefix) != uri
        )

        if name.namespace is not None:
            element_ns = name.namespace
        else:
            element_ns = required.get(name.effective_prefix, self._enclosing(name.effective_prefix))
        element = OpenElement(
            qualified=name.to_qualified(),
            local=name.local,
            prefix=name.effective_prefix,
            namespace=element_ns or None,
        )

        pieces = [self._encode("<" + element.qualified)]
        for prefix, uri in declarations:
            attr = f"xmlns:{prefix}" if prefix else "xmlns"
            value = escape.escape_attribute(uri, self.version)
            pieces.append(self._encode(f' {attr}="') + self._encode(value, escaped=True) + b'"')
        for _, qualified, value in sorted(resolved_attrs, key=lambda item: item[0]):
            value = escape.escape_attribute(value, self.version)
            pieces.append(self._encode(f' {qualified}="') + self._encode(value, escaped=True) + b'"')

        return PreparedTag(
            element=element,
            declarations=declarations,
            attribute_count=len(resolved_attrs),
            data=b"".join(pieces),
        )

    def _require_binding(self, required: Dict[str, str], prefix: str, uri: str) -> None:
        if not isinstance(uri, str):
            raise InvalidName(f"Namespace URI for prefix '{prefix}' must be a string")
        escape.check_chars(uri, self.version, "namespace URI")

        if prefix == NS_XMLNS_PREFIX and uri == NS_XMLNS_URI:
            return
        if prefix == NS_XML_PREFIX:
            if uri != NS_XML_URI:
                raise InvalidName(f"Prefix 'xml' can only be bound to {NS_XML_URI}")
        elif prefix == NS_XMLNS_PREFIX:
            raise InvalidName("Prefix 'xmlns' cannot be declared")
        elif uri in (NS_XML_URI, NS_XMLNS_URI):
            raise InvalidName(f"Namespace {uri} cannot be bound to prefix '{prefix}'")
        elif prefix != NS_NO_PREFIX and not uri:
            raise InvalidName(f"Prefix '{prefix}' cannot be bound to an empty namespace")

        if prefix in required and required[prefix] != uri:
            raise InvalidName(
                f"Prefix '{prefix}' bound to both {required[prefix]} and {uri} on one element"
            )
        required[prefix] = uri

    def _check_prefix_bound(self, required: Dict[str, str], prefix: str) -> str:
        uri = required.get(prefix, self._nst.resolve(prefix))
        if uri is None:
            raise InvalidName(f"Prefix '{prefix}' is not bound to a namespace")
        return uri


def _normalize_attributes(attributes: AttributesLike) -> List[Attribute]:
    if not attributes:
        return []
    if isinstance(attributes, Mapping):
        return [Attribute.of(name, value) for name, value in attributes.items()]
    result = []
    for attr in attributes:
        if isinstance(attr, Attribute):
            result.append(attr)
        else:
            name, value = attr
            result.append(Attribute.of(name, value))
    return result


def _normalize_namespace(namespace: Any) -> List[Tuple[str, str]]:
    if not namespace:
        return []
    items = namespace.items() if isinstance(namespace, Mapping) else namespace
    result = []
    for prefix, uri in items:
        prefix = prefix or NS_NO_PREFIX
        if prefix and not is_ncname(prefix):
            raise InvalidName(f"Invalid namespace prefix: {prefix!r}")
        result.append((prefix, uri))
    return result
