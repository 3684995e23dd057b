"""
Serialization of lxml trees through the streaming emitter.
"""

import io
from typing import Optional, Tuple

import structlog
from lxml import etree

from .config import EmitterConfig
from .emitter import Emitter
from .names import NS_XML_PREFIX, NS_XML_URI, Name
from .types import InvalidName, InvalidPayload


logger = structlog.get_logger(__name__)


def _split_tag(tag: str) -> Tuple[Optional[str], str]:
    """Split Clark notation ``{uri}local`` into its parts."""
    if tag.startswith("{"):
        uri, _, local = tag[1:].partition("}")
        return uri, local
    return None, tag


def _attribute_prefix(element, uri: str) -> str:
    if uri == NS_XML_URI:
        return NS_XML_PREFIX
    for prefix, bound in sorted(element.nsmap.items(), key=lambda item: item[0] or ""):
        if prefix and bound == uri:
            return prefix
    raise InvalidName(f"No prefix is bound to {uri} for an attribute of {element.tag}")


def _element_name(element) -> Name:
    uri, local = _split_tag(element.tag)
    if uri is None:
        return Name(local=local, namespace="")
    return Name(local=local, prefix=element.prefix, namespace=uri)


def _attributes(element):
    attrs = []
    for key, value in element.attrib.items():
        uri, local = _split_tag(key)
        if uri is None:
            attrs.append((Name(local=local), value))
        else:
            attrs.append((Name(local=local, prefix=_attribute_prefix(element, uri), namespace=uri), value))
    return attrs


def emit_tree(emitter: Emitter, sink, element) -> None:
    """
    Emit an lxml element, its content and its descendants.

    The element's own tail is not emitted; tails of descendants are.

    Args:
        emitter: Emitter to drive
        sink: Byte sink
        element: lxml element, comment or processing instruction
    """
    if element.tag is etree.Comment:
        emitter.emit_comment(sink, element.text or "")
        return
    if element.tag is etree.PI:
        emitter.emit_processing_instruction(sink, element.target, element.text)
        return
    if element.tag is etree.Entity:
        raise InvalidPayload(f"Entity references are not supported: {element.text}")

    name = _element_name(element)
    attributes = _attributes(element)
    namespace = {prefix or "": uri for prefix, uri in element.nsmap.items()}
    if name.namespace == "":
        # Inherited default namespace does not apply to this element.
        namespace.pop("", None)

    if len(element) == 0 and not element.text:
        emitter.emit_empty_element(sink, name, attributes, namespace)
        return

    emitter.emit_start_element(sink, name, attributes, namespace)
    if element.text:
        emitter.emit_characters(sink, element.text)
    for child in element:
        emit_tree(emitter, sink, child)
        if child.tail:
            emitter.emit_characters(sink, child.tail)
    emitter.emit_end_element(sink)


def serialize_tree(tree, config: Optional[EmitterConfig] = None) -> bytes:
    """
    Serialize an lxml element or element tree as a complete document.

    Comments and processing instructions next to the root of an element
    tree are kept.

    Args:
        tree: lxml element or element tree
        config: Emitter configuration

    Returns:
        Encoded document
    """
    root = tree.getroot() if isinstance(tree, etree._ElementTree) else tree
    emitter = Emitter(config)
    sink = io.BytesIO()

    is_document_root = root.getparent() is None
    if is_document_root:
        for sibling in reversed(list(root.itersiblings(preceding=True))):
            emit_tree(emitter, sink, sibling)
    emit_tree(emitter, sink, root)
    if is_document_root:
        for sibling in root.itersiblings():
            emit_tree(emitter, sink, sibling)

    logger.debug("Serialized tree",
                 root=root.tag,
                 bytes_written=emitter.stats["bytes_written"])
    return sink.getvalue()
