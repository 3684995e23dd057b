"""
Payload escaping and well-formedness checks.

Text and attribute values are escaped. CDATA sections, comments and
processing instructions are written verbatim, so they are only checked.
"""

import codecs
import re
from typing import Dict

from .types import InvalidPayload, XmlVersion


HEX_CHARREF_ERRORS = "xmlhexcharrefreplace"

_FORBIDDEN = {
    XmlVersion.V1_0: re.compile("[\x00-\x08\x0B\x0C\x0E-\x1F\uD800-\uDFFF\uFFFE\uFFFF]"),
    XmlVersion.V1_1: re.compile("[\x00\uD800-\uDFFF\uFFFE\uFFFF]"),
}

# XML 1.1 RestrictedChar; legal only as character references.
_RESTRICTED_1_1 = [
    *range(0x01, 0x09), 0x0B, 0x0C, *range(0x0E, 0x20),
    *range(0x7F, 0x85), *range(0x86, 0xA0),
]
_RESTRICTED_1_1_RE = re.compile("[\x01-\x08\x0B\x0C\x0E-\x1F\x7F-\x84\x86-\x9F]")


def char_ref(c: str) -> str:
    """Uppercase hexadecimal character reference for one character."""
    return f"&#x{ord(c):X};"


def _hex_charref_replace(error: UnicodeEncodeError):
    if not isinstance(error, UnicodeEncodeError):
        raise error
    replacement = "".join(char_ref(c) for c in error.object[error.start:error.end])
    return replacement, error.end


codecs.register_error(HEX_CHARREF_ERRORS, _hex_charref_replace)


def _table(version: XmlVersion, extra: Dict[str, str]) -> Dict[int, str]:
    mapping = {"&": "&amp;", "<": "&lt;", ">": "&gt;", **extra}
    if version is XmlVersion.V1_1:
        for code in _RESTRICTED_1_1:
            mapping.setdefault(chr(code), char_ref(chr(code)))
    return str.maketrans(mapping)


_ATTRIBUTE_EXTRA = {'"': "&quot;", "\n": "&#xA;", "\r": "&#xD;", "\t": "&#x9;"}

_TEXT_TABLES = {version: _table(version, {}) for version in XmlVersion}
_ATTRIBUTE_TABLES = {
    XmlVersion.V1_0: _table(XmlVersion.V1_0, _ATTRIBUTE_EXTRA),
    # NEL and LINE SEPARATOR are line ends in 1.1 and would be normalized away.
    XmlVersion.V1_1: _table(XmlVersion.V1_1, {
        **_ATTRIBUTE_EXTRA, "\x85": "&#x85;", "\u2028": "&#x2028;",
    }),
}


def check_chars(content: str, version: XmlVersion, what: str = "content") -> None:
    """Reject characters the XML version does not allow at all."""
    if not isinstance(content, str):
        raise InvalidPayload(f"{what.capitalize()} must be a string, got {type(content).__name__}")
    match = _FORBIDDEN[version].search(content)
    if match:
        raise InvalidPayload(
            f"Character U+{ord(match.group()):04X} is not allowed in XML {version.value} {what}"
        )


def check_literal_chars(content: str, version: XmlVersion, what: str) -> None:
    """Check content that cannot hold character references."""
    check_chars(content, version, what)
    if version is XmlVersion.V1_1:
        match = _RESTRICTED_1_1_RE.search(content)
        if match:
            raise InvalidPayload(
                f"Restricted character U+{ord(match.group()):04X} cannot appear in {what}"
            )


def escape_text(content: str, version: XmlVersion = XmlVersion.V1_0) -> str:
    """Escape character data for an element body."""
    check_chars(content, version, "character data")
    return content.translate(_TEXT_TABLES[version])


def escape_attribute(value: str, version: XmlVersion = XmlVersion.V1_0) -> str:
    """Escape an attribute value for use inside double quotes."""
    check_chars(value, version, "attribute value")
    return value.translate(_ATTRIBUTE_TABLES[version])


def check_cdata(content: str, version: XmlVersion = XmlVersion.V1_0) -> str:
    check_literal_chars(content, version, "CDATA section")
    if "]]>" in content:
        raise InvalidPayload("CDATA section content must not contain ']]>'")
    return content


def check_comment(content: str, version: XmlVersion = XmlVersion.V1_0) -> str:
    check_literal_chars(content, version, "comment")
    if "--" in content:
        raise InvalidPayload("Comment must not contain '--'")
    if content.endswith("-"):
        raise InvalidPayload("Comment must not end with '-'")
    return content


def check_pi_data(data: str, version: XmlVersion = XmlVersion.V1_0) -> str:
    check_literal_chars(data, version, "processing instruction")
    if "?>" in data:
        raise InvalidPayload("Processing instruction data must not contain '?>'")
    return data


def encode(text: str, encoding: str, escaped: bool = False) -> bytes:
    """
    Encode output text.

    Args:
        text: Text to encode
        encoding: Target encoding
        escaped: Whether unencodable characters may become character references

    Returns:
        Encoded bytes
    """
    if escaped:
        return text.encode(encoding, errors=HEX_CHARREF_ERRORS)
    try:
        return text.encode(encoding)
    except UnicodeEncodeError as e:
        bad = e.object[e.start:e.end]
        raise InvalidPayload(
            f"Characters {bad!r} cannot be encoded as {encoding} outside text content"
        ) from e
