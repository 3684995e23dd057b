"""
Qualified names, attributes and XML name-character rules.

Character classes follow the NameStartChar and NameChar productions of
XML 1.0 (fifth edition). Prefixes and local parts are NCNames, so the colon
is never accepted inside either part.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .types import InvalidName


NS_XML_PREFIX = "xml"
NS_XML_URI = "http://www.w3.org/XML/1998/namespace"
NS_XMLNS_PREFIX = "xmlns"
NS_XMLNS_URI = "http://www.w3.org/2000/xmlns/"
NS_NO_PREFIX = ""

_NAME_START_RANGES = (
    "A-Z_a-z"
    "\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u02FF\u0370-\u037D\u037F-\u1FFF"
    "\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF\uF900-\uFDCF"
    "\uFDF0-\uFFFD\U00010000-\U000EFFFF"
)
_NAME_RANGES = _NAME_START_RANGES + "\\-.0-9\u00B7\u0300-\u036F\u203F-\u2040"

_NCNAME_RE = re.compile(f"[{_NAME_START_RANGES}][{_NAME_RANGES}]*")
_NAME_START_RE = re.compile(f"[:{_NAME_START_RANGES}]")
_NAME_CHAR_RE = re.compile(f"[:{_NAME_RANGES}]")

XML_WHITESPACE = frozenset(" \t\n\r")


def is_name_start_char(c: str) -> bool:
    """Check if a character may start an XML name."""
    return _NAME_START_RE.fullmatch(c) is not None


def is_name_char(c: str) -> bool:
    """Check if a character may appear after the first position of an XML name."""
    return _NAME_CHAR_RE.fullmatch(c) is not None


def is_whitespace_char(c: str) -> bool:
    return c in XML_WHITESPACE


def is_ncname(value: str) -> bool:
    """Check if a string is a non-colonized XML name."""
    return bool(value) and _NCNAME_RE.fullmatch(value) is not None


def validate_ncname(value: str, what: str = "name") -> str:
    if not isinstance(value, str) or not is_ncname(value):
        raise InvalidName(f"Invalid XML {what}: {value!r}")
    return value


@dataclass(frozen=True)
class Name:
    """
    Qualified XML name.

    A name with a namespace and no prefix refers to the default namespace.
    A name without a namespace does not request any binding; its prefix,
    if any, must already be bound where it is used.
    """

    local: str
    prefix: Optional[str] = None
    namespace: Optional[str] = None

    def __post_init__(self):
        validate_ncname(self.local, "local name")
        if self.prefix is not None:
            validate_ncname(self.prefix, "prefix")

    @classmethod
    def parse(cls, qualified: str, namespace: Optional[str] = None) -> "Name":
        """
        Build a name from its textual form.

        Args:
            qualified: ``prefix:local`` or ``local``
            namespace: Namespace URI the name belongs to

        Returns:
            Parsed name
        """
        if not isinstance(qualified, str):
            raise InvalidName(f"Invalid XML name: {qualified!r}")
        prefix, sep, local = qualified.partition(":")
        if not sep:
            return cls(local=prefix, namespace=namespace)
        return cls(local=local, prefix=prefix, namespace=namespace)

    @property
    def effective_prefix(self) -> str:
        return self.prefix or NS_NO_PREFIX

    def to_qualified(self) -> str:
        """Render as ``prefix:local`` or ``local``."""
        if self.prefix:
            return f"{self.prefix}:{self.local}"
        return self.local

    def __str__(self) -> str:
        return self.to_qualified()


def as_name(value) -> Name:
    """Accept a Name or its textual form."""
    if isinstance(value, Name):
        return value
    return Name.parse(value)


@dataclass(frozen=True)
class Attribute:
    """Attribute name and its unescaped value."""

    name: Name
    value: str

    @classmethod
    def of(cls, name, value: str) -> "Attribute":
        return cls(name=as_name(name), value=value)
