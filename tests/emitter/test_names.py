"""
Tests for qualified names and XML name-character rules.
"""

import pytest

from xml_emitter import Attribute, InvalidName, Name
from xml_emitter.names import (
    is_name_char, is_name_start_char, is_ncname, is_whitespace_char,
)


class TestNameCharacters:
    """Test name character predicates."""

    @pytest.mark.parametrize("c", ["a", "Z", "_", ":", "\u00e9", "\u4e2d", "\U00010000"])
    def test_name_start_chars(self, c):
        assert is_name_start_char(c)

    @pytest.mark.parametrize("c", ["-", ".", "1", "\u00b7", " ", "<"])
    def test_not_name_start_chars(self, c):
        assert not is_name_start_char(c)

    @pytest.mark.parametrize("c", ["-", ".", "1", "\u00b7", "\u0300", "a"])
    def test_name_chars(self, c):
        assert is_name_char(c)

    @pytest.mark.parametrize("c", [" ", "<", "&", "\"", "\t"])
    def test_not_name_chars(self, c):
        assert not is_name_char(c)

    def test_whitespace_chars(self):
        assert all(is_whitespace_char(c) for c in " \t\r\n")
        assert not is_whitespace_char("\u00a0")

    def test_ncname_excludes_colon(self):
        assert is_ncname("item-1.x")
        assert not is_ncname("p:a")
        assert not is_ncname("")
        assert not is_ncname("1abc")


class TestName:
    """Test qualified name construction and rendering."""

    def test_local_only(self):
        name = Name("item")
        assert name.to_qualified() == "item"
        assert name.prefix is None
        assert name.effective_prefix == ""

    def test_prefixed(self):
        name = Name("item", prefix="p", namespace="urn:p")
        assert str(name) == "p:item"
        assert name.namespace == "urn:p"

    def test_parse(self):
        assert Name.parse("p:item") == Name("item", prefix="p")
        assert Name.parse("item", namespace="urn:x") == Name("item", namespace="urn:x")

    @pytest.mark.parametrize("bad", ["", "1a", "a b", "a<b", "-a"])
    def test_invalid_local(self, bad):
        with pytest.raises(InvalidName):
            Name(bad)

    def test_invalid_prefix(self):
        with pytest.raises(InvalidName):
            Name("a", prefix="")
        with pytest.raises(InvalidName, match="prefix"):
            Name("a", prefix="1p")

    def test_parse_rejects_extra_colon(self):
        with pytest.raises(InvalidName):
            Name.parse("a:b:c")

    def test_names_are_immutable(self):
        name = Name("a")
        with pytest.raises(AttributeError):
            name.local = "b"


class TestAttribute:
    """Test attribute helpers."""

    def test_of_parses_strings(self):
        attr = Attribute.of("xml:lang", "en")
        assert attr.name == Name("lang", prefix="xml")
        assert attr.value == "en"
