"""
Tests for the scoped namespace stack.
"""

import pytest

from xml_emitter import NamespaceStack
from xml_emitter.names import NS_XML_URI, NS_XMLNS_URI


class TestNamespaceStack:
    """Test frame lifecycle and lookups."""

    def test_builtins_always_resolve(self):
        nst = NamespaceStack()
        assert nst.resolve("xml") == NS_XML_URI
        assert nst.resolve("xmlns") == NS_XMLNS_URI

        nst.push_empty()
        nst.put("p", "urn:p")
        assert nst.resolve("xml") == NS_XML_URI
        assert nst.resolve("xmlns") == NS_XMLNS_URI

    def test_initial_depth(self):
        assert NamespaceStack().depth == 1

    def test_push_pop(self):
        nst = NamespaceStack()
        nst.push_empty()
        nst.put("p", "urn:p")
        assert nst.depth == 2
        assert nst.resolve("p") == "urn:p"

        assert nst.pop() == {"p": "urn:p"}
        assert nst.depth == 1
        assert nst.resolve("p") is None

    def test_root_frame_cannot_be_popped(self):
        with pytest.raises(IndexError):
            NamespaceStack().pop()

    def test_topmost_binding_wins(self):
        nst = NamespaceStack()
        nst.push_empty()
        nst.put("p", "urn:outer")
        nst.push_empty()
        nst.put("p", "urn:inner")
        assert nst.resolve("p") == "urn:inner"

        nst.pop()
        assert nst.resolve("p") == "urn:outer"

    def test_last_put_in_frame_wins(self):
        nst = NamespaceStack()
        nst.push_empty()
        nst.put("p", "urn:one")
        nst.put("p", "urn:two")
        assert nst.declarations_of_top() == [("p", "urn:two")]

    def test_declarations_sorted_with_default_first(self):
        nst = NamespaceStack()
        nst.push_empty()
        nst.put("z", "urn:z")
        nst.put("", "urn:default")
        nst.put("a", "urn:a")
        assert nst.declarations_of_top() == [
            ("", "urn:default"),
            ("a", "urn:a"),
            ("z", "urn:z"),
        ]

    def test_root_frame_has_no_declarations(self):
        assert NamespaceStack().declarations_of_top() == []

    def test_builtins_visible_from_every_frame(self):
        nst = NamespaceStack()
        nst.push_empty()
        nst.push_empty()
        assert nst.resolve("xml") == NS_XML_URI
        assert nst.resolve("q") is None
