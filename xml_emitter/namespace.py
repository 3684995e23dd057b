"""
Scoped namespace bindings.
"""

from typing import Dict, List, Optional, Tuple

from .names import NS_XML_PREFIX, NS_XML_URI, NS_XMLNS_PREFIX, NS_XMLNS_URI


class NamespaceStack:
    """
    Stack of namespace frames, one per open element.

    The bottom frame holds the ``xml`` and ``xmlns`` bindings and is never
    popped, so lookups of those prefixes always succeed.
    """

    def __init__(self):
        self._frames: List[Dict[str, str]] = [{
            NS_XML_PREFIX: NS_XML_URI,
            NS_XMLNS_PREFIX: NS_XMLNS_URI,
        }]

    @property
    def depth(self) -> int:
        return len(self._frames)

    def push_empty(self) -> None:
        self._frames.append({})

    def pop(self) -> Dict[str, str]:
        if len(self._frames) == 1:
            raise IndexError("Cannot pop the root namespace frame")
        return self._frames.pop()

    def put(self, prefix: str, uri: str) -> None:
        """Bind a prefix in the top frame, replacing an earlier binding in it."""
        self._frames[-1][prefix] = uri

    def resolve(self, prefix: str) -> Optional[str]:
        for frame in reversed(self._frames):
            if prefix in frame:
                return frame[prefix]
        return None

    def declarations_of_top(self) -> List[Tuple[str, str]]:
        """Bindings introduced by the top frame, empty prefix first."""
        if len(self._frames) == 1:
            return []
        return sorted(self._frames[-1].items())

