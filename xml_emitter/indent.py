"""
Pretty-printing decisions.

The controller keeps one state per open element (plus the document) that
records what was last written directly inside it, and turns that into the
line separator and indentation to emit before the next piece of markup.
"""

from enum import Enum
from typing import List


class IndentState(Enum):
    """What was last written inside an element."""
    NOTHING = "nothing"
    MARKUP = "markup"
    TEXT = "text"


class IndentController:
    """
    Tracks indentation context and produces whitespace to write.

    Args:
        line_separator: Newline sequence
        indent_string: One unit of indentation
        enabled: Whether whitespace is produced at all
    """

    def __init__(self, line_separator: str = "\n", indent_string: str = "  ", enabled: bool = True):
        self.line_separator = line_separator
        self.indent_string = indent_string
        self.enabled = enabled
        self._stack: List[IndentState] = [IndentState.NOTHING]

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def level(self) -> int:
        return len(self._stack) - 1

    @property
    def state(self) -> IndentState:
        return self._stack[-1]

    def _newline(self, level: int) -> str:
        if not self.enabled:
            return ""
        return self.line_separator + self.indent_string * level

    def before_markup(self) -> str:
        """Whitespace to write before a tag, comment, PI or declaration."""
        state = self._stack[-1]
        if state is IndentState.TEXT:
            return ""
        if state is IndentState.MARKUP or self.level > 0:
            return self._newline(self.level)
        return ""

    def before_end_element(self) -> str:
        if self.level > 0 and self._stack[-1] is IndentState.MARKUP:
            return self._newline(self.level - 1)
        return ""

    def wrote_markup(self) -> None:
        self._stack[-1] = IndentState.MARKUP

    def wrote_text(self) -> None:
        self._stack[-1] = IndentState.TEXT

    def push(self) -> None:
        """Enter an element whose start tag was just written."""
        self.wrote_markup()
        self._stack.append(IndentState.NOTHING)

    def pop(self) -> None:
        """Leave an element whose end tag was just written."""
        if len(self._stack) == 1:
            raise IndexError("Cannot pop the document indentation frame")
        self._stack.pop()
        self.wrote_markup()
