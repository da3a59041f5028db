from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from .diagnostics import Diagnostic
from .errors import DiagnosticError, EndOfInput
from .source import SourceFile, advance_column, utf8_width
from .spans import Position, Span


@dataclass(frozen=True, slots=True)
class Checkpoint:
    """Saved cursor state; restoring it is constant time."""

    index: int
    offset: int
    line: int
    column: int


class Cursor:
    """Character cursor over a SourceFile with incremental line/column tracking.

    The cursor walks the decoded text one character at a time and keeps the
    byte offset, line and column in step, so positions always agree with
    ``SourceFile.resolve``.
    """

    __slots__ = ("source", "_text", "_tab_width", "_index", "_offset", "_line", "_column")

    def __init__(self, source: SourceFile, offset: int = 0) -> None:
        self.source = source
        self._text = source.text
        self._tab_width = source.tab_width
        pos = source.resolve(offset)
        self._index = len(source.data[:offset].decode("utf-8"))
        self._offset = pos.offset
        self._line = pos.line
        self._column = pos.column

    def __repr__(self) -> str:
        return f"Cursor({self.source.name!r}, offset={self._offset}, {self._line}:{self._column})"

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def line(self) -> int:
        return self._line

    @property
    def column(self) -> int:
        return self._column

    @property
    def position(self) -> Position:
        return Position(offset=self._offset, line=self._line, column=self._column)

    def at_end(self) -> bool:
        return self._index >= len(self._text)

    def peek(self, k: int = 0) -> str | None:
        """Character ``k`` characters ahead, or None past the end of input."""
        if k < 0:
            raise ValueError("peek() cannot look behind the cursor")
        j = self._index + k
        if j >= len(self._text):
            return None
        return self._text[j]

    def _step(self) -> str:
        ch = self._text[self._index]
        self._index += 1
        self._offset += utf8_width(ch)
        if ch == "\n" or (ch == "\r" and self.peek() != "\n"):
            self._line += 1
            self._column = 1
        else:
            self._column = advance_column(self._column, ch, self._tab_width)
        return ch

    def advance(self, n: int = 1) -> None:
        for _ in range(n):
            if self.at_end():
                return
            self._step()

    def bump(self) -> str:
        """Consume and return one character."""
        if self.at_end():
            raise EndOfInput(self._offset)
        return self._step()

    def mark(self) -> Checkpoint:
        return Checkpoint(self._index, self._offset, self._line, self._column)

    def reset(self, checkpoint: Checkpoint) -> None:
        self._index = checkpoint.index
        self._offset = checkpoint.offset
        self._line = checkpoint.line
        self._column = checkpoint.column

    def span_from(self, start: Checkpoint | Position | int) -> Span:
        begin = start if isinstance(start, int) else start.offset
        return Span(begin, self._offset, self.source)

    def match_literal(self, text: str) -> Span | None:
        if not self._text.startswith(text, self._index):
            return None
        start = self._offset
        self.advance(len(text))
        return Span(start, self._offset, self.source)

    def match_any(self, *literals: str) -> Span | None:
        """Match the longest of ``literals`` at the cursor."""
        for lit in sorted(literals, key=len, reverse=True):
            sp = self.match_literal(lit)
            if sp is not None:
                return sp
        return None

    def match_one(self, predicate: Callable[[str], bool]) -> Span | None:
        ch = self.peek()
        if ch is None or not predicate(ch):
            return None
        start = self._offset
        self._step()
        return Span(start, self._offset, self.source)

    def match_while(self, predicate: Callable[[str], bool]) -> Span:
        start = self._offset
        while not self.at_end() and predicate(self._text[self._index]):
            self._step()
        return Span(start, self._offset, self.source)

    def match_regex(self, pattern: str | re.Pattern[str]) -> Span | None:
        rx = re.compile(pattern) if isinstance(pattern, str) else pattern
        m = rx.match(self._text, self._index)
        if m is None:
            return None
        start = self._offset
        self.advance(m.end() - m.start())
        return Span(start, self._offset, self.source)

    def skip_whitespace(self) -> Span:
        return self.match_while(str.isspace)

    def error(
        self,
        message: str,
        start: Checkpoint | Position | int | None = None,
        *,
        label: str | None = None,
    ) -> DiagnosticError:
        """Build an error covering ``start`` up to the cursor, ready to raise."""
        span = self.span_from(self._offset if start is None else start)
        return DiagnosticError(Diagnostic.error(message, span, label=label))
