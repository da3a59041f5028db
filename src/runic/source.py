from __future__ import annotations

import re
import unicodedata
from bisect import bisect_right
from pathlib import Path

from .errors import OutOfRange
from .spans import Position, Span


DEFAULT_TAB_WIDTH = 4

# "\r" and "\n" never occur inside a multi-byte UTF-8 sequence, so scanning
# the encoded buffer is safe.
_LINE_BREAK_RE = re.compile(rb"\r\n|\r|\n")


def char_width(ch: str) -> int:
    """Display width of a single non-tab character."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 2
    return 1


def advance_column(column: int, ch: str, tab_width: int) -> int:
    """Return the display column following ``ch`` when it starts at ``column``."""
    if ch == "\t":
        return column + tab_width - (column - 1) % tab_width
    return column + char_width(ch)


def utf8_width(ch: str) -> int:
    if ch < "\x80":
        return 1
    return len(ch.encode("utf-8"))


def expand_tabs(text: str, tab_width: int, *, column: int = 1) -> str:
    """Replace tabs by the spaces they occupy when ``text`` starts at ``column``."""
    if "\t" not in text:
        return text
    out: list[str] = []
    for ch in text:
        nxt = advance_column(column, ch, tab_width)
        out.append(" " * (nxt - column) if ch == "\t" else ch)
        column = nxt
    return "".join(out)


class SourceFile:
    """Immutable text buffer with precomputed line starts.

    All offsets are byte offsets into the UTF-8 encoding of ``text``. Lines end
    at ``"\\r\\n"``, ``"\\n"`` or a lone ``"\\r"``.
    """

    __slots__ = ("name", "text", "data", "tab_width", "_line_starts", "_line_ends")

    def __init__(self, name: str, text: str, *, tab_width: int = DEFAULT_TAB_WIDTH) -> None:
        if tab_width < 1:
            raise ValueError(f"tab_width must be at least 1, got {tab_width}")
        self.name = name
        self.text = text
        self.data = text.encode("utf-8")
        self.tab_width = tab_width

        starts = [0]
        ends: list[int] = []
        for m in _LINE_BREAK_RE.finditer(self.data):
            ends.append(m.start())
            starts.append(m.end())
        ends.append(len(self.data))
        self._line_starts: tuple[int, ...] = tuple(starts)
        self._line_ends: tuple[int, ...] = tuple(ends)

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        *,
        encoding: str = "utf-8",
        tab_width: int = DEFAULT_TAB_WIDTH,
    ) -> SourceFile:
        p = Path(path)
        return cls(str(p), p.read_text(encoding=encoding), tab_width=tab_width)

    def __repr__(self) -> str:
        return f"SourceFile({self.name!r}, {len(self.data)} bytes, {self.line_count()} lines)"

    def __len__(self) -> int:
        return len(self.data)

    def line_count(self) -> int:
        return len(self._line_starts)

    def _check_line(self, line: int) -> None:
        if not 1 <= line <= len(self._line_starts):
            raise OutOfRange(f"{self.name}: line {line} out of range 1..{len(self._line_starts)}")

    def _check_offset(self, offset: int) -> None:
        if not 0 <= offset <= len(self.data):
            raise OutOfRange(f"{self.name}: offset {offset} out of range 0..{len(self.data)}")
        if offset < len(self.data) and self.data[offset] & 0xC0 == 0x80:
            raise OutOfRange(f"{self.name}: offset {offset} splits a multi-byte character")

    def line_range(self, line: int) -> tuple[int, int]:
        """Byte bounds of the line text, terminator excluded."""
        self._check_line(line)
        return self._line_starts[line - 1], self._line_ends[line - 1]

    def line_text(self, line: int) -> str:
        start, end = self.line_range(line)
        return self.data[start:end].decode("utf-8")

    def line_of(self, offset: int) -> int:
        self._check_offset(offset)
        return bisect_right(self._line_starts, offset)

    def resolve(self, offset: int) -> Position:
        line = self.line_of(offset)
        prefix = self.data[self._line_starts[line - 1] : offset].decode("utf-8")
        column = 1
        for ch in prefix:
            column = advance_column(column, ch, self.tab_width)
        return Position(offset=offset, line=line, column=column)

    def offset_of(self, line: int, column: int) -> int:
        """Byte offset of the character displayed at ``line``/``column``.

        A column inside a tab or a wide character maps to that character.
        """
        start, end = self.line_range(line)
        if column < 1:
            raise OutOfRange(f"{self.name}: column {column} out of range")
        col = 1
        off = start
        for ch in self.data[start:end].decode("utf-8"):
            nxt = advance_column(col, ch, self.tab_width)
            if col <= column < nxt:
                return off
            col = nxt
            off += utf8_width(ch)
        if column == col:
            return end
        if column == col + 1 and self.data[end : end + 2] == b"\r\n":
            return end + 1
        raise OutOfRange(f"{self.name}: column {column} out of range on line {line}")

    def end_column(self, line: int) -> int:
        """Display column just past the text of ``line``."""
        return self.resolve(self.line_range(line)[1]).column

    def span(self, start: int, end: int) -> Span:
        self._check_offset(start)
        self._check_offset(end)
        return Span(start, end, self)

    def slice(self, span: Span) -> str:
        self._check_offset(span.start)
        self._check_offset(span.end)
        return self.data[span.start : span.end].decode("utf-8")
