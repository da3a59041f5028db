from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .source import SourceFile


@dataclass(frozen=True, slots=True)
class Position:
    """A resolved source position.

    Offsets are 0-based byte offsets; line/column are 1-based for user-facing
    messages. Columns are display columns (tabs expanded, wide characters
    counted twice).
    """

    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open byte range [start, end) in a single file.

    ``source`` is an optional back-reference to the owning SourceFile. Unbound
    spans are interpreted against whatever file they are rendered with.
    """

    start: int
    end: int
    source: SourceFile | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"span start must be non-negative, got {self.start}")
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after end {self.end}")

    @classmethod
    def point(cls, offset: int, source: SourceFile | None = None) -> Span:
        return cls(offset, offset, source)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def _check_same_file(self, other: Span) -> None:
        if self.source is not None and other.source is not None and self.source is not other.source:
            raise ValueError(
                f"spans belong to different files: {self.source.name!r} and {other.source.name!r}"
            )

    def union(self, other: Span) -> Span:
        """Smallest span containing both spans."""
        self._check_same_file(other)
        src = self.source if self.source is not None else other.source
        return Span(min(self.start, other.start), max(self.end, other.end), src)

    def intersects(self, other: Span) -> bool:
        self._check_same_file(other)
        if self.is_empty and other.is_empty:
            return self.start == other.start
        if self.is_empty:
            return other.contains(self.start)
        if other.is_empty:
            return self.contains(other.start)
        return self.start < other.end and other.start < self.end

    def contains(self, pos: Position | int) -> bool:
        offset = pos.offset if isinstance(pos, Position) else pos
        return self.start <= offset < self.end

    def covers(self, other: Span) -> bool:
        """True when ``other`` lies entirely within this span."""
        self._check_same_file(other)
        return self.start <= other.start and other.end <= self.end

    def _bound(self) -> SourceFile:
        if self.source is None:
            raise ValueError("span is not bound to a source file")
        return self.source

    def start_position(self) -> Position:
        return self._bound().resolve(self.start)

    def end_position(self) -> Position:
        return self._bound().resolve(self.end)

    def text(self) -> str:
        return self._bound().slice(self)

    def format(self) -> str:
        if self.source is None:
            return f"{self.start}..{self.end}"
        pos = self.source.resolve(self.start)
        return f"{self.source.name}:{pos.line}:{pos.column}"
