from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .spans import Span


K = TypeVar("K")


@dataclass(frozen=True, slots=True)
class Token(Generic[K]):
    """A caller-defined kind paired with the span it was lexed from."""

    kind: K
    span: Span

    def text(self) -> str:
        return self.span.text()

    def __repr__(self) -> str:
        return f"Token({self.kind!r}, {self.span.format()})"
