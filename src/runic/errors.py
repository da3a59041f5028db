from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics import Diagnostic
    from .spans import Span


class RunicError(Exception):
    """Base class for every error raised by runic."""


class OutOfRange(RunicError, IndexError):
    """An offset, line or column lies outside a SourceFile.

    Always a caller logic error: valid input never produces it.
    """


class EndOfInput(RunicError):
    """A cursor operation needed a character past the end of the text."""

    def __init__(self, offset: int) -> None:
        self.offset = offset
        super().__init__(f"unexpected end of input at offset {offset}")


class InvalidSpan(RunicError, ValueError):
    """A diagnostic references a span the renderer cannot place."""

    def __init__(self, span: Span, reason: str) -> None:
        self.span = span
        self.reason = reason
        super().__init__(f"invalid span [{span.start}, {span.end}): {reason}")


@dataclass(slots=True)
class DiagnosticError(RunicError):
    diagnostic: Diagnostic

    def __str__(self) -> str:
        return self.diagnostic.format()
