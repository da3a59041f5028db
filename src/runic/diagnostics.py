from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from .errors import OutOfRange
from .spans import Span


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"
    HELP = "help"


@dataclass(frozen=True, slots=True)
class Label:
    """A secondary span with an optional message."""

    span: Span
    message: str | None = None


@dataclass(slots=True)
class Diagnostic:
    """A severity-tagged message about zero or more source spans.

    Built incrementally::

        diag = (
            Diagnostic.error("redefinition of `x`", span, label="redefined here")
            .with_label(first, "first defined here")
            .with_note("names must be unique within a scope")
        )

    Nothing is validated here; spans are checked when the diagnostic is
    rendered against a SourceFile.
    """

    severity: Severity
    message: str
    span: Span | None = None
    label: str | None = None
    secondary: list[Label] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    helps: list[str] = field(default_factory=list)
    context: list[str] = field(default_factory=list)

    @classmethod
    def error(cls, message: str, span: Span | None = None, *, label: str | None = None) -> Diagnostic:
        return cls(Severity.ERROR, message, span, label)

    @classmethod
    def warning(cls, message: str, span: Span | None = None, *, label: str | None = None) -> Diagnostic:
        return cls(Severity.WARNING, message, span, label)

    @classmethod
    def note(cls, message: str, span: Span | None = None, *, label: str | None = None) -> Diagnostic:
        return cls(Severity.NOTE, message, span, label)

    @classmethod
    def help(cls, message: str, span: Span | None = None, *, label: str | None = None) -> Diagnostic:
        return cls(Severity.HELP, message, span, label)

    def with_label(self, span: Span, message: str | None = None) -> Diagnostic:
        self.secondary.append(Label(span, message))
        return self

    def with_note(self, note: str) -> Diagnostic:
        self.notes.append(note)
        return self

    def with_help(self, text: str) -> Diagnostic:
        self.helps.append(text)
        return self

    def with_context(self, text: str) -> Diagnostic:
        self.context.append(text)
        return self

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def spans(self) -> Iterator[Span]:
        if self.span is not None:
            yield self.span
        for lab in self.secondary:
            yield lab.span

    def format(self) -> str:
        """One-line summary, ``name:line:col: severity: message``, plus notes."""
        base = f"{self.severity.value}: {self.message}"
        if self.span is not None and self.span.source is not None:
            try:
                where = self.span.format()
            except OutOfRange:
                # Must not fail while an error is being reported.
                where = f"{self.span.source.name}:{self.span.start}..{self.span.end}"
            base = f"{where}: {base}"
        lines = [base]
        lines.extend(f"note: {n}" for n in self.notes)
        lines.extend(f"help: {h}" for h in self.helps)
        return "\n".join(lines)
