"""Text rendering of diagnostics.

Layout of one diagnostic::

    error: unexpected token
     --> demo.txt:1:8
      |
    1 | let   x = 10;
      |        ^^^ expected `=`
      |
      = note: bindings need an initializer

The gutter is as wide as the largest line number shown, followed by one
space and ``|``. Source lines are quoted verbatim; every other row is free of
trailing whitespace. The output is fully determined by the SourceFile and the
Diagnostic, so it can be compared verbatim in tests.
"""

from __future__ import annotations

import itertools
import os
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TextIO

from .diagnostics import Diagnostic, Severity
from .errors import InvalidSpan, OutOfRange
from .log import get_logger
from .source import SourceFile, expand_tabs
from .spans import Position, Span


logger = get_logger(__name__)

_ANSI_RESET = "\x1b[0m"
_ANSI = {
    "error": "\x1b[1;31m",
    "warning": "\x1b[1;33m",
    "note": "\x1b[1;36m",
    "help": "\x1b[1;32m",
    "secondary": "\x1b[1;34m",
    "gutter": "\x1b[1;34m",
    "bold": "\x1b[1m",
}


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Layout options.

    ``context_lines`` unlabelled lines are shown around each span. Spans whose
    line ranges are at most ``max_gap`` lines apart share a block; anything
    further apart gets its own ``-->`` header. ``color=None`` enables ANSI
    colour only when emitting to a terminal and ``NO_COLOR`` is unset.
    """

    context_lines: int = 0
    max_gap: int = 1
    primary_marker: str = "^"
    secondary_marker: str = "-"
    connector: str = "|"
    color: bool | None = None

    def __post_init__(self) -> None:
        if self.context_lines < 0:
            raise ValueError("context_lines must be >= 0")
        if self.max_gap < 0:
            raise ValueError("max_gap must be >= 0")
        for name in ("primary_marker", "secondary_marker", "connector"):
            if len(getattr(self, name)) != 1:
                raise ValueError(f"{name} must be a single character")


@dataclass(slots=True)
class _Mark:
    primary: bool
    order: int
    label: str | None
    start: Position
    first_line: int
    last_line: int
    start_col: int
    # Exclusive end column on last_line.
    end_col: int
    # Column just past the text of first_line.
    first_eol: int

    @property
    def multiline(self) -> bool:
        return self.first_line != self.last_line

    def columns(self, line: int) -> tuple[int, int] | None:
        if line == self.first_line == self.last_line:
            return self.start_col, max(self.end_col, self.start_col + 1)
        if line == self.first_line:
            return self.start_col, max(self.first_eol, self.start_col + 1)
        if line == self.last_line:
            return 1, max(self.end_col, 2)
        return None


@dataclass(slots=True)
class _Block:
    first: int
    last: int
    marks: list[_Mark] = field(default_factory=list)

    def anchor(self) -> Position:
        for m in self.marks:
            if m.primary:
                return m.start
        return min((m.start for m in self.marks), key=lambda p: p.offset)


class _Painter:
    __slots__ = ("enabled",)

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    def __call__(self, key: str, text: str) -> str:
        if not self.enabled or not text:
            return text
        return f"{_ANSI[key]}{text}{_ANSI_RESET}"


class Renderer:
    """Render diagnostics against one SourceFile."""

    def __init__(self, source: SourceFile, config: RenderConfig | None = None) -> None:
        self.source = source
        self.config = config or RenderConfig()

    def render(self, diagnostic: Diagnostic) -> str:
        return self._render(diagnostic, _Painter(bool(self.config.color)))

    def render_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        return "\n\n".join(self.render(d) for d in diagnostics)

    def emit(self, diagnostic: Diagnostic, stream: TextIO | None = None) -> None:
        out = stream if stream is not None else sys.stderr
        color = self.config.color
        if color is None:
            color = out.isatty() and "NO_COLOR" not in os.environ
        out.write(self._render(diagnostic, _Painter(color)) + "\n")

    # -- span resolution -------------------------------------------------

    def _mark(self, span: Span, *, primary: bool, order: int, label: str | None) -> _Mark:
        src = self.source
        if span.source is not None and span.source is not src:
            raise InvalidSpan(span, f"span belongs to {span.source.name!r}, not {src.name!r}")
        try:
            start = src.resolve(span.start)
            end = src.resolve(span.end)
        except OutOfRange as exc:
            raise InvalidSpan(span, str(exc)) from exc

        last_line, end_col = end.line, end.column
        if end.line > start.line and end.column == 1:
            # Ends right after a line terminator: the span stops on the previous line.
            last_line -= 1
            end_col = src.end_column(last_line)
        return _Mark(
            primary=primary,
            order=order,
            label=label,
            start=start,
            first_line=start.line,
            last_line=last_line,
            start_col=start.column,
            end_col=end_col,
            first_eol=src.end_column(start.line),
        )

    def _marks(self, diagnostic: Diagnostic) -> list[_Mark]:
        marks: list[_Mark] = []
        if diagnostic.span is not None:
            marks.append(self._mark(diagnostic.span, primary=True, order=-1, label=diagnostic.label))
        for i, lab in enumerate(diagnostic.secondary):
            marks.append(self._mark(lab.span, primary=False, order=i, label=lab.message))
        return marks

    def _blocks(self, marks: list[_Mark]) -> list[_Block]:
        ctx = self.config.context_lines
        count = self.source.line_count()
        blocks: list[_Block] = []
        for m in sorted(marks, key=lambda m: (m.first_line, m.last_line, m.order)):
            lo = max(1, m.first_line - ctx)
            hi = min(count, m.last_line + ctx)
            if blocks and lo <= blocks[-1].last + 1 + self.config.max_gap:
                blocks[-1].last = max(blocks[-1].last, hi)
                blocks[-1].marks.append(m)
            else:
                blocks.append(_Block(lo, hi, [m]))
        return blocks

    # -- layout ----------------------------------------------------------

    def _render(self, diagnostic: Diagnostic, paint: _Painter) -> str:
        blocks = self._blocks(self._marks(diagnostic))
        width = len(str(max(b.last for b in blocks))) if blocks else 0
        pad = " " * width
        sev = diagnostic.severity.value
        logger.debug("rendering %s with %d block(s) against %s", sev, len(blocks), self.source.name)

        rows = [f"{paint(sev, sev)}{paint('bold', ': ' + diagnostic.message)}".rstrip()]
        for block in blocks:
            rows.extend(self._render_block(block, diagnostic.severity, width, paint))

        footers = [paint("bold", c) for c in diagnostic.context]
        footers += [f"{paint('bold', 'note:')} {n}" for n in diagnostic.notes]
        footers += [f"{paint('bold', 'help:')} {h}" for h in diagnostic.helps]
        if footers:
            if blocks:
                rows.append(pad + paint("gutter", " |"))
            rows.extend(f"{pad}{paint('gutter', ' =')} {f}".rstrip() for f in footers)
        return "\n".join(rows)

    def _render_block(self, block: _Block, severity: Severity, width: int, paint: _Painter) -> list[str]:
        src = self.source
        cfg = self.config
        pad = " " * width
        anchor = block.anchor()
        # One connector lane per multi-line span, outermost first.
        lanes = sorted((m for m in block.marks if m.multiline), key=lambda m: (m.first_line, -m.last_line, m.order))

        def margin(active: Callable[[_Mark], bool]) -> str:
            return "".join(paint(severity.value, cfg.connector) + " " if active(m) else "  " for m in lanes)

        gutter = pad + paint("gutter", " | ")
        rows = [
            f"{pad}{paint('gutter', '-->')} {src.name}:{anchor.line}:{anchor.column}",
            pad + paint("gutter", " |"),
        ]
        for line in range(block.first, block.last + 1):
            incoming = margin(lambda m: m.first_line < line <= m.last_line)
            outgoing = margin(lambda m: m.first_line <= line < m.last_line)
            # Source text is shown verbatim, trailing whitespace included.
            text = expand_tabs(src.line_text(line), src.tab_width)
            prefix = paint("gutter", f"{line:<{width}} | ") + incoming
            rows.append(prefix + text if text else prefix.rstrip())

            placed = [(m, cols) for m in block.marks if (cols := m.columns(line)) is not None]
            if not placed:
                continue
            underline = self._underline(placed, severity, paint)
            inline = [m.label for m, _ in placed if m.primary and m.label and m.last_line == line]
            if inline:
                underline += " " + paint(severity.value, inline[0])
            rows.append((gutter + outgoing + underline).rstrip())

            stacked = sorted(
                ((m, cols) for m, cols in placed if not m.primary and m.label and m.last_line == line),
                key=lambda mc: mc[0].order,
            )
            for m, (c0, c1) in stacked:
                # A multi-line label hangs under the last marker of the span.
                col = c1 - 1 if m.multiline else c0
                rows.append((gutter + outgoing + " " * (col - 1) + paint("secondary", m.label or "")).rstrip())
        return rows

    def _underline(
        self,
        placed: list[tuple[_Mark, tuple[int, int]]],
        severity: Severity,
        paint: _Painter,
    ) -> str:
        cells: list[_Mark | None] = [None] * (max(c1 for _, (_, c1) in placed) - 1)
        # Later secondaries are painted first so earlier ones and the primary win.
        for m, (c0, c1) in sorted(placed, key=lambda mc: (mc[0].primary, -mc[0].order)):
            for c in range(c0 - 1, c1 - 1):
                cells[c] = m

        out: list[str] = []
        for kind, run in itertools.groupby(cells, key=lambda m: None if m is None else m.primary):
            n = len(list(run))
            if kind is None:
                out.append(" " * n)
            elif kind:
                out.append(paint(severity.value, self.config.primary_marker * n))
            else:
                out.append(paint("secondary", self.config.secondary_marker * n))
        return "".join(out)


def render(source: SourceFile, diagnostic: Diagnostic, config: RenderConfig | None = None) -> str:
    return Renderer(source, config).render(diagnostic)
