from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar, overload

from .cursor import Cursor
from .log import get_logger
from .source import SourceFile
from .spans import Span
from .tokens import Token


K = TypeVar("K")

logger = get_logger(__name__)


class Rule(Protocol[K]):
    """One scanning rule.

    Returns a token, or None when the rule does not apply. A rule that
    generates tokens and returns None is rolled back by the lexer; a rule with
    ``generates_token = False`` (whitespace, comments) keeps what it consumed.
    """

    generates_token: bool

    def __call__(self, cursor: Cursor) -> Token[K] | None: ...


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    return re.compile(pattern) if isinstance(pattern, str) else pattern


@dataclass(frozen=True, slots=True)
class Skip:
    """Consume text matching ``pattern`` without producing a token."""

    pattern: str | re.Pattern[str] = r"\s+"
    generates_token = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", compile_pattern(self.pattern))

    def __call__(self, cursor: Cursor) -> None:
        cursor.match_regex(self.pattern)
        return None


@dataclass(frozen=True, slots=True, init=False)
class LiteralRule(Generic[K]):
    kind: K
    literals: tuple[str, ...]
    generates_token = True

    def __init__(self, kind: K, *literals: str) -> None:
        if not literals or any(not lit for lit in literals):
            raise ValueError("LiteralRule needs at least one non-empty literal")
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "literals", literals)

    def __call__(self, cursor: Cursor) -> Token[K] | None:
        sp = cursor.match_any(*self.literals)
        if sp is None:
            return None
        return Token(self.kind, sp)


@dataclass(frozen=True, slots=True)
class PatternRule(Generic[K]):
    """Token for a non-empty regex match; ``keywords`` overrides the kind by lexeme."""

    kind: K
    pattern: str | re.Pattern[str]
    keywords: Mapping[str, K] | None = None
    generates_token = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", compile_pattern(self.pattern))

    def __call__(self, cursor: Cursor) -> Token[K] | None:
        sp = cursor.match_regex(self.pattern)
        if sp is None or sp.is_empty:
            return None
        kind = self.kind
        if self.keywords:
            kind = self.keywords.get(sp.text(), kind)
        return Token(kind, sp)


@dataclass(frozen=True, slots=True)
class _FunctionRule(Generic[K]):
    fn: Callable[[Cursor], Token[K] | None]
    generates_token: bool = True

    def __call__(self, cursor: Cursor) -> Token[K] | None:
        return self.fn(cursor)


RuleFn = Callable[[Cursor], Token[K] | None]


@overload
def rule(fn: RuleFn[K], /) -> Rule[K]: ...


@overload
def rule(*, generates_token: bool = True) -> Callable[[RuleFn[K]], Rule[K]]: ...


def rule(fn=None, /, *, generates_token=True):
    """Turn a plain function into a Rule, with or without arguments."""

    def wrap(f):
        return _FunctionRule(f, generates_token)

    if fn is not None:
        return wrap(fn)
    return wrap


class Lexer(Generic[K]):
    """Drive a cursor with an ordered list of rules.

    Rules are tried in order at every position; the first token wins. If no
    rule consumes anything, the lexer raises a DiagnosticError pointing at the
    offending character. Recovery is left to the caller.
    """

    def __init__(
        self,
        source: SourceFile,
        rules: Sequence[Rule[K]],
        *,
        eof: K | None = None,
    ) -> None:
        self.source = source
        self.rules = tuple(rules)
        self.eof = eof
        self.cursor = Cursor(source)

    def next_token(self) -> Token[K] | None:
        cur = self.cursor
        for r in self.rules:
            cp = cur.mark()
            tok = r(cur)
            if tok is not None:
                return tok
            if r.generates_token and cur.offset != cp.offset:
                logger.debug("rule %r backtracked to offset %d", r, cp.offset)
                cur.reset(cp)
        return None

    def tokens(self) -> Iterator[Token[K]]:
        cur = self.cursor
        while not cur.at_end():
            before = cur.offset
            tok = self.next_token()
            if tok is not None:
                if cur.offset == before:
                    raise RuntimeError(
                        f"rule produced {tok!r} without consuming input at offset {before}"
                    )
                yield tok
                continue
            if cur.offset == before:
                start = cur.mark()
                ch = cur.bump()
                err = cur.error(f"unexpected character {ch!r}", start)
                cur.reset(start)
                raise err
        if self.eof is not None:
            yield Token(self.eof, Span.point(cur.offset, self.source))

    def __iter__(self) -> Iterator[Token[K]]:
        return self.tokens()

    def tokenize(self) -> list[Token[K]]:
        return list(self.tokens())


def tokenize(
    source: SourceFile,
    rules: Sequence[Rule[K]],
    *,
    eof: K | None = None,
) -> list[Token[K]]:
    return Lexer(source, rules, eof=eof).tokenize()
