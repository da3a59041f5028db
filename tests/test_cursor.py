from __future__ import annotations

import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from runic import Cursor, DiagnosticError, EndOfInput, OutOfRange, SourceFile, Span
from runic.testing import generate_source_texts


def _cursor(text: str, **kw: int) -> Cursor:
    return Cursor(SourceFile("cursor.txt", text, **kw))


def test_peek_reads_whole_characters() -> None:
    cur = _cursor("héllo")
    assert cur.peek() == "h"
    assert cur.peek(1) == "é"
    cur.advance()
    cur.advance()
    assert cur.peek() == "l"
    assert cur.offset == 3
    assert cur.column == 3


def test_peek_past_end_and_negative() -> None:
    cur = _cursor("ab")
    assert cur.peek(2) is None
    with pytest.raises(ValueError):
        cur.peek(-1)


def test_advance_past_end_is_a_noop() -> None:
    cur = _cursor("ab")
    cur.advance(5)
    assert cur.at_end()
    assert cur.offset == 2
    cur.advance()
    assert cur.offset == 2
    assert cur.peek() is None


def test_bump_raises_end_of_input() -> None:
    cur = _cursor("é")
    assert cur.bump() == "é"
    with pytest.raises(EndOfInput) as e:
        cur.bump()
    assert e.value.offset == 2


def test_match_literal_consumes_exactly_the_literal() -> None:
    cur = _cursor("fn main")
    sp = cur.match_literal("fn")
    assert sp == Span(0, 2, cur.source)
    assert sp.length == 2
    assert cur.offset == 2
    assert cur.peek() == " "


def test_match_literal_requires_an_exact_prefix() -> None:
    cur = _cursor("function")
    before = cur.mark()
    assert cur.match_literal("fn") is None
    assert cur.mark() == before
    assert cur.match_literal("fun") == Span(0, 3, cur.source)


def test_failed_match_leaves_cursor_untouched() -> None:
    cur = _cursor("foo")
    before = cur.mark()
    assert cur.match_literal("fn") is None
    assert cur.match_one(str.isdigit) is None
    assert cur.match_regex(r"\d+") is None
    assert cur.match_any("bar", "baz") is None
    assert cur.mark() == before


def test_match_while_may_be_empty() -> None:
    cur = _cursor("123abc")
    assert cur.match_while(str.isalpha) == Span(0, 0, cur.source)
    assert cur.match_while(str.isdigit) == Span(0, 3, cur.source)
    assert cur.match_while(str.isalpha) == Span(3, 6, cur.source)
    assert cur.at_end()


def test_match_one_and_match_any() -> None:
    cur = _cursor("==x")
    assert cur.match_any("=", "==") == Span(0, 2, cur.source)
    assert cur.match_one(lambda c: c == "x") == Span(2, 3, cur.source)
    assert cur.match_one(str.isalpha) is None


def test_match_regex_accepts_compiled_patterns() -> None:
    cur = _cursor("wörld!")
    sp = cur.match_regex(re.compile(r"\w+"))
    assert sp == Span(0, 6, cur.source)
    assert sp.text() == "wörld"


def test_skip_whitespace() -> None:
    cur = _cursor("  \t\nx")
    assert cur.skip_whitespace().length == 4
    assert cur.peek() == "x"
    assert (cur.line, cur.column) == (2, 1)


def test_mark_and_reset() -> None:
    cur = _cursor("ab\ncd")
    cp = cur.mark()
    cur.advance(4)
    assert (cur.line, cur.column) == (2, 2)
    cur.reset(cp)
    assert cur.position == cur.source.resolve(0)
    assert cur.peek() == "a"


def test_crlf_counts_as_one_break() -> None:
    cur = _cursor("a\r\nb")
    cur.advance(2)
    assert (cur.line, cur.column) == (1, 3)
    cur.advance()
    assert (cur.line, cur.column) == (2, 1)
    assert cur.offset == 3


def test_lone_cr_breaks_the_line() -> None:
    cur = _cursor("a\rb")
    cur.advance(2)
    assert (cur.line, cur.column) == (2, 1)


def test_tab_advances_to_next_stop() -> None:
    cur = _cursor("\tx", tab_width=4)
    cur.advance()
    assert cur.column == 5
    cur = _cursor("ab\tx", tab_width=8)
    cur.advance(3)
    assert cur.column == 9


def test_start_offset() -> None:
    src = SourceFile("cursor.txt", "héllo")
    cur = Cursor(src, 3)
    assert cur.peek() == "l"
    assert cur.column == 3
    with pytest.raises(OutOfRange):
        Cursor(src, 2)


def test_error_covers_start_to_cursor() -> None:
    cur = _cursor('"abc')
    start = cur.mark()
    cur.advance(4)
    err = cur.error("unterminated string literal", start, label="string starts here")
    assert isinstance(err, DiagnosticError)
    assert err.diagnostic.span == Span(0, 4, cur.source)
    assert err.diagnostic.label == "string starts here"
    assert str(err) == "cursor.txt:1:1: error: unterminated string literal"


def _assert_tracking_consistent(text: str) -> None:
    src = SourceFile("track.txt", text)
    cur = Cursor(src)
    while True:
        assert cur.position == src.resolve(cur.offset)
        if cur.at_end():
            break
        cur.advance()
    assert cur.offset == len(src)


@given(st.text(alphabet=["a", " ", "\t", "é", "漢", "🙂", "\r", "\n"], max_size=120))
def test_incremental_tracking_agrees_with_resolve(text: str) -> None:
    _assert_tracking_consistent(text)


def test_incremental_tracking_agrees_with_resolve_on_corpus() -> None:
    for text in generate_source_texts(seed=1, count=200):
        _assert_tracking_consistent(text)
