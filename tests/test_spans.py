from __future__ import annotations

import pytest

from runic import Position, SourceFile, Span


def test_span_rejects_inverted_or_negative_ranges() -> None:
    with pytest.raises(ValueError):
        Span(5, 3)
    with pytest.raises(ValueError):
        Span(-1, 2)


def test_union() -> None:
    assert Span(2, 4).union(Span(6, 9)) == Span(2, 9)
    assert Span(6, 9).union(Span(2, 4)) == Span(2, 9)
    assert Span(3, 3).union(Span(1, 2)) == Span(1, 3)


def test_union_keeps_the_bound_file() -> None:
    src = SourceFile("a.txt", "abcdef")
    assert Span(0, 1).union(Span(3, 4, src)).source is src


def test_union_of_different_files_is_rejected() -> None:
    a = SourceFile("a.txt", "abc")
    b = SourceFile("b.txt", "abc")
    with pytest.raises(ValueError, match="different files"):
        Span(0, 1, a).union(Span(1, 2, b))


def test_intersects() -> None:
    assert Span(0, 5).intersects(Span(4, 8))
    assert not Span(0, 4).intersects(Span(4, 8))
    assert Span(2, 2).intersects(Span(0, 5))
    assert not Span(5, 5).intersects(Span(0, 5))
    assert Span(3, 3).intersects(Span(3, 3))
    assert not Span(3, 3).intersects(Span(4, 4))


def test_contains_and_covers() -> None:
    sp = Span(2, 5)
    assert sp.contains(2)
    assert sp.contains(Position(offset=4, line=1, column=5))
    assert not sp.contains(5)
    assert not Span(3, 3).contains(3)
    assert sp.covers(Span(3, 5))
    assert sp.covers(Span(5, 5))
    assert not sp.covers(Span(1, 3))


def test_point_and_length() -> None:
    p = Span.point(7)
    assert p.is_empty
    assert p.length == 0
    assert Span(2, 9).length == 7


def test_bound_span_helpers() -> None:
    src = SourceFile("f.txt", "let x\n  = 10;")
    sp = Span(8, 9, src)
    assert sp.text() == "="
    assert sp.format() == "f.txt:2:3"
    assert sp.start_position() == Position(offset=8, line=2, column=3)
    assert sp.end_position().column == 4


def test_unbound_span_helpers() -> None:
    sp = Span(1, 3)
    assert sp.format() == "1..3"
    with pytest.raises(ValueError, match="not bound"):
        sp.text()
