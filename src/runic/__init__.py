from __future__ import annotations

import logging

from .cursor import Checkpoint, Cursor
from .diagnostics import Diagnostic, Label, Severity
from .errors import DiagnosticError, EndOfInput, InvalidSpan, OutOfRange, RunicError
from .lexer import Lexer, LiteralRule, PatternRule, Rule, Skip, rule, tokenize
from .render import RenderConfig, Renderer, render
from .source import SourceFile
from .spans import Position, Span
from .tokens import Token

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Checkpoint",
    "Cursor",
    "Diagnostic",
    "DiagnosticError",
    "EndOfInput",
    "InvalidSpan",
    "Label",
    "Lexer",
    "LiteralRule",
    "OutOfRange",
    "PatternRule",
    "Position",
    "RenderConfig",
    "Renderer",
    "Rule",
    "RunicError",
    "Severity",
    "Skip",
    "SourceFile",
    "Span",
    "Token",
    "render",
    "rule",
    "tokenize",
]
