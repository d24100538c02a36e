"""
Tokenizer for template formulas.

Formulas are the small expressions found in ``<var name="...">`` and
``<plural var="...">``: numbers, variable names, parentheses, ``+``, ``-``
and the ``#`` count operator.

The lexer is pull-based: each call to ``next_token()`` scans one token.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import StrEnum, auto


class TokenKind(StrEnum):
    """Token types for formulas."""

    NUMBER = auto()
    VARIABLE = auto()

    # Operators
    LPAREN = auto()
    RPAREN = auto()
    PLUS = auto()
    MINUS = auto()
    COUNT = auto()  # '#'

    # Unrecognised character
    ERROR = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token from the formula lexer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: int | float | str | None, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.value, self.pos) == (other.kind, other.value, other.pos)


_OPERATORS: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "#": TokenKind.COUNT,
}

# "1.23", ".23" or "1."
_REAL_RE = re.compile(r"[0-9]*\.[0-9]+|[0-9]+\.[0-9]*")
_INTEGER_RE = re.compile(r"[0-9]+")
_VARIABLE_RE = re.compile(r"[a-zA-Z0-9_.]+")
_WHITESPACE = " \t"


class FormulaLexer:
    """Scans a formula one token at a time."""

    def __init__(self, formula: str) -> None:
        self.formula = formula
        self.pos = 0
        self._done = False

    def next_token(self) -> Token:
        """Scan and return the next token; EOF repeats once input is exhausted."""
        source = self.formula
        n = len(source)

        while self.pos < n:
            start = self.pos
            c = source[start]

            if c in _OPERATORS:
                self.pos += 1
                return Token(_OPERATORS[c], c, start)

            m = _REAL_RE.match(source, start)
            if m:
                self.pos = m.end()
                return Token(TokenKind.NUMBER, float(m.group(0)), start)

            m = _INTEGER_RE.match(source, start)
            if m:
                self.pos = m.end()
                return Token(TokenKind.NUMBER, int(m.group(0)), start)

            if c in _WHITESPACE:
                self.pos += 1
                continue

            m = _VARIABLE_RE.match(source, start)
            if m:
                self.pos = m.end()
                return Token(TokenKind.VARIABLE, m.group(0), start)

            self.pos += 1
            return Token(TokenKind.ERROR, c, start)

        self._done = True
        return Token(TokenKind.EOF, None, n)

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.kind == TokenKind.EOF:
                return

    @property
    def exhausted(self) -> bool:
        return self._done


def tokenize(formula: str) -> list[Token]:
    """Tokenize a whole formula into a list (mostly useful for inspection)."""
    return list(FormulaLexer(formula))
