# tokenizer.py
"""
Lexer for arithmetic expressions.

``tokenize`` turns a source string into a lazy stream of ``Token`` objects that
always ends with a single EOF token. ``TokenStream`` gives the parser a
one-token lookahead cursor over that stream.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from errors import LexError, ParseError

logger = logging.getLogger(__name__)


class TokenType:
    """Enumeration of token types."""
    NUMBER = 'NUMBER'
    PLUS = 'PLUS'
    MINUS = 'MINUS'
    STAR = 'STAR'
    SLASH = 'SLASH'
    LPAREN = 'LPAREN'
    RPAREN = 'RPAREN'
    LESS = 'LESS'
    GREATER = 'GREATER'
    EQUAL = 'EQUAL'
    EOF = 'EOF'


_SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '<': TokenType.LESS,
    '>': TokenType.GREATER,
    '=': TokenType.EQUAL,
}
_TOKEN_TEXT = {type_: char for char, type_ in _SINGLE_CHAR_TOKENS.items()}


@dataclass(frozen=True)
class Token:
    """Represents a token with type, value, and character position."""
    type: str
    value: Optional[float]
    pos: int

    def describe(self) -> str:
        """Human-readable form used in parse error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.NUMBER:
            value = self.value
            return f"number {int(value) if value.is_integer() else repr(value)}"
        return repr(_TOKEN_TEXT.get(self.type, self.type))


_NUMBER_CHARS = frozenset("0123456789.")


def _is_number_char(ch: str) -> bool:
    # ASCII digits only; float() rejects forms like '²'
    return ch in _NUMBER_CHARS


def _read_number(text: str, start: int) -> Tuple[Token, int]:
    """
    Scan the longest digit/decimal-point run starting at ``start``.
    Returns the NUMBER token and the position just past the run.
    """
    pos = start
    dot_pos = None
    while pos < len(text) and _is_number_char(text[pos]):
        if text[pos] == '.':
            if dot_pos is not None:
                raise LexError(pos, '.', "second decimal point")
            dot_pos = pos
        pos += 1
    raw = text[start:pos]
    if raw == '.':
        raise LexError(start, '.', "decimal point without digits")
    return Token(TokenType.NUMBER, float(raw), start), pos


def tokenize(text: str) -> Iterator[Token]:
    """
    Lazily yield the tokens of ``text`` in source order, ending with EOF.

    Raises LexError at the first unrecognized character.
    """
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch.isspace():
            pos += 1
            continue
        if _is_number_char(ch):
            token, pos = _read_number(text, pos)
        elif ch in _SINGLE_CHAR_TOKENS:
            token = Token(_SINGLE_CHAR_TOKENS[ch], None, pos)
            pos += 1
        else:
            raise LexError(pos, ch)
        logger.debug("token %s at %d", token.type, token.pos)
        yield token
    yield Token(TokenType.EOF, None, len(text))


class TokenStream:
    """
    Wrapper over a token iterator providing a stream-like API.

    Only the current token is held; earlier tokens are discarded once the
    parser moves past them. A sequence that stops without an EOF token is
    treated as ending one position after its last token.
    """

    def __init__(self, tokens: Iterable[Token]):
        self._tokens = iter(tokens)
        self._current = self._next(0)

    def _next(self, end: int) -> Token:
        token = next(self._tokens, None)
        return token if token is not None else Token(TokenType.EOF, None, end)

    def peek(self) -> Token:
        """Returns the current token without consuming it."""
        return self._current

    def advance(self) -> Token:
        """Consumes and returns the current token."""
        token = self._current
        if token.type != TokenType.EOF:
            self._current = self._next(token.pos + 1)
        return token

    def expect(self, type_: str, expected: str) -> Token:
        """
        Consumes and returns the current token if it has the given type.
        Raises ParseError naming ``expected`` otherwise.
        """
        token = self.peek()
        if token.type != type_:
            raise ParseError(token.pos, expected, token.describe())
        return self.advance()
