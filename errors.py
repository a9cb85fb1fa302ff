# errors.py
"""
Error classes shared by every stage of the expression pipeline.

Each stage raises its own kind; the ``stage`` attribute lets callers report
which part of the pipeline rejected the input.
"""

from typing import Optional


class ExpresserError(Exception):
    """Base class for all expression processing errors."""
    stage = "processing"

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position

    def describe(self) -> str:
        """Return a one-line message naming the stage and position."""
        if self.position is None:
            return f"{self.stage} error: {self}"
        return f"{self.stage} error at position {self.position}: {self}"


class LexError(ExpresserError):
    """Raised when the lexer meets a character it does not recognize."""
    stage = "lexing"

    def __init__(self, position: int, character: str, reason: str = "unexpected character"):
        super().__init__(f"{reason} {character!r}", position)
        self.character = character


class ParseError(ExpresserError):
    """Raised for grammar violations, with what was expected and what was found."""
    stage = "parsing"

    def __init__(self, position: int, expected: str, found: str):
        super().__init__(f"expected {expected}, found {found}", position)
        self.expected = expected
        self.found = found


class EvalError(ExpresserError):
    """Raised when evaluating a syntactically valid tree fails."""
    stage = "evaluation"


class DivisionByZeroError(EvalError):
    """Raised when the right operand of '/' is exactly zero."""

    def __init__(self, position: Optional[int] = None):
        super().__init__("division by zero", position)
