# expresser.py
"""
Pipeline driver: source text -> tokens -> AST -> value.

``calculate`` raises the first stage error; ``run`` returns an ``Outcome``
instead so callers can report which stage failed without try/except.
Every call is independent. Nothing is cached between expressions.
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from errors import ExpresserError
from evaluator import evaluate
from expr_parser import Parser
from tokenizer import tokenize

logger = logging.getLogger(__name__)


def calculate(source: str) -> float:
    """
    Lex, parse and evaluate ``source``.

    Lexing runs to completion before parsing starts, so a bad character is
    reported even when a grammar error precedes it.
    """
    tokens = list(tokenize(source))
    ast = Parser(tokens).parse()
    value = evaluate(ast)
    logger.debug("%r evaluated to %r", source, value)
    return value


@dataclass(frozen=True)
class Outcome:
    """Result of one pipeline run: exactly one of ``value`` or ``error`` is set."""
    source: str
    value: Optional[float] = None
    error: Optional[ExpresserError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def stage(self) -> Optional[str]:
        """Name of the failing stage ("lexing", "parsing", "evaluation"), or None."""
        return self.error.stage if self.error is not None else None

    def render(self, precision: Optional[int] = None) -> str:
        if self.error is not None:
            return f"error: {self.error.describe()}"
        return format_value(self.value, precision)


def run(source: str) -> Outcome:
    """Run the pipeline, capturing any stage error in the returned Outcome."""
    try:
        return Outcome(source, value=calculate(source))
    except ExpresserError as e:
        logger.info("%s failed: %s", source.strip() or "<empty>", e.describe())
        return Outcome(source, error=e)


def format_value(value: float, precision: Optional[int] = None) -> str:
    """
    Format a result as plain decimal text, never in scientific notation.

    Without ``precision`` the shortest digits that round-trip the float are
    used (``0.1 + 0.2`` prints ``0.30000000000000004``, ``1e-05`` prints
    ``0.00001``). With ``precision`` set the value is rounded to that many
    decimal places. Trailing zeros are dropped either way, so integral values
    print as ``14`` rather than ``14.0``.
    """
    if not math.isfinite(value):
        return str(value)
    if precision is not None:
        text = f"{value:.{precision}f}"
    else:
        text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return "0" if text == "-0" else text
