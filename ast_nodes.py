# ast_nodes.py
"""AST node types. The set is closed: every tree is built from these three."""

from dataclasses import dataclass
from typing import Optional, Union


class BinaryOperator:
    """Binary operator symbols stored on BinaryOp nodes."""
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    LESS = '<'
    GREATER = '>'
    EQUAL = '='


class UnaryOperator:
    NEGATE = '-'


@dataclass(frozen=True)
class Literal:
    value: float


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: 'AstNode'
    right: 'AstNode'
    # Source offset of the operator token, used in evaluation errors.
    pos: Optional[int] = None


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: 'AstNode'


AstNode = Union[Literal, BinaryOp, UnaryOp]


def dump(root: AstNode) -> str:
    """Render a tree as a fully parenthesized prefix expression, e.g. ``(+ 2 (* 3 4))``."""
    parts = []
    pending = [root]
    while pending:
        item = pending.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Literal):
            parts.append(_number_text(item.value))
        elif isinstance(item, UnaryOp):
            pending.extend([")", item.operand, f"({item.op} "])
        elif isinstance(item, BinaryOp):
            pending.extend([")", item.right, " ", item.left, f"({item.op} "])
        else:
            raise TypeError(f"Not an AST node: {type(item).__name__}")
    return "".join(parts)


def _number_text(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)
