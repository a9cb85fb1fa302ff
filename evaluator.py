# evaluator.py
"""Evaluates an AST to a float."""

import operator

from ast_nodes import AstNode, BinaryOp, BinaryOperator, Literal, UnaryOp, UnaryOperator
from errors import DivisionByZeroError, EvalError


def _compare(predicate):
    return lambda left, right: 1.0 if predicate(left, right) else 0.0


_BIN_OPS = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUB: operator.sub,
    BinaryOperator.MUL: operator.mul,
    BinaryOperator.DIV: operator.truediv,
    BinaryOperator.LESS: _compare(operator.lt),
    BinaryOperator.GREATER: _compare(operator.gt),
    BinaryOperator.EQUAL: _compare(operator.eq),
}

_UNARY_OPS = {
    UnaryOperator.NEGATE: operator.neg,
}


def evaluate(root: AstNode) -> float:
    """
    Evaluates the AST with an explicit stack, so tree depth is not bounded
    by the interpreter's recursion limit.

    Left operands are evaluated before right ones. Division by an exact zero
    raises DivisionByZeroError; float overflow is left to IEEE-754 (inf).
    """
    values = []
    # (node, operands_done) pairs; a node is pushed back once its operands are queued.
    pending = [(root, False)]
    while pending:
        node, operands_done = pending.pop()
        if isinstance(node, Literal):
            values.append(float(node.value))
        elif isinstance(node, UnaryOp):
            if node.op not in _UNARY_OPS:
                raise EvalError(f"unknown unary operator: {node.op}")
            if operands_done:
                values.append(_UNARY_OPS[node.op](values.pop()))
            else:
                pending.append((node, True))
                pending.append((node.operand, False))
        elif isinstance(node, BinaryOp):
            if node.op not in _BIN_OPS:
                raise EvalError(f"unknown binary operator: {node.op}", node.pos)
            if operands_done:
                right = values.pop()
                left = values.pop()
                if node.op == BinaryOperator.DIV and right == 0:
                    raise DivisionByZeroError(node.pos)
                values.append(_BIN_OPS[node.op](left, right))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        else:
            raise EvalError(f"unsupported AST node: {type(node).__name__}")
    return values.pop()
