# expr_parser.py
"""
Recursive descent parser for arithmetic expressions.

Grammar (lowest to highest precedence, binary operators left-associative):

    relation : expr ((LESS|GREATER|EQUAL) expr)*
    expr     : term ((PLUS|MINUS) term)*
    term     : factor ((STAR|SLASH) factor)*
    factor   : MINUS factor | primary
    primary  : NUMBER | LPAREN relation RPAREN

Precedence comes from which rule calls which; there is no precedence table.
Parentheses may nest at most MAX_NESTING levels deep.
"""

import logging
from typing import Iterable, Union

from ast_nodes import AstNode, BinaryOp, BinaryOperator, Literal, UnaryOp, UnaryOperator, dump
from errors import ParseError
from tokenizer import Token, TokenStream, TokenType, tokenize

logger = logging.getLogger(__name__)

_RELATION_OPS = {
    TokenType.LESS: BinaryOperator.LESS,
    TokenType.GREATER: BinaryOperator.GREATER,
    TokenType.EQUAL: BinaryOperator.EQUAL,
}
_EXPR_OPS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
}
_TERM_OPS = {
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
}

MAX_NESTING = 100


class Parser:
    """Builds an AST from a token sequence, one method per grammar rule."""

    def __init__(self, tokens: Iterable[Token]):
        self.stream = TokenStream(tokens)
        self.depth = 0

    def parse(self) -> AstNode:
        """
        Parses the whole token sequence and returns the root AST node.
        Raises ParseError if anything but EOF follows a complete expression.
        """
        try:
            node = self.relation()
        except RecursionError:
            token = self.stream.peek()
            raise ParseError(token.pos, "a less deeply nested expression", token.describe()) from None
        token = self.stream.peek()
        if token.type != TokenType.EOF:
            raise ParseError(token.pos, "end of input", token.describe())
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("parsed %s", dump(node))
        return node

    def relation(self) -> AstNode:
        """relation : expr ((LESS|GREATER|EQUAL) expr)*"""
        node = self.expr()
        while self.stream.peek().type in _RELATION_OPS:
            op_token = self.stream.advance()
            node = BinaryOp(_RELATION_OPS[op_token.type], node, self.expr(), op_token.pos)
        return node

    def expr(self) -> AstNode:
        """expr : term ((PLUS|MINUS) term)*"""
        node = self.term()
        while self.stream.peek().type in _EXPR_OPS:
            op_token = self.stream.advance()
            node = BinaryOp(_EXPR_OPS[op_token.type], node, self.term(), op_token.pos)
        return node

    def term(self) -> AstNode:
        """term : factor ((STAR|SLASH) factor)*"""
        node = self.factor()
        while self.stream.peek().type in _TERM_OPS:
            op_token = self.stream.advance()
            node = BinaryOp(_TERM_OPS[op_token.type], node, self.factor(), op_token.pos)
        return node

    def factor(self) -> AstNode:
        """
        factor : MINUS factor | primary
        Each leading minus becomes its own UnaryOp, so ``--5`` nests twice.
        The minuses are counted in a loop rather than by recursion.
        """
        negations = 0
        while self.stream.peek().type == TokenType.MINUS:
            self.stream.advance()
            negations += 1
        node = self.primary()
        for _ in range(negations):
            node = UnaryOp(UnaryOperator.NEGATE, node)
        return node

    def primary(self) -> AstNode:
        """primary : NUMBER | LPAREN relation RPAREN"""
        token = self.stream.peek()
        if token.type == TokenType.NUMBER:
            self.stream.advance()
            return Literal(token.value)
        if token.type == TokenType.LPAREN:
            if self.depth >= MAX_NESTING:
                raise ParseError(token.pos, f"at most {MAX_NESTING} nested parentheses", token.describe())
            self.stream.advance()
            self.depth += 1
            node = self.relation()
            self.stream.expect(TokenType.RPAREN, "')'")
            self.depth -= 1
            return node
        raise ParseError(token.pos, "number or '('", token.describe())


def parse(source: Union[str, Iterable[Token]]) -> AstNode:
    """Parse a source string or an already lexed token sequence."""
    tokens = tokenize(source) if isinstance(source, str) else source
    return Parser(tokens).parse()
