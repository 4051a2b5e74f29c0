"""
Recursive descent parser for formulas.

The parser builds an Abstract Syntax Tree from a token stream following a
small precedence grammar:

    expr    := term (('+'|'-') term)*
    term    := unary (('*'|'/') unary | <implicit> unary)*
    unary   := '-' unary | power
    power   := primary ('^' unary)?
    primary := number | variable | function '(' expr ')' | '(' expr ')'

``^`` is right associative through the recursion in ``power``. Implicit
multiplication (2x, 3(x+1), (x+1)(x-1)) is synthesised in ``term``.

Negation deliberately sits below ``^`` rather than binding directly to a
primary, so -2^2 is -(2^2) = -4 as in written mathematics.

Only parentheses, negations, powers and calls recurse, and ``max_depth``
limits them. Chains of + - * / are built in loops and may be any length.
"""

import math

from ..core.errors import (
    EmptyExpressionError,
    MalformedNumberError,
    NestingTooDeepError,
    TrailingInputError,
    UnbalancedParensError,
    UnexpectedTokenError,
)
from .ast import ASTNode, BinaryOp, FunctionCall, Number, UnaryOp, Variable
from .context import Context
from .tokenizer import Token, TokenType, Tokenizer


# Tokens that may follow an operand and start an implicitly multiplied one
_IMPLICIT_STARTERS = {TokenType.VARIABLE, TokenType.FUNCTION, TokenType.LPAREN}


class Parser:
    """
    Recursive descent parser.

    The parser builds an AST from a token stream, respecting:
    - Operator precedence and associativity
    - Function calls
    - Implicit multiplication

    A Parser instance keeps cursor state while parsing and is not meant to be
    shared between threads; the returned trees are.
    """

    def __init__(self, context: Context | None = None):
        """
        Initialize parser with optional context.

        Args:
            context: Parsing context (defaults to Context.default())
        """
        self.context = context or Context.default()
        self.formula = ""
        self.tokens: list[Token] = []
        self.pos = 0
        self.nesting = 0
        self.max_depth = 100

    def parse(self, formula: str) -> ASTNode:
        """
        Parse a formula string to an AST.

        Args:
            formula: The formula, e.g. "2x+1"

        Returns:
            Root AST node

        Raises:
            ParseError: If the formula is invalid
        """
        self.formula = formula
        self.tokens = Tokenizer(self.context).tokenize(formula)
        self.pos = 0
        self.nesting = 0
        self.max_depth = self.context.get_flag("max_depth", 100)

        if self.current().type == TokenType.EOF:
            raise EmptyExpressionError("Empty expression", formula, self.current().pos)

        ast = self.parse_expression()

        token = self.current()
        if token.type == TokenType.RPAREN:
            raise UnbalancedParensError("Unmatched ')'", formula, token.pos)
        if token.type != TokenType.EOF:
            raise TrailingInputError(f"Unexpected '{token.value}'", formula, token.pos)

        return ast

    def descend(self, token: Token) -> None:
        """
        Enter one level of recursive parsing.

        Raises:
            NestingTooDeepError: If parentheses, negations or powers nest deeper
                than the context allows
        """
        self.nesting += 1
        if self.nesting > self.max_depth:
            raise NestingTooDeepError(
                f"Expression is nested deeper than {self.max_depth} levels",
                self.formula,
                token.pos,
            )

    def ascend(self) -> None:
        """Leave one level of recursive parsing."""
        self.nesting -= 1

    def current(self) -> Token:
        """Get current token without consuming it."""
        return self.tokens[self.pos]

    def previous(self) -> Token:
        """Get the most recently consumed token."""
        return self.tokens[self.pos - 1]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def expect_closing(self, opening: Token) -> Token:
        """
        Consume the ')' matching ``opening``.

        Raises:
            UnbalancedParensError: If the formula ends first
            UnexpectedTokenError: If another token is found
        """
        token = self.current()
        if token.type == TokenType.RPAREN:
            return self.advance()
        if token.type == TokenType.EOF:
            raise UnbalancedParensError("Unmatched '('", self.formula, opening.pos)
        raise UnexpectedTokenError(f"Expected ')', got '{token.value}'", self.formula, token.pos)

    def parse_expression(self) -> ASTNode:
        """Parse a sum or difference of terms."""
        left = self.parse_term()

        while self.current().type in (TokenType.PLUS, TokenType.MINUS):
            op_token = self.advance()
            right = self.parse_term()
            left = BinaryOp(left, op_token.value, right)

        return left

    def parse_term(self) -> ASTNode:
        """Parse a product or quotient, including implicit multiplication."""
        left = self.parse_unary()

        while True:
            token = self.current()

            if token.type in (TokenType.MULTIPLY, TokenType.DIVIDE):
                op_token = self.advance()
                right = self.parse_unary()
                left = BinaryOp(left, op_token.value, right)
            elif self._implicit_multiplication_follows():
                right = self.parse_unary()
                left = BinaryOp(left, "*", right, implicit=True)
            else:
                break

        return left

    def _implicit_multiplication_follows(self) -> bool:
        """
        Check whether the current token starts an implicitly multiplied operand.

        A number only qualifies right after a closing parenthesis, so that
        "(x+1)2" is a product while "2 3" is rejected as trailing input.
        """
        token = self.current()
        if token.type in _IMPLICIT_STARTERS:
            return True
        return token.type == TokenType.NUMBER and self.previous().type == TokenType.RPAREN

    def parse_unary(self) -> ASTNode:
        """Parse negation (right associative) or a power."""
        if self.current().type == TokenType.MINUS:
            op_token = self.advance()
            self.descend(op_token)
            operand = self.parse_unary()
            self.ascend()
            return UnaryOp(op_token.value, operand)

        return self.parse_power()

    def parse_power(self) -> ASTNode:
        """Parse a primary optionally raised to a power."""
        base = self.parse_primary()

        if self.current().type == TokenType.POWER:
            op_token = self.advance()
            self.descend(op_token)
            exponent = self.parse_unary()  # Right associative
            self.ascend()
            return BinaryOp(base, op_token.value, exponent)

        return base

    def parse_primary(self) -> ASTNode:
        """
        Parse an atomic expression (number, variable, function call, parentheses).

        Returns:
            AST node
        """
        token = self.current()

        if token.type == TokenType.NUMBER:
            self.advance()
            value = float(token.value)
            if not math.isfinite(value):
                raise MalformedNumberError(
                    f"Number '{token.value}' is out of range", self.formula, token.pos
                )
            return Number(value)

        if token.type == TokenType.VARIABLE:
            self.advance()
            return Variable(token.value)

        if token.type == TokenType.FUNCTION:
            return self.parse_function_call()

        if token.type == TokenType.LPAREN:
            return self.parse_parenthesized()

        if token.type == TokenType.RPAREN:
            if self._is_unmatched(token):
                raise UnbalancedParensError("Unmatched ')'", self.formula, token.pos)
            if self.previous().type == TokenType.LPAREN:
                raise EmptyExpressionError("Empty parentheses", self.formula, token.pos)

        if token.type == TokenType.EOF:
            raise UnexpectedTokenError("Unexpected end of formula", self.formula, token.pos)

        raise UnexpectedTokenError(f"Unexpected '{token.value}'", self.formula, token.pos)

    def parse_function_call(self) -> FunctionCall:
        """
        Parse a function call: func(arg).

        Returns:
            FunctionCall node
        """
        func_token = self.advance()

        opening = self.current()
        if opening.type != TokenType.LPAREN:
            raise UnexpectedTokenError(
                f"Expected '(' after function '{func_token.value}'", self.formula, opening.pos
            )
        self.advance()

        self.descend(opening)
        argument = self.parse_expression()
        self.expect_closing(opening)
        self.ascend()

        return FunctionCall(func_token.value, argument)

    def parse_parenthesized(self) -> ASTNode:
        """Parse a parenthesized expression: (expr)."""
        opening = self.advance()
        self.descend(opening)
        inner = self.parse_expression()
        self.expect_closing(opening)
        self.ascend()
        return inner

    def _is_unmatched(self, closing: Token) -> bool:
        """Check whether a ')' has no '(' before it."""
        depth = 0
        for token in self.tokens[: self.pos]:
            if token.type == TokenType.LPAREN:
                depth += 1
            elif token.type == TokenType.RPAREN:
                depth -= 1
        return depth <= 0


def parse(formula: str, context: Context | None = None) -> ASTNode:
    """
    Parse a formula with a fresh parser.

    Args:
        formula: The formula text
        context: Optional parsing context

    Returns:
        Root AST node

    Raises:
        ParseError: If the formula is invalid
    """
    return Parser(context).parse(formula)
