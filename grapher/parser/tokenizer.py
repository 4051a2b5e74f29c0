"""
Tokenizer for formulas.

This module provides regex-based tokenization with context-aware
classification of identifiers. It handles numbers, the free variable,
function names, arithmetic operators and parentheses.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from ..core.errors import MalformedNumberError, UnexpectedTokenError, UnknownIdentifierError
from .context import Context


class TokenType(Enum):
    """Token types for formulas."""

    # Literals
    NUMBER = auto()
    VARIABLE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    POWER = auto()

    # Parentheses
    LPAREN = auto()  # (
    RPAREN = auto()  # )

    # Special
    FUNCTION = auto()  # Known function name
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """
    Represents a single token in the formula.

    Attributes:
        type: The token type
        value: The string value of the token
        pos: Position in the source string (for error reporting)
    """

    type: TokenType
    value: str
    pos: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, '{self.value}', pos={self.pos})"


class Tokenizer:
    """
    Tokenizes formulas using regex patterns.

    Identifiers are classified against the context: the free variable becomes
    a VARIABLE token, a known function name becomes a FUNCTION token, and
    anything else is rejected. Implicit multiplication is left to the parser.
    """

    # Order matters - check longer operators first
    PATTERNS = {
        "NUMBER": r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?",
        "IDENTIFIER": r"[a-zA-Z_][a-zA-Z0-9_]*",
        "POWER": r"\*\*|\^",
        "PLUS": r"\+",
        "MINUS": r"-",
        "MULTIPLY": r"\*",
        "DIVIDE": r"/",
        "LPAREN": r"\(",
        "RPAREN": r"\)",
        "WHITESPACE": r"\s+",
    }

    def __init__(self, context: Context | None = None):
        """
        Initialize tokenizer with optional context.

        Args:
            context: Context defining the variable and functions
        """
        self.context = context or Context.default()
        self._compile_patterns()

    def _compile_patterns(self) -> None:
        """Compile regex patterns for faster matching."""
        pattern_parts = []
        for name, pattern in self.PATTERNS.items():
            pattern_parts.append(f"(?P<{name}>{pattern})")

        self.combined_pattern = re.compile("|".join(pattern_parts))

    def tokenize(self, formula: str) -> list[Token]:
        """
        Tokenize a formula.

        Args:
            formula: The formula to tokenize

        Returns:
            List of tokens, terminated by an EOF token

        Raises:
            MalformedNumberError: For a number that runs into another '.'
            UnknownIdentifierError: For a name the context does not define
            UnexpectedTokenError: For any other unrecognised character
        """
        tokens: list[Token] = []
        pos = 0

        while pos < len(formula):
            match = self.combined_pattern.match(formula, pos)

            if not match:
                if formula[pos] == ".":
                    raise MalformedNumberError("Malformed number", formula, pos)
                raise UnexpectedTokenError(
                    f"Invalid character '{formula[pos]}'", formula, pos
                )

            kind = match.lastgroup
            value = match.group()
            token_pos = pos
            pos = match.end()

            if kind == "WHITESPACE":
                continue

            if kind == "NUMBER":
                if pos < len(formula) and formula[pos] == ".":
                    raise MalformedNumberError(
                        f"Malformed number '{value}.'", formula, token_pos
                    )
                token_type = TokenType.NUMBER
            elif kind == "IDENTIFIER":
                token_type = self._classify_identifier(value, formula, token_pos)
            else:
                token_type = TokenType[kind]
                if token_type == TokenType.POWER:
                    value = "^"

            tokens.append(Token(token_type, value, token_pos))

        tokens.append(Token(TokenType.EOF, "", len(formula)))

        return tokens

    def _classify_identifier(self, name: str, formula: str, pos: int) -> TokenType:
        """
        Classify an identifier as the variable or a function name.

        Raises:
            UnknownIdentifierError: If the context defines neither
        """
        if self.context.is_variable(name):
            return TokenType.VARIABLE
        if self.context.is_function(name):
            return TokenType.FUNCTION
        raise UnknownIdentifierError(name, formula, pos)
