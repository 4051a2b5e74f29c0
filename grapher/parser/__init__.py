"""
Grapher Parser Package

This package turns formula text into expression trees.
It includes tokenization, AST construction, the parsing context and
rendering back to text.
"""

from .ast import ASTNode, Number, Variable, BinaryOp, UnaryOp, FunctionCall
from .tokenizer import Token, TokenType, Tokenizer
from .parser import Parser, parse
from .context import Context
from .visitors import StringVisitor, to_string

__all__ = [
    "ASTNode",
    "Number",
    "Variable",
    "BinaryOp",
    "UnaryOp",
    "FunctionCall",
    "Token",
    "TokenType",
    "Tokenizer",
    "Parser",
    "parse",
    "Context",
    "StringVisitor",
    "to_string",
]
