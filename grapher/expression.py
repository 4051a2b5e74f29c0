"""
Expression: a formula parsed once and evaluated many times.

The expression keeps its original text for round-tripping through scene
files, and the AST built from it for evaluation.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from .core.config import get_settings
from .evaluator import Evaluator
from .parser.ast import ASTNode
from .parser.context import Context
from .parser.parser import Parser
from .parser.visitors import StringVisitor


@lru_cache(maxsize=None)
def _default_context() -> Context:
    return Context.from_settings(get_settings())


@lru_cache(maxsize=256)
def parse_formula(formula: str) -> ASTNode:
    """
    Parse ``formula`` with the default context, memoised per formula string.

    The returned tree is shared between callers and must not be mutated.

    Raises:
        ParseError: If the formula is invalid (failures are not cached)
    """
    return Parser(_default_context()).parse(formula)


def clear_parse_cache() -> None:
    """Forget memoised trees and the default context (after settings change)."""
    parse_formula.cache_clear()
    _default_context.cache_clear()


class Expression:
    """
    A function of x given by a formula, e.g. ``Expression("2x+1")``.

    The formula is parsed eagerly, so a malformed formula is rejected when the
    expression is created.

    Examples:
        >>> f = Expression("x^2 + 1", color="red")
        >>> f.evaluate(3)  # 10.0
        >>> str(f)  # "x^2 + 1"
        >>> f.canonical()  # "x^2 + 1"

    Args:
        formula: The formula text
        color: Optional display color
        context: Optional context; the settings-derived default context is
            used (with the shared parse cache) when omitted
    """

    def __init__(self, formula: str, color: Optional[str] = None, context: Optional[Context] = None):
        if not isinstance(formula, str):
            raise TypeError(f"formula must be a string, not {type(formula).__name__}")
        self._formula = formula
        self.color = color
        if context is None:
            self._context = _default_context()
            self._ast = parse_formula(formula)
        else:
            self._context = context
            self._ast = Parser(context).parse(formula)
        self._evaluator = Evaluator(self._context)

    @property
    def formula(self) -> str:
        """The original formula text."""
        return self._formula

    @property
    def ast(self) -> ASTNode:
        return self._ast

    @property
    def context(self) -> Context:
        return self._context

    def display_color(self, fallback: str) -> str:
        """Return the expression color, or ``fallback`` when none was set."""
        return self.color if self.color is not None else fallback

    def evaluate(self, x: float) -> float:
        """
        Evaluate the expression at ``x``.

        Raises:
            EvalError: If the expression is undefined at ``x``
        """
        return self._evaluator.evaluate(self._ast, x)

    def canonical(self) -> str:
        """Render the parsed tree with explicit operators."""
        return self._ast.accept(StringVisitor(self._context))

    def __str__(self) -> str:
        return self._formula

    def __repr__(self) -> str:
        if self.color is None:
            return f"Expression({self._formula!r})"
        return f"Expression({self._formula!r}, color={self.color!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Expression)
            and self._formula == other._formula
            and self.color == other.color
        )

    def __hash__(self) -> int:
        return hash(self._formula)
