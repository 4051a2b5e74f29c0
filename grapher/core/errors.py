"""
Grapher exceptions.

Defines the exception hierarchy shared by the parser, the evaluator, the
sampler and the scene layer.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ParseErrorKind(str, Enum):
    """Reasons a formula can be rejected by the parser"""
    EMPTY_EXPRESSION = "empty-expression"
    UNKNOWN_IDENTIFIER = "unknown-identifier"
    UNBALANCED_PARENS = "unbalanced-parens"
    TRAILING_INPUT = "trailing-input"
    MALFORMED_NUMBER = "malformed-number"
    UNEXPECTED_TOKEN = "unexpected-token"
    NESTING_TOO_DEEP = "nesting-too-deep"


class InvalidReason(str, Enum):
    """Reason codes carried by an invalid sample"""
    DIVISION_BY_ZERO = "division-by-zero"
    NEGATIVE_EVEN_ROOT = "negative-even-root"
    NON_POSITIVE_LOG = "log-of-nonpositive"
    UNDEFINED = "generic-undefined"


class GrapherError(Exception):
    """Base exception for grapher errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Parse errors

class ParseError(GrapherError):
    """Raised when a formula cannot be parsed"""

    kind: ParseErrorKind = ParseErrorKind.UNEXPECTED_TOKEN

    def __init__(self, message: str, formula: str = "", position: int = 0):
        self.formula = formula
        self.position = position
        super().__init__(
            message=f"{message} at position {position}",
            details={"kind": self.kind.value, "formula": formula, "position": position}
        )


class EmptyExpressionError(ParseError):
    """Raised for an empty or blank formula"""
    kind = ParseErrorKind.EMPTY_EXPRESSION


class UnknownIdentifierError(ParseError):
    """Raised for a name that is neither the variable nor a known function"""
    kind = ParseErrorKind.UNKNOWN_IDENTIFIER

    def __init__(self, name: str, formula: str = "", position: int = 0):
        self.name = name
        super().__init__(f"Unknown identifier '{name}'", formula, position)


class UnbalancedParensError(ParseError):
    """Raised for a missing or stray parenthesis"""
    kind = ParseErrorKind.UNBALANCED_PARENS


class TrailingInputError(ParseError):
    """Raised when tokens remain after a complete expression"""
    kind = ParseErrorKind.TRAILING_INPUT


class MalformedNumberError(ParseError):
    """Raised for a numeric literal that cannot be read"""
    kind = ParseErrorKind.MALFORMED_NUMBER


class UnexpectedTokenError(ParseError):
    """Raised for a token that cannot appear where it was found"""
    kind = ParseErrorKind.UNEXPECTED_TOKEN


class NestingTooDeepError(ParseError):
    """Raised when the expression tree exceeds the configured depth"""
    kind = ParseErrorKind.NESTING_TOO_DEEP


# Evaluation errors

class EvalError(GrapherError):
    """Raised when an expression is undefined at a given x"""

    reason: InvalidReason = InvalidReason.UNDEFINED

    def __init__(self, message: str, x: Optional[float] = None):
        self.x = x
        details: Dict[str, Any] = {"reason": self.reason.value}
        if x is not None:
            details["x"] = x
        super().__init__(message=message, details=details)


class DivisionByZeroError(EvalError):
    """Raised for division by a value that is effectively zero"""
    reason = InvalidReason.DIVISION_BY_ZERO


class NegativeSqrtError(EvalError):
    """Raised for the square root of a negative number"""
    reason = InvalidReason.NEGATIVE_EVEN_ROOT


class NonPositiveLogError(EvalError):
    """Raised for the logarithm of zero or a negative number"""
    reason = InvalidReason.NON_POSITIVE_LOG


class InvalidPowerError(EvalError):
    """Raised for a negative base with a non-integer exponent"""
    reason = InvalidReason.UNDEFINED


class UndefinedValueError(EvalError):
    """Raised for any other undefined or non-finite result"""
    reason = InvalidReason.UNDEFINED


# Range and scene errors

class RangeError(GrapherError):
    """Raised for an invalid sample range"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message=message, details=details)


class SceneError(GrapherError):
    """Raised for invalid scene contents"""


class SceneFormatError(SceneError):
    """Raised for a scene file line that cannot be read"""

    def __init__(self, message: str, line_number: int, line: str, cause: Optional[Exception] = None):
        self.line_number = line_number
        self.line = line
        self.cause = cause
        super().__init__(
            message=f"Line {line_number}: {message}",
            details={"line_number": line_number, "line": line}
        )
