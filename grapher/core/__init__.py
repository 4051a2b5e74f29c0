"""Core utilities package"""

from .config import GrapherSettings, get_settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    GrapherError,
    ParseErrorKind,
    InvalidReason,
    ParseError,
    EmptyExpressionError,
    UnknownIdentifierError,
    UnbalancedParensError,
    TrailingInputError,
    MalformedNumberError,
    UnexpectedTokenError,
    NestingTooDeepError,
    EvalError,
    DivisionByZeroError,
    NegativeSqrtError,
    NonPositiveLogError,
    InvalidPowerError,
    UndefinedValueError,
    RangeError,
    SceneError,
    SceneFormatError,
)

__all__ = [
    "GrapherSettings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "GrapherError",
    "ParseErrorKind",
    "InvalidReason",
    "ParseError",
    "EmptyExpressionError",
    "UnknownIdentifierError",
    "UnbalancedParensError",
    "TrailingInputError",
    "MalformedNumberError",
    "UnexpectedTokenError",
    "NestingTooDeepError",
    "EvalError",
    "DivisionByZeroError",
    "NegativeSqrtError",
    "NonPositiveLogError",
    "InvalidPowerError",
    "UndefinedValueError",
    "RangeError",
    "SceneError",
    "SceneFormatError",
]
