"""
Grapher

Parses formulas of one variable, samples them across an x range with
per-sample domain checking, and assembles the samples into drawable curves.

Example:
    >>> from grapher import Expression, SampleRange, sample
    >>> results = list(sample(Expression("1/x"), SampleRange(-2, 2, density=10)))
    >>> len(results)
    40
"""

from .core.errors import (
    GrapherError,
    InvalidReason,
    ParseError,
    EvalError,
    RangeError,
    SceneError,
    SceneFormatError,
)
from .curve import Curve, assemble_curve
from .evaluator import Evaluator, evaluate
from .expression import Expression, parse_formula
from .parser import Context, parse
from .points import InvalidPoint, Point, PointResult
from .sampler import SampleRange, sample, sample_slice
from .scene import PointGroup, Scene

__version__ = "0.1.0"

__all__ = [
    "GrapherError",
    "InvalidReason",
    "ParseError",
    "EvalError",
    "RangeError",
    "SceneError",
    "SceneFormatError",
    "Curve",
    "assemble_curve",
    "Evaluator",
    "evaluate",
    "Expression",
    "parse_formula",
    "Context",
    "parse",
    "InvalidPoint",
    "Point",
    "PointResult",
    "SampleRange",
    "sample",
    "sample_slice",
    "PointGroup",
    "Scene",
]
