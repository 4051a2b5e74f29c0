"""
Range sampling of expressions.

``sample`` turns an expression and a SampleRange into the ordered sequence of
point results a renderer draws: one result per sample position, each either a
Point or an InvalidPoint. Domain errors at individual positions never abort
the sequence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Union

from .core.errors import EvalError, RangeError
from .core.logging import get_logger
from .expression import Expression
from .points import InvalidPoint, Point, PointResult

if TYPE_CHECKING:
    from .core.config import GrapherSettings

logger = get_logger(__name__)

# Absorbs float noise such as 10 * 0.3 == 2.9999999999999996
_COUNT_EPSILON = 1e-9


@dataclass(frozen=True)
class SampleRange:
    """
    The x interval to sample and the number of samples per unit.

    Attributes:
        x_min: Left end of the interval (inclusive)
        x_max: Right end of the interval (exclusive)
        density: Samples per unit of x, at least 1

    Raises:
        RangeError: If x_min > x_max, a bound is not finite, or density is
            not a positive integer
    """

    x_min: float
    x_max: float
    density: int = 10
    count: int = field(init=False)
    step: float = field(init=False)

    def __post_init__(self) -> None:
        for name in ("x_min", "x_max"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise RangeError(f"{name} must be a finite number, got {value!r}", field=name)
        if self.x_min > self.x_max:
            raise RangeError(
                f"x_min ({self.x_min}) must not be greater than x_max ({self.x_max})",
                field="x_min",
            )
        if isinstance(self.density, bool) or not isinstance(self.density, int) or self.density < 1:
            raise RangeError(f"density must be a positive integer, got {self.density!r}", field="density")

        span = self.x_max - self.x_min
        count = math.floor(self.density * span + _COUNT_EPSILON)
        object.__setattr__(self, "count", count)
        object.__setattr__(self, "step", span / count if count else 0.0)

    @classmethod
    def from_settings(cls, settings: "GrapherSettings") -> "SampleRange":
        """Build the range configured by X_MIN, X_MAX and DENSITY."""
        return cls(x_min=settings.X_MIN, x_max=settings.X_MAX, density=settings.DENSITY)

    def x_at(self, index: int) -> float:
        """Return the x position of sample ``index``."""
        return self.x_min + index * self.step

    def __len__(self) -> int:
        return self.count


def _as_expression(expression: Union[Expression, str]) -> Expression:
    if isinstance(expression, Expression):
        return expression
    return Expression(expression)


def _check_range(sample_range: SampleRange) -> None:
    if not isinstance(sample_range, SampleRange):
        raise RangeError(f"Expected a SampleRange, got {type(sample_range).__name__}")


def _iter_samples(expression: Expression, sample_range: SampleRange, start: int, stop: int) -> Iterator[PointResult]:
    invalid = 0
    for index in range(start, stop):
        x = sample_range.x_at(index)
        try:
            yield Point(x=x, y=expression.evaluate(x))
        except EvalError as exc:
            invalid += 1
            yield InvalidPoint(x=x, reason=exc.reason)

    logger.debug(
        "Sampled %r: %d samples, %d invalid",
        expression.formula,
        stop - start,
        invalid,
    )


def sample(expression: Union[Expression, str], sample_range: SampleRange) -> Iterator[PointResult]:
    """
    Sample ``expression`` across ``sample_range``.

    Produces exactly ``sample_range.count`` results, at
    ``x_i = x_min + i * step`` for increasing ``i``. Samples where the
    expression is undefined are InvalidPoints carrying the reason; they are
    never dropped. The returned iterator is lazy and single-pass.

    Args:
        expression: An Expression or a formula string
        sample_range: Where and how densely to sample

    Returns:
        Iterator of Point / InvalidPoint

    Raises:
        ParseError: If a formula string is invalid
        RangeError: If ``sample_range`` is not a SampleRange
    """
    _check_range(sample_range)
    expression = _as_expression(expression)
    return _iter_samples(expression, sample_range, 0, sample_range.count)


def sample_slice(
    expression: Union[Expression, str],
    sample_range: SampleRange,
    start: int,
    stop: int,
) -> Iterator[PointResult]:
    """
    Sample only the indices ``start..stop`` of ``sample_range``.

    Indices are clamped to ``0..count``. Concatenating the slices of
    consecutive index blocks gives the same sequence as ``sample``, so a
    host can spread one curve across several workers.
    """
    _check_range(sample_range)
    expression = _as_expression(expression)
    start = max(0, min(start, sample_range.count))
    stop = max(start, min(stop, sample_range.count))
    return _iter_samples(expression, sample_range, start, stop)
