"""
Point types produced by sampling.

A sample is either a Point (both coordinates finite) or an InvalidPoint
(only the x position and the reason evaluation failed). The two are distinct
models joined by the ``kind`` discriminator, so an invalid sample can never
flow into arithmetic as a NaN.
"""

from __future__ import annotations

import math
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .core.errors import InvalidReason


class Point(BaseModel):
    """
    A plottable point.

    Examples:
        >>> Point(x=5, y=10)
        >>> Point.of(5, 10)
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["valid"] = "valid"
    x: float = Field(description="x coordinate")
    y: float = Field(description="y coordinate")

    @field_validator("x", "y")
    @classmethod
    def _require_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("point coordinates must be finite")
        return value

    @classmethod
    def of(cls, x: float, y: float) -> Point:
        """Create a point from positional coordinates."""
        return cls(x=x, y=y)

    @property
    def is_valid(self) -> bool:
        return True

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


class InvalidPoint(BaseModel):
    """A sample position where the expression is undefined."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["invalid"] = "invalid"
    x: float = Field(description="x coordinate of the sample")
    reason: InvalidReason = Field(description="Why evaluation failed")

    @field_validator("x")
    @classmethod
    def _require_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("sample position must be finite")
        return value

    @property
    def is_valid(self) -> bool:
        return False


PointResult = Annotated[Union[Point, InvalidPoint], Field(discriminator="kind")]
