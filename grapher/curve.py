"""
Curve assembly from sampled results.

A renderer draws a curve as a set of polylines. assemble_curve breaks the
sampled sequence at every invalid sample, so the drawn line has a gap there
instead of bridging across an undefined region.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from .points import Point, PointResult


def assemble_curve(results: Iterable[PointResult]) -> list[list[Point]]:
    """
    Split ordered point results into runs of consecutive valid points.

    Args:
        results: Output of ``sample`` (or any ordered Point/InvalidPoint mix)

    Returns:
        Non-empty segments, in input order
    """
    segments: list[list[Point]] = []
    current: list[Point] = []

    for result in results:
        if result.is_valid:
            current.append(result)
        elif current:
            segments.append(current)
            current = []

    if current:
        segments.append(current)

    return segments


class Curve(BaseModel):
    """The drawable form of one expression."""

    model_config = ConfigDict(frozen=True)

    formula: str = Field(description="Formula the curve was sampled from")
    color: str = Field(description="Display color")
    segments: list[list[Point]] = Field(default_factory=list, description="Polylines to draw")

    @property
    def point_count(self) -> int:
        return sum(len(segment) for segment in self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments
