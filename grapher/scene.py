"""
Scenes: the expressions and literal points shown on one graph.

Scenes are stored in a line-oriented text format::

    y=2x+1
    y=sqrt(x)
    (5.0,10.0)

Each ``y=<formula>`` line is an expression, each ``(<x>,<y>)`` line a literal
point; literal points are drawn as given and never evaluated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

from pydantic import ValidationError

from .core.config import GrapherSettings, get_settings
from .core.errors import ParseError, SceneError, SceneFormatError
from .core.logging import get_context_logger
from .curve import Curve, assemble_curve
from .expression import Expression
from .points import Point
from .sampler import SampleRange, sample

logger = get_context_logger(__name__, component="scene")

_FORMULA_LINE = re.compile(r"^y\s*=\s*(?P<formula>.*)$")
_POINT_LINE = re.compile(r"^\(\s*(?P<x>[^,()]+?)\s*,\s*(?P<y>[^,()]+?)\s*\)$")

PointLike = Union[Point, Sequence[float]]


@dataclass
class PointGroup:
    """Literal points drawn with one color and size."""

    points: list[Point]
    color: Optional[str] = None
    size: int = 3

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 1:
            raise SceneError(f"Point size must be a positive integer, got {self.size!r}")

    def display_color(self, fallback: str) -> str:
        return self.color if self.color is not None else fallback


@dataclass
class SkippedLine:
    """A scene line that was ignored while loading."""

    line_number: int
    line: str
    message: str


def _to_point(value: PointLike) -> Point:
    if isinstance(value, Point):
        return value
    if isinstance(value, (str, bytes)) or len(value) != 2:
        raise SceneError(f"Expected an (x, y) pair, got {value!r}")
    try:
        return Point(x=value[0], y=value[1])
    except ValidationError as exc:
        raise SceneError(f"Invalid point {tuple(value)!r}: {exc.errors()[0]['msg']}") from exc


def _check_single_line(expression: Expression) -> None:
    # The text format holds one formula per line
    if expression.formula.splitlines() != [expression.formula]:
        raise SceneError(f"Formula {expression.formula!r} spans several lines")


@dataclass
class Scene:
    """
    A collection of expressions and point groups.

    Examples:
        >>> scene = Scene()
        >>> scene.add_expressions("2x+1", Expression("sqrt(x)", color="red"))
        >>> scene.add_points((5, 10), (1, 2), color="green")
        >>> scene.dumps()
        'y=2x+1\\ny=sqrt(x)\\n(5.0,10.0)\\n(1.0,2.0)\\n'
    """

    expressions: list[Expression] = field(default_factory=list)
    point_groups: list[PointGroup] = field(default_factory=list)
    skipped: list[SkippedLine] = field(default_factory=list)
    settings: GrapherSettings = field(default_factory=get_settings, repr=False, compare=False)

    def add_expressions(self, *expressions: Union[Expression, str]) -> None:
        """
        Add one or more expressions.

        Raises:
            ParseError: If a formula string is invalid; nothing is added then
            SceneError: If a formula spans several lines
        """
        built = [e if isinstance(e, Expression) else Expression(e) for e in expressions]
        for expression in built:
            _check_single_line(expression)
        self.expressions.extend(built)

    def add_points(self, *points: PointLike, color: Optional[str] = None, size: Optional[int] = None) -> PointGroup:
        """
        Add literal points as one group.

        Args:
            *points: Point objects or (x, y) pairs
            color: Group color (POINT_COLOR when omitted)
            size: Point size, at least 1 (POINT_SIZE when omitted)

        Returns:
            The new group

        Raises:
            SceneError: For an invalid point or size
        """
        group = PointGroup(
            points=[_to_point(p) for p in points],
            color=color,
            size=self.settings.POINT_SIZE if size is None else size,
        )
        self.point_groups.append(group)
        return group

    @property
    def points(self) -> list[Point]:
        """All literal points, in insertion order."""
        return [point for group in self.point_groups for point in group.points]

    def curves(self, sample_range: Optional[SampleRange] = None, fallback_color: Optional[str] = None) -> list[Curve]:
        """
        Sample every expression and assemble its curve.

        Args:
            sample_range: Range to sample (configured range when omitted)
            fallback_color: Color for expressions without one (FUNC_COLOR when omitted)
        """
        sample_range = sample_range or SampleRange.from_settings(self.settings)
        fallback = fallback_color or self.settings.FUNC_COLOR
        return [
            Curve(
                formula=expression.formula,
                color=expression.display_color(fallback),
                segments=assemble_curve(sample(expression, sample_range)),
            )
            for expression in self.expressions
        ]

    # Text format

    @classmethod
    def loads(cls, text: str, strict: bool = False, settings: Optional[GrapherSettings] = None) -> "Scene":
        """
        Read a scene from its text form.

        Blank lines are ignored. Malformed lines raise in strict mode;
        otherwise they are logged, recorded in ``skipped`` and ignored.

        Raises:
            SceneFormatError: For a malformed line when ``strict`` is set
        """
        scene = cls(settings=settings or get_settings())
        loaded_points: list[Point] = []

        for line_number, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue
            try:
                point = scene._read_line(line, line_number)
            except SceneFormatError as exc:
                if strict:
                    raise
                logger.warning(
                    "Skipping scene line",
                    extra_data={"line_number": line_number, "line": line, "error": exc.message},
                )
                scene.skipped.append(SkippedLine(line_number, line, exc.message))
                continue
            if point is not None:
                loaded_points.append(point)

        if loaded_points:
            scene.add_points(*loaded_points)

        return scene

    def _read_line(self, line: str, line_number: int) -> Optional[Point]:
        formula_match = _FORMULA_LINE.match(line)
        if formula_match:
            try:
                self.expressions.append(Expression(formula_match.group("formula")))
            except ParseError as exc:
                raise SceneFormatError(exc.message, line_number, line, cause=exc) from exc
            return None

        point_match = _POINT_LINE.match(line)
        if point_match:
            try:
                return Point(x=float(point_match.group("x")), y=float(point_match.group("y")))
            except ValueError as exc:
                raise SceneFormatError("Invalid point coordinates", line_number, line, cause=exc) from exc

        raise SceneFormatError("Expected 'y=<formula>' or '(<x>,<y>)'", line_number, line)

    def dumps(self) -> str:
        """
        Write the scene in its text form.

        Raises:
            SceneError: If a formula spans several lines
        """
        for expression in self.expressions:
            _check_single_line(expression)
        lines = [f"y={expression.formula}" for expression in self.expressions]
        lines.extend(f"({point.x!r},{point.y!r})" for point in self.points)
        return "".join(f"{line}\n" for line in lines)

    @classmethod
    def read(cls, path: Union[str, Path], strict: bool = False, settings: Optional[GrapherSettings] = None) -> "Scene":
        """Load a scene file."""
        path = Path(path)
        scene = cls.loads(path.read_text(encoding="utf-8"), strict=strict, settings=settings)
        logger.info(
            "Loaded scene",
            extra_data={
                "path": str(path),
                "expressions": len(scene.expressions),
                "points": len(scene.points),
                "skipped": len(scene.skipped),
            },
        )
        return scene

    def write(self, path: Union[str, Path]) -> None:
        """Save the scene, creating or replacing the file."""
        Path(path).write_text(self.dumps(), encoding="utf-8")

