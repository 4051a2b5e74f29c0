"""Command line interface for grapher."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.config import GrapherSettings, get_settings
from .core.errors import EvalError, GrapherError
from .core.logging import get_logger, setup_logging
from .expression import Expression
from .sampler import SampleRange, sample
from .scene import Scene

logger = get_logger(__name__)


def _add_range_arguments(parser: argparse.ArgumentParser, settings: GrapherSettings) -> None:
    parser.add_argument(
        "--x-min",
        type=float,
        default=settings.X_MIN,
        help=f"Left end of the sampled interval (default: {settings.X_MIN}).",
    )
    parser.add_argument(
        "--x-max",
        type=float,
        default=settings.X_MAX,
        help=f"Right end of the sampled interval (default: {settings.X_MAX}).",
    )
    parser.add_argument(
        "--density",
        type=int,
        default=settings.DENSITY,
        help=f"Samples per unit of x (default: {settings.DENSITY}).",
    )


def _build_parser(settings: GrapherSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grapher",
        description="Sample formulas of x and work with grapher scene files.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sample_parser = subparsers.add_parser("sample", help="Sample a formula over a range.")
    sample_parser.add_argument("formula", help="Formula of x, e.g. '2x+1'.")
    _add_range_arguments(sample_parser, settings)
    sample_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the samples as a JSON array.",
    )

    eval_parser = subparsers.add_parser("eval", help="Evaluate a formula at one x.")
    eval_parser.add_argument("formula", help="Formula of x.")
    eval_parser.add_argument("x", type=float, help="Value of x.")

    check_parser = subparsers.add_parser("check", help="Validate a scene file.")
    check_parser.add_argument("scene", type=Path, help="Path to the scene file.")

    curves_parser = subparsers.add_parser("curves", help="Summarise the curves of a scene file.")
    curves_parser.add_argument("scene", type=Path, help="Path to the scene file.")
    _add_range_arguments(curves_parser, settings)

    return parser


def _run_sample(args: argparse.Namespace) -> int:
    sample_range = SampleRange(x_min=args.x_min, x_max=args.x_max, density=args.density)
    results = sample(args.formula, sample_range)

    if args.json:
        print(json.dumps([result.model_dump(mode="json") for result in results]))
        return 0

    for result in results:
        if result.is_valid:
            print(f"{result.x!r}\t{result.y!r}")
        else:
            print(f"{result.x!r}\tinvalid ({result.reason.value})")
    return 0


def _run_eval(args: argparse.Namespace) -> int:
    expression = Expression(args.formula)
    try:
        value = expression.evaluate(args.x)
    except EvalError as exc:
        print(f"undefined ({exc.reason.value}): {exc.message}", file=sys.stderr)
        return 1
    print(repr(value))
    return 0


def _run_check(args: argparse.Namespace) -> int:
    scene = Scene.read(args.scene, strict=True)
    print(f"{args.scene}: {len(scene.expressions)} expression(s), {len(scene.points)} point(s)")
    return 0


def _run_curves(args: argparse.Namespace) -> int:
    scene = Scene.read(args.scene)
    sample_range = SampleRange(x_min=args.x_min, x_max=args.x_max, density=args.density)
    for curve in scene.curves(sample_range):
        print(
            f"y={curve.formula}\t{curve.color}\t"
            f"{len(curve.segments)} segment(s), {curve.point_count} point(s)"
        )
    return 0


_COMMANDS = {
    "sample": _run_sample,
    "eval": _run_eval,
    "check": _run_check,
    "curves": _run_curves,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    parser = _build_parser(settings)
    args = parser.parse_args(argv)

    setup_logging(settings)

    try:
        return _COMMANDS[args.command](args)
    except (GrapherError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
