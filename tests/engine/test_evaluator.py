"""
Tests for numeric evaluation.

Tests cover:
- Arithmetic and function values
- Domain failures and the reason each one reports
- Logarithm base selection
- Custom functions
- Determinism and sharing an evaluator between threads
"""

import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from grapher.core.errors import (
    DivisionByZeroError,
    EvalError,
    InvalidPowerError,
    InvalidReason,
    NegativeSqrtError,
    NonPositiveLogError,
    UndefinedValueError,
)
from grapher.evaluator import Evaluator, evaluate
from grapher.expression import Expression
from grapher.parser import parse
from grapher.sampler import SampleRange, sample


def value_of(formula, x, context=None):
    return evaluate(parse(formula, context), x, context)


class TestArithmetic:
    """Test evaluation of arithmetic."""

    @pytest.mark.parametrize(
        "formula,x,expected",
        [
            ("2+3*4", 0, 14.0),
            ("2x+1", 3, 7.0),
            ("3(x+1)", 4, 15.0),
            ("(x+1)(x-1)", 3, 8.0),
            ("1-2-3", 0, -4.0),
            ("8/4/2", 0, 1.0),
            ("2^3^2", 0, 512.0),
            ("-x^2", 3, -9.0),
            ("(-x)^2", 3, 9.0),
            ("x^-1", 4, 0.25),
            ("(-2)^3", 0, -8.0),
            ("0^0", 0, 1.0),
            ("--x", 5, 5.0),
        ],
    )
    def test_values(self, formula, x, expected):
        """Test arithmetic results."""
        assert value_of(formula, x) == pytest.approx(expected)

    def test_identity(self):
        """Test that x evaluates to its binding."""
        assert value_of("x", -2.5) == -2.5


class TestFunctions:
    """Test the built-in functions."""

    @pytest.mark.parametrize(
        "formula,x,expected",
        [
            ("sqrt(x)", 9, 3.0),
            ("sqrt(x)", 0, 0.0),
            ("sin(x)", 0, 0.0),
            ("cos(x)", 0, 1.0),
            ("abs(x)", -4, 4.0),
            ("exp(x)", 0, 1.0),
            ("ln(x)", math.e, 1.0),
            ("log10(x)", 1000, 3.0),
            ("floor(x)", 2.7, 2.0),
            ("ceil(x)", 2.2, 3.0),
            ("sign(x)", -3, -1.0),
            ("sign(x)", 0, 0.0),
            ("atan(x)", 1, math.pi / 4),
            ("asin(x)", 1, math.pi / 2),
        ],
    )
    def test_values(self, formula, x, expected):
        """Test function results."""
        assert value_of(formula, x) == pytest.approx(expected)

    def test_log_is_natural_by_default(self):
        """Test that log is the natural logarithm unless configured."""
        assert value_of("log(x)", math.e) == pytest.approx(1.0)

    def test_log_base_ten_flag(self, context):
        """Test that the use_base_ten_log flag switches log to base 10."""
        context.set_flag("use_base_ten_log", True)
        assert value_of("log(x)", 100, context) == pytest.approx(2.0)
        assert value_of("ln(x)", math.e, context) == pytest.approx(1.0)

    def test_tangent_near_pole_is_finite(self):
        """Test that tan close to pi/2 is a large finite value."""
        assert math.isfinite(value_of("tan(x)", math.pi / 2))

    def test_custom_function(self, context):
        """Test that a registered function is called."""
        context.add_function("double", lambda v: 2 * v)
        assert value_of("double(x) + 1", 3, context) == 7.0

    def test_custom_function_dividing_by_zero(self, context):
        """Test that ZeroDivisionError from a registered function is a domain error."""
        context.add_function("inv", lambda v: 1 / v)
        with pytest.raises(DivisionByZeroError) as exc_info:
            value_of("inv(x)", 0, context)
        assert exc_info.value.x == 0.0

    def test_custom_function_overflow(self, context):
        """Test that arithmetic overflow in a registered function is undefined."""
        context.add_function("huge", lambda v: math.exp(v) ** 10)
        with pytest.raises(UndefinedValueError):
            value_of("huge(x)", 100, context)

    def test_custom_function_complex_result(self, context):
        """Test that a complex result from a registered function is undefined."""
        context.add_function("root", lambda v: v ** 0.5)
        assert value_of("root(x)", 4, context) == 2.0
        with pytest.raises(UndefinedValueError):
            value_of("root(x)", -4, context)

    def test_sampling_custom_function_never_raises(self, context):
        """Test that sampling a registered function marks its failures invalid."""
        context.add_function("inv", lambda v: 1 / v)
        expression = Expression("inv(x)", context=context)

        results = list(sample(expression, SampleRange(-1, 1, density=2)))

        assert [r.is_valid for r in results] == [True, True, False, True]
        assert results[2].reason == InvalidReason.DIVISION_BY_ZERO


class TestDomainErrors:
    """Test that undefined values raise with the right reason."""

    @pytest.mark.parametrize(
        "formula,x,error,reason",
        [
            ("1/x", 0, DivisionByZeroError, InvalidReason.DIVISION_BY_ZERO),
            ("1/(x-x)", 7, DivisionByZeroError, InvalidReason.DIVISION_BY_ZERO),
            ("1/x", 1e-13, DivisionByZeroError, InvalidReason.DIVISION_BY_ZERO),
            ("x^-1", 0, DivisionByZeroError, InvalidReason.DIVISION_BY_ZERO),
            ("sqrt(x)", -1, NegativeSqrtError, InvalidReason.NEGATIVE_EVEN_ROOT),
            ("log(x)", 0, NonPositiveLogError, InvalidReason.NON_POSITIVE_LOG),
            ("ln(x)", -1, NonPositiveLogError, InvalidReason.NON_POSITIVE_LOG),
            ("log10(x)", -5, NonPositiveLogError, InvalidReason.NON_POSITIVE_LOG),
            ("x^0.5", -4, InvalidPowerError, InvalidReason.UNDEFINED),
            ("x^(1/3)", -8, InvalidPowerError, InvalidReason.UNDEFINED),
            ("asin(x)", 2, UndefinedValueError, InvalidReason.UNDEFINED),
            ("exp(x)", 1000, UndefinedValueError, InvalidReason.UNDEFINED),
            ("10^x", 400, UndefinedValueError, InvalidReason.UNDEFINED),
            ("x*x", 1e200, UndefinedValueError, InvalidReason.UNDEFINED),
            ("x^2", 1e200, UndefinedValueError, InvalidReason.UNDEFINED),
        ],
    )
    def test_domain_error(self, formula, x, error, reason):
        """Test the error raised for an undefined value."""
        with pytest.raises(error) as exc_info:
            value_of(formula, x)
        assert exc_info.value.reason == reason

    def test_error_records_x(self):
        """Test that the failing x is attached to the error."""
        with pytest.raises(EvalError) as exc_info:
            value_of("1/(x-2)", 2)
        assert exc_info.value.x == 2.0
        assert exc_info.value.details["x"] == 2.0
        assert exc_info.value.details["reason"] == "division-by-zero"

    def test_left_operand_reported_first(self):
        """Test that the leftmost failure wins."""
        with pytest.raises(NegativeSqrtError):
            value_of("sqrt(x) + 1/(x+1)", -1)

    def test_zero_tolerance_flag(self, context):
        """Test that the tolerance for a zero divisor is configurable."""
        context.set_flag("zero_tolerance", 1e-3)
        with pytest.raises(DivisionByZeroError):
            value_of("1/x", 1e-4, context)
        assert value_of("1/x", 1e-2, context) == pytest.approx(100.0)

    def test_no_nan_or_infinity_escapes(self):
        """Test that results are finite whenever no error is raised."""
        ast = parse("tan(x) + 1/x + log(abs(x))")
        for i in range(-50, 51):
            x = i / 7
            try:
                result = evaluate(ast, x)
            except EvalError:
                continue
            assert math.isfinite(result)


class TestEvaluator:
    """Test the reusable evaluator."""

    def test_deterministic(self):
        """Test that repeated evaluation gives identical results."""
        evaluator = Evaluator()
        ast = parse("sin(x)^2 + cos(x)^2")
        assert evaluator.evaluate(ast, 1.3) == evaluator.evaluate(ast, 1.3)

    def test_deterministic_failure(self):
        """Test that repeated failures report the same reason."""
        evaluator = Evaluator()
        ast = parse("sqrt(x)")
        reasons = []
        for _ in range(2):
            with pytest.raises(EvalError) as exc_info:
                evaluator.evaluate(ast, -1)
            reasons.append(exc_info.value.reason)
        assert reasons[0] == reasons[1]

    def test_shared_between_threads(self):
        """Test that concurrent evaluation of one tree matches sequential results."""
        evaluator = Evaluator()
        ast = parse("x^3 - 2x + sin(x)")
        xs = [i / 10 for i in range(-200, 200)]

        expected = [evaluator.evaluate(ast, x) for x in xs]
        with ThreadPoolExecutor(max_workers=4) as pool:
            actual = list(pool.map(lambda x: evaluator.evaluate(ast, x), xs))

        assert actual == expected
