"""
Numeric evaluation of expression trees.

EvalVisitor walks an AST with a bound value for the free variable. Every
domain failure raises a specific EvalError subclass instead of producing
NaN, infinity or a substitute value, so callers can tell a gap in a curve
from a real point.
"""

import math
from typing import Callable

from .core.errors import (
    DivisionByZeroError,
    EvalError,
    InvalidPowerError,
    NegativeSqrtError,
    NonPositiveLogError,
    UndefinedValueError,
)
from .parser.ast import ASTNode, BinaryOp, FunctionCall, Number, UnaryOp, Variable
from .parser.context import Context


def _sqrt(value: float) -> float:
    if value < 0:
        raise NegativeSqrtError(f"Square root of negative number {value!r}")
    return math.sqrt(value)


def _checked_log(log: Callable[[float], float]) -> Callable[[float], float]:
    def _log(value: float) -> float:
        if value <= 0:
            raise NonPositiveLogError(f"Logarithm of non-positive number {value!r}")
        return log(value)
    return _log


def _unit_interval(func: Callable[[float], float], name: str) -> Callable[[float], float]:
    def _bounded(value: float) -> float:
        if not -1.0 <= value <= 1.0:
            raise UndefinedValueError(f"{name} is undefined at {value!r}")
        return func(value)
    return _bounded


def _sign(value: float) -> float:
    if value == 0:
        return 0.0
    return math.copysign(1.0, value)


_natural_log = _checked_log(math.log)
_base_ten_log = _checked_log(math.log10)

BUILTIN_FUNCTIONS: dict[str, Callable[[float], float]] = {
    "sqrt": _sqrt,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": _unit_interval(math.asin, "asin"),
    "acos": _unit_interval(math.acos, "acos"),
    "atan": math.atan,
    "sinh": math.sinh,
    "cosh": math.cosh,
    "tanh": math.tanh,
    "log": _natural_log,
    "ln": _natural_log,
    "log10": _base_ten_log,
    "exp": math.exp,
    "abs": abs,
    "floor": math.floor,
    "ceil": math.ceil,
    "sign": _sign,
}


class EvalVisitor:
    """
    Evaluate an AST at one value of the free variable.

    A visitor is bound to a single x value; use Evaluator (or evaluate()) to
    evaluate the same tree at many values.

    Args:
        x_value: Value substituted for the variable
        context: Evaluation context (functions and flags)
    """

    def __init__(self, x_value: float, context: Context | None = None):
        self.x_value = float(x_value)
        self.context = context or Context.default()
        self.zero_tolerance = self.context.get_flag("zero_tolerance", 1e-12)
        self.use_base_ten_log = self.context.get_flag("use_base_ten_log", False)

    def visit_number(self, node: Number) -> float:
        return node.value

    def visit_variable(self, node: Variable) -> float:
        return self.x_value

    def visit_binary_op(self, node: BinaryOp) -> float:
        # Left-associative chains grow down the left side; walk it in a loop
        chain: list[BinaryOp] = []
        current: ASTNode = node
        while isinstance(current, BinaryOp):
            chain.append(current)
            current = current.left

        value = current.accept(self)
        for op_node in reversed(chain):
            value = self._apply(op_node.op, value, op_node.right.accept(self))
        return value

    def _apply(self, op: str, left: float, right: float) -> float:
        if op == "+":
            result = left + right
        elif op == "-":
            result = left - right
        elif op == "*":
            result = left * right
        elif op == "/":
            if abs(right) < self.zero_tolerance:
                raise DivisionByZeroError(f"Division by zero ({left!r} / {right!r})")
            result = left / right
        elif op == "^":
            result = self._power(left, right)
        else:
            raise UndefinedValueError(f"Unknown operator: {op}")

        return self._finite(result)

    def visit_unary_op(self, node: UnaryOp) -> float:
        operand = node.operand.accept(self)

        if node.op == "-":
            return -operand
        raise UndefinedValueError(f"Unknown unary operator: {node.op}")

    def visit_function_call(self, node: FunctionCall) -> float:
        argument = node.argument.accept(self)

        config = self.context.functions.get(node.name)
        if config is not None and config.evaluator is not None:
            func = config.evaluator
        elif node.name == "log" and self.use_base_ten_log:
            func = _base_ten_log
        elif node.name in BUILTIN_FUNCTIONS:
            func = BUILTIN_FUNCTIONS[node.name]
        else:
            raise UndefinedValueError(f"Unknown function: {node.name}")

        try:
            raw = func(argument)
        except ZeroDivisionError:
            raise DivisionByZeroError(f"Division by zero in {node.name}({argument!r})") from None
        except ArithmeticError:
            raise UndefinedValueError(f"{node.name}({argument!r}) overflows") from None
        except ValueError:
            raise UndefinedValueError(f"{node.name} is undefined at {argument!r}") from None

        # Custom functions may return complex values, e.g. v ** 0.5 for v < 0
        try:
            result = float(raw)
        except (TypeError, OverflowError):
            raise UndefinedValueError(f"{node.name}({argument!r}) is not a finite real number") from None

        return self._finite(result)

    def _power(self, base: float, exponent: float) -> float:
        if base == 0 and exponent < 0:
            raise DivisionByZeroError(f"Zero raised to negative power {exponent!r}")
        if base < 0 and not exponent.is_integer():
            raise InvalidPowerError(
                f"Negative base {base!r} with non-integer exponent {exponent!r}"
            )
        try:
            return math.pow(base, exponent)
        except OverflowError:
            raise UndefinedValueError(f"{base!r} ^ {exponent!r} overflows") from None

    @staticmethod
    def _finite(value: float) -> float:
        if not math.isfinite(value):
            raise UndefinedValueError(f"Result {value!r} is not finite")
        return value


class Evaluator:
    """
    Reusable evaluator for a context.

    Holds no per-call state, so one instance may be shared between threads.
    """

    def __init__(self, context: Context | None = None):
        self.context = context or Context.default()

    def evaluate(self, ast: ASTNode, x_value: float) -> float:
        """
        Evaluate ``ast`` with the variable bound to ``x_value``.

        Raises:
            EvalError: If the expression is undefined at ``x_value``; the
                error's ``x`` attribute is set to ``x_value``
        """
        try:
            return ast.accept(EvalVisitor(x_value, self.context))
        except EvalError as exc:
            exc.x = float(x_value)
            exc.details["x"] = exc.x
            raise


def evaluate(ast: ASTNode, x_value: float, context: Context | None = None) -> float:
    """Evaluate ``ast`` at ``x_value``; see Evaluator.evaluate."""
    return Evaluator(context).evaluate(ast, x_value)
