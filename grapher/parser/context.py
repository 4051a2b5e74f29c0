"""
Context system for formula parsing and evaluation.

A context defines the environment a formula is read and evaluated in:
- The free variable name
- Available functions
- Operator precedence and associativity
- Evaluation flags (logarithm base, zero tolerance, maximum tree depth)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

import yaml

if TYPE_CHECKING:
    from ..core.config import GrapherSettings


class Associativity(Enum):
    """Operator associativity."""

    LEFT = "left"
    RIGHT = "right"


@dataclass
class OperatorConfig:
    """Configuration for an operator."""

    symbol: str
    precedence: int
    associativity: Associativity
    binary: bool = True  # True for binary, False for unary


@dataclass
class FunctionConfig:
    """
    Configuration for a single-argument function.

    When ``evaluator`` is None the built-in implementation of ``name`` is used.
    A custom evaluator must be a pure ``float -> float`` callable.
    """

    name: str
    evaluator: Callable[[float], float] | None = None


STANDARD_FUNCTIONS = (
    "sqrt",
    "sin",
    "cos",
    "tan",
    "asin",
    "acos",
    "atan",
    "sinh",
    "cosh",
    "tanh",
    "log",
    "ln",
    "log10",
    "exp",
    "abs",
    "floor",
    "ceil",
    "sign",
)

DEFAULT_FLAGS: dict[str, Any] = {
    "use_base_ten_log": False,
    "zero_tolerance": 1e-12,
    "max_depth": 100,
}


def _standard_operators() -> dict[str, OperatorConfig]:
    return {
        "+": OperatorConfig("+", precedence=1, associativity=Associativity.LEFT),
        "-": OperatorConfig("-", precedence=1, associativity=Associativity.LEFT),
        "*": OperatorConfig("*", precedence=2, associativity=Associativity.LEFT),
        "/": OperatorConfig("/", precedence=2, associativity=Associativity.LEFT),
        # Negation binds looser than ^ so that -x^2 is -(x^2)
        "-u": OperatorConfig("-u", precedence=3, associativity=Associativity.RIGHT, binary=False),
        "^": OperatorConfig("^", precedence=4, associativity=Associativity.RIGHT),
    }


@dataclass
class Context:
    """
    Parsing and evaluation environment.

    Attributes:
        name: Context name
        variable: The single free variable
        functions: Available functions
        operators: Operator precedence and associativity
        flags: Evaluation flags
    """

    name: str
    variable: str = "x"
    functions: dict[str, FunctionConfig] = field(default_factory=dict)
    operators: dict[str, OperatorConfig] = field(default_factory=_standard_operators)
    flags: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_FLAGS))

    @classmethod
    def default(cls) -> "Context":
        """
        Create the standard context.

        Contains every built-in function and the default flags.
        """
        context = cls(name="Default")
        for func in STANDARD_FUNCTIONS:
            context.functions[func] = FunctionConfig(name=func)
        return context

    @classmethod
    def from_settings(cls, settings: "GrapherSettings") -> "Context":
        """Create the standard context with flags taken from settings."""
        context = cls.default()
        context.flags.update(
            use_base_ten_log=settings.USE_BASE_TEN_LOG,
            zero_tolerance=settings.ZERO_TOLERANCE,
            max_depth=settings.MAX_DEPTH,
        )
        return context

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Context":
        """
        Load context from YAML file.

        Recognised keys: ``name``, ``functions`` (subset of the built-in
        functions, defaults to all of them) and ``flags``.

        Args:
            path: Path to YAML configuration file

        Returns:
            Context instance

        Raises:
            ValueError: If the file names an unknown function or flag
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        context = cls(name=data.get("name", Path(path).stem))

        for func_name in data.get("functions", STANDARD_FUNCTIONS):
            if func_name not in STANDARD_FUNCTIONS:
                raise ValueError(f"Unknown function in context file: {func_name}")
            context.functions[func_name] = FunctionConfig(name=func_name)

        for flag_name, value in (data.get("flags") or {}).items():
            if flag_name not in DEFAULT_FLAGS:
                raise ValueError(f"Unknown flag in context file: {flag_name}")
            context.flags[flag_name] = value

        return context

    def get_flag(self, flag_name: str, default: Any = None) -> Any:
        """
        Get a context flag value.

        Args:
            flag_name: Name of the flag
            default: Default value if flag not set

        Returns:
            Flag value or default
        """
        return self.flags.get(flag_name, default)

    def set_flag(self, flag_name: str, value: Any) -> None:
        """Set a context flag."""
        self.flags[flag_name] = value

    def add_function(self, name: str, evaluator: Callable[[float], float]) -> None:
        """Register a custom single-argument function."""
        if not name.isidentifier() or name == self.variable:
            raise ValueError(f"Invalid function name: {name!r}")
        self.functions[name] = FunctionConfig(name=name, evaluator=evaluator)

    def get_operator_precedence(self, op: str, is_unary: bool = False) -> int:
        """
        Get the precedence of an operator.

        Args:
            op: Operator symbol
            is_unary: Whether this is a unary operator

        Returns:
            Precedence value (higher = binds tighter), 0 if unknown
        """
        key = f"{op}u" if is_unary else op
        if key in self.operators:
            return self.operators[key].precedence
        return 0

    def get_operator_associativity(self, op: str) -> Associativity:
        """Get the associativity of a binary operator."""
        if op in self.operators:
            return self.operators[op].associativity
        return Associativity.LEFT

    def is_variable(self, name: str) -> bool:
        """Check if name is the free variable of this context."""
        return name == self.variable

    def is_function(self, name: str) -> bool:
        """Check if name is a function in this context."""
        return name in self.functions
