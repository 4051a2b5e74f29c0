"""
Abstract Syntax Tree (AST) node definitions for formulas.

This module defines the AST node hierarchy used to represent parsed formulas.
It follows the Visitor pattern so that evaluation and rendering live outside
the node classes. Nodes are never mutated after parsing.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterator, Protocol


class ASTVisitor(Protocol):
    """
    Visitor protocol for traversing AST nodes.

    Implementations provide evaluation and string rendering.
    """

    def visit_number(self, node: "Number") -> Any:
        ...

    def visit_variable(self, node: "Variable") -> Any:
        ...

    def visit_binary_op(self, node: "BinaryOp") -> Any:
        ...

    def visit_unary_op(self, node: "UnaryOp") -> Any:
        ...

    def visit_function_call(self, node: "FunctionCall") -> Any:
        ...


class ASTNode(ABC):
    """
    Base class for all AST nodes.

    Uses the Visitor pattern to allow multiple operations (eval, string)
    without modifying node classes.
    """

    @abstractmethod
    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor for traversal."""
        pass

    @abstractmethod
    def children(self) -> tuple["ASTNode", ...]:
        """Return the direct child nodes."""
        pass

    @abstractmethod
    def __repr__(self) -> str:
        """Return string representation for debugging."""
        pass

    def walk(self) -> Iterator["ASTNode"]:
        """Iterate over this node and all descendants, depth first."""
        stack: list[ASTNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def depth(self) -> int:
        """Return the height of the tree rooted at this node."""
        deepest = 0
        stack: list[tuple[ASTNode, int]] = [(self, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children())
        return deepest


# Leaf Nodes (terminals)


class Number(ASTNode):
    """
    Represents a numeric literal.

    Examples: 42, 3.14, 1e-10
    """

    def __init__(self, value: float | int):
        self.value = float(value)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_number(self)

    def children(self) -> tuple[ASTNode, ...]:
        return ()

    def __repr__(self) -> str:
        return f"Number({self.value})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Number) and self.value == other.value

    def __hash__(self) -> int:
        return hash(("Number", self.value))


class Variable(ASTNode):
    """Represents the free variable."""

    def __init__(self, name: str = "x"):
        self.name = name

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable(self)

    def children(self) -> tuple[ASTNode, ...]:
        return ()

    def __repr__(self) -> str:
        return f"Variable('{self.name}')"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Variable) and self.name == other.name

    def __hash__(self) -> int:
        return hash(("Variable", self.name))


# Composite Nodes (operators and functions)


class BinaryOp(ASTNode):
    """
    Represents a binary operation.

    Examples: 2 + 3, x * x, x ^ 2

    Operators: +, -, *, /, ^
    """

    def __init__(self, left: ASTNode, op: str, right: ASTNode, implicit: bool = False):
        self.left = left
        self.op = op
        self.right = right
        # True for a multiplication inferred from adjacency, as in 2x
        self.implicit = implicit

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary_op(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.left, self.right)

    def __repr__(self) -> str:
        return f"BinaryOp({self.left!r}, '{self.op}', {self.right!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, BinaryOp)
            and self.left == other.left
            and self.op == other.op
            and self.right == other.right
        )

    def __hash__(self) -> int:
        return hash(("BinaryOp", self.left, self.op, self.right))


class UnaryOp(ASTNode):
    """
    Represents a unary operation.

    Examples: -x, -(x + 1)
    """

    def __init__(self, op: str, operand: ASTNode):
        self.op = op
        self.operand = operand

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_unary_op(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.operand,)

    def __repr__(self) -> str:
        return f"UnaryOp('{self.op}', {self.operand!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, UnaryOp)
            and self.op == other.op
            and self.operand == other.operand
        )

    def __hash__(self) -> int:
        return hash(("UnaryOp", self.op, self.operand))


class FunctionCall(ASTNode):
    """
    Represents a single-argument function call.

    Examples: sin(x), sqrt(2), log(x + 1)
    """

    def __init__(self, name: str, argument: ASTNode):
        self.name = name
        self.argument = argument

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_call(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.argument,)

    def __repr__(self) -> str:
        return f"FunctionCall('{self.name}', {self.argument!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, FunctionCall)
            and self.name == other.name
            and self.argument == other.argument
        )

    def __hash__(self) -> int:
        return hash(("FunctionCall", self.name, self.argument))
