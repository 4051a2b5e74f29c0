"""
AST visitor that renders a tree back to formula text.

StringVisitor produces a canonical, fully explicit form: every
multiplication is written as ``*`` and parentheses appear only where
precedence or associativity requires them, so the output parses back to an
equal tree.
"""

from .ast import ASTNode, BinaryOp, FunctionCall, Number, UnaryOp, Variable
from .context import Associativity, Context


class StringVisitor:
    """
    Convert AST to string representation.

    Examples:
    - BinaryOp(Number(2), '+', Number(3)) → "2 + 3"
    - FunctionCall('sin', Variable('x')) → "sin(x)"
    """

    def __init__(self, context: Context | None = None):
        self.context = context or Context.default()

    def visit_number(self, node: Number) -> str:
        # Format number nicely (remove .0 for integers)
        if node.value.is_integer() and abs(node.value) < 1e16:
            return str(int(node.value))
        return repr(node.value)

    def visit_variable(self, node: Variable) -> str:
        return node.name

    def visit_binary_op(self, node: BinaryOp) -> str:
        # Render the left spine in a loop so long sums do not recurse
        chain: list[BinaryOp] = []
        current: ASTNode = node
        while isinstance(current, BinaryOp):
            chain.append(current)
            current = current.left

        text = current.accept(self)
        for op_node in reversed(chain):
            text = self._join(op_node, text, op_node.right.accept(self))
        return text

    def _join(self, node: BinaryOp, left_str: str, right_str: str) -> str:
        op_prec = self.context.get_operator_precedence(node.op)
        left_prec = self._get_precedence(node.left)
        right_prec = self._get_precedence(node.right)

        if self.context.get_operator_associativity(node.op) == Associativity.RIGHT:
            left_needs_parens = left_prec <= op_prec
            right_needs_parens = right_prec < op_prec
        else:
            left_needs_parens = left_prec < op_prec
            right_needs_parens = right_prec <= op_prec

        if left_needs_parens:
            left_str = f"({left_str})"
        if right_needs_parens:
            right_str = f"({right_str})"

        if node.op == "^":
            return f"{left_str}^{right_str}"
        return f"{left_str} {node.op} {right_str}"

    def visit_unary_op(self, node: UnaryOp) -> str:
        operand_str = node.operand.accept(self)

        if self._get_precedence(node.operand) < self.context.get_operator_precedence(node.op, is_unary=True):
            operand_str = f"({operand_str})"

        return f"{node.op}{operand_str}"

    def visit_function_call(self, node: FunctionCall) -> str:
        return f"{node.name}({node.argument.accept(self)})"

    def _get_precedence(self, node: ASTNode) -> int:
        """Get precedence of a node for parenthesization; atoms bind tightest."""
        if isinstance(node, BinaryOp):
            return self.context.get_operator_precedence(node.op)
        if isinstance(node, UnaryOp) or (isinstance(node, Number) and node.value < 0):
            return self.context.get_operator_precedence("-", is_unary=True)
        return 100


def to_string(node: ASTNode, context: Context | None = None) -> str:
    """Render an AST as canonical formula text."""
    return node.accept(StringVisitor(context))
