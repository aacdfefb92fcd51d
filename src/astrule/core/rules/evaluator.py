"""Evaluator for rule expressions."""

from typing import Any, Mapping

from .ast import Comparator, Node, Operand, Operator, OperatorKind, literal_type_of
from .exceptions import MissingFieldError, RuleEvaluationError, TypeMismatchError


class Evaluator:
    """Evaluates an AST against a context.

    The context maps field names to int, float, bool or str values. Integers
    and floats compare with each other under every comparator; strings and
    booleans only support ``==`` and ``!=`` against a literal of the same type.

    AND and OR short-circuit: once the left child decides the result the
    right child is not evaluated, so errors it would raise never surface.
    """

    def __init__(self, context: Mapping[str, Any]):
        """Initialize the evaluator.

        Args:
            context: The data record to evaluate against.
        """
        self.context = context

    def evaluate(self, node: Node) -> bool:
        """Evaluate a node."""
        if isinstance(node, Operand):
            return self._compare(node)

        if isinstance(node, Operator):
            if node.kind is OperatorKind.NOT:
                return not self.evaluate(node.left)

            left = self.evaluate(node.left)
            if node.kind is OperatorKind.AND:
                return left and self.evaluate(node.right)
            if node.kind is OperatorKind.OR:
                return left or self.evaluate(node.right)

        raise RuleEvaluationError(f"Unknown node type: {type(node).__name__}")

    def _compare(self, node: Operand) -> bool:
        """Compare a context value with an operand's literal."""
        if node.field not in self.context:
            raise MissingFieldError(node.field)

        value = self.context[node.field]
        value_type = literal_type_of(value)
        literal = node.literal
        op = node.comparator

        if value_type is None:
            raise TypeMismatchError(node.field, op.value, literal.type.value, type(value).__name__)

        if value_type.is_numeric and literal.type.is_numeric:
            return _ORDERING[op](value, literal.value)

        if value_type is literal.type and op.is_equality:
            if op is Comparator.EQ:
                return value == literal.value
            return value != literal.value

        raise TypeMismatchError(node.field, op.value, literal.type.value, value_type.value)


_ORDERING = {
    Comparator.GT: lambda a, b: a > b,
    Comparator.LT: lambda a, b: a < b,
    Comparator.GTE: lambda a, b: a >= b,
    Comparator.LTE: lambda a, b: a <= b,
    Comparator.EQ: lambda a, b: a == b,
    Comparator.NEQ: lambda a, b: a != b,
}