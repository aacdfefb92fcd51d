"""Render rule trees back to rule text."""

from .ast import Literal, LiteralType, Node, Operand, Operator, OperatorKind

_PRECEDENCE = {
    OperatorKind.OR: 1,
    OperatorKind.AND: 2,
    OperatorKind.NOT: 3,
}
_OPERAND_PRECEDENCE = 4


def format_rule(node: Node) -> str:
    """Return canonical rule text for a tree.

    Keywords are upper-case and only the parentheses the grammar needs are
    written, so ``parse_rule(format_rule(node)) == node`` whenever every field
    name is a valid identifier.
    """
    if isinstance(node, Operand):
        return f"{node.field} {node.comparator.value} {format_literal(node.literal)}"

    if isinstance(node, Operator):
        precedence = _PRECEDENCE[node.kind]
        if node.kind is OperatorKind.NOT:
            return f"NOT {_wrap(node.left, precedence)}"
        # AND/OR fold left, so a right child at the same level needs parentheses
        left = _wrap(node.left, precedence)
        right = _wrap(node.right, precedence + 1)
        return f"{left} {node.kind.value} {right}"

    raise TypeError(f"Cannot format {type(node).__name__}")


def format_literal(literal: Literal) -> str:
    """Return the rule-text spelling of a literal."""
    if literal.type is LiteralType.BOOL:
        return "true" if literal.value else "false"
    if literal.type is LiteralType.STRING:
        escaped = literal.value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    return repr(literal.value)


def _wrap(node: Node, min_precedence: int) -> str:
    text = format_rule(node)
    if _precedence_of(node) < min_precedence:
        return f"({text})"
    return text


def _precedence_of(node: Node) -> int:
    if isinstance(node, Operator):
        return _PRECEDENCE[node.kind]
    return _OPERAND_PRECEDENCE
