"""Combine several rule trees into one."""

from typing import Sequence

from .ast import MAX_TREE_DEPTH, Node, Operator, OperatorKind
from .exceptions import CombineErrorKind, RuleCombineError, RuleDepthError


def combine(rules: Sequence[Node], operator: OperatorKind = OperatorKind.AND) -> Node:
    """Fold rules left to right under a single binary operator.

    ``combine([r1, r2, r3])`` builds ``AND(AND(r1, r2), r3)``. The input trees
    are reused as-is; nothing is copied or mutated. A single rule is returned
    unchanged.

    Args:
        rules: Rule trees to combine, in order.
        operator: AND (the default) or OR.

    Raises:
        RuleCombineError: If ``rules`` is empty or the result would be too deep.
        ValueError: If ``operator`` is not binary.
    """
    operator = OperatorKind(operator)
    if operator.arity != 2:
        raise ValueError(f"Rules can only be combined with AND or OR, not {operator.value}")

    rules = list(rules)
    if not rules:
        raise RuleCombineError("Cannot combine an empty list of rules", CombineErrorKind.EMPTY)

    combined = rules[0]
    for rule in rules[1:]:
        try:
            combined = Operator(operator, (combined, rule))
        except RuleDepthError as e:
            raise RuleCombineError(
                f"Combined rule would exceed the maximum depth of {MAX_TREE_DEPTH}",
                CombineErrorKind.TOO_DEEP,
            ) from e

    return combined
