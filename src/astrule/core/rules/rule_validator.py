"""Rule validator.

Checks a parsed rule against an attribute catalog before it is stored, so
that rules referring to unknown fields or comparing a field with a literal of
the wrong type are rejected up front instead of failing at evaluation time.
"""

from typing import Mapping

from .ast import LiteralType, Node, Operand, Operator
from .exceptions import RuleValidationError


class RuleValidator:
    """Validates rules against a catalog of known fields."""

    def __init__(self, catalog: Mapping[str, LiteralType | str]):
        """Initialize validator.

        Args:
            catalog: Field name to the literal type values of that field have.
        """
        self.catalog = {name: LiteralType(type_) for name, type_ in catalog.items()}
        self.errors: list[str] = []

    def validate(self, node: Node) -> None:
        """Validate a rule.

        Args:
            node: Rule AST

        Raises:
            RuleValidationError: If the rule does not fit the catalog
        """
        self.errors = []
        self._validate_node(node)

        if self.errors:
            raise RuleValidationError(list(self.errors))

    def _validate_node(self, node: Node) -> None:
        """Recursively validate AST node."""
        if isinstance(node, Operand):
            self._validate_operand(node)
            return

        if isinstance(node, Operator):
            for child in node.children:
                self._validate_node(child)
            return

        self.errors.append(f"Unknown node type: {type(node).__name__}")

    def _validate_operand(self, node: Operand) -> None:
        """Validate a single condition."""
        field_type = self.catalog.get(node.field)
        if field_type is None:
            self.errors.append(
                f"Field '{node.field}' does not exist. "
                f"Available fields: {', '.join(sorted(self.catalog))}"
            )
            return

        literal_type = node.literal.type
        if field_type.is_numeric and literal_type.is_numeric:
            return

        if field_type is not literal_type:
            self.errors.append(
                f"Field '{node.field}' is {field_type.value} "
                f"but is compared with a {literal_type.value} literal"
            )
            return

        if not node.comparator.is_equality:
            self.errors.append(
                f"Field '{node.field}' is {field_type.value} "
                f"and only supports '==' and '!=', not '{node.comparator.value}'"
            )


def validate_rule(node: Node, catalog: Mapping[str, LiteralType | str]) -> None:
    """Validate a rule against an attribute catalog.

    Args:
        node: Rule AST
        catalog: Field name to literal type

    Raises:
        RuleValidationError: If the rule does not fit the catalog

    Examples:
        >>> validate_rule(parse_rule("age > 30"), {"age": "int"})
        # OK

        >>> validate_rule(parse_rule("dept == 'Sales'"), {"age": "int"})
        # Raises: RuleValidationError: Field 'dept' does not exist
    """
    validator = RuleValidator(catalog)
    validator.validate(node)
