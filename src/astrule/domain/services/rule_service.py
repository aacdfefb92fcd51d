"""Service for creating, storing, combining and evaluating named rules.

The service ties the rule core (parser, codec, combiner, evaluator) to a
rule store. The store is passed in, so the same service works against the
SQL store, the in-memory store, or any other RuleStore implementation.
"""

from typing import Any, Mapping, Sequence

from astrule.core.logging import LoggingContext, get_logger
from astrule.core.rules import (
    LiteralType,
    Node,
    OperatorKind,
    combine_rules,
    deserialize_rule,
    evaluate_rule,
    parse_rule,
    validate_rule,
)
from astrule.domain.entities import Rule
from astrule.infrastructure.store.base import RuleStore

logger = get_logger(__name__)


class RuleService:
    """Service for managing named rules in a store."""

    def __init__(
        self,
        store: RuleStore,
        catalog: Mapping[str, LiteralType | str] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Where rules are saved and loaded.
            catalog: Optional field name to literal type mapping. When set,
                every rule is validated against it before being saved.
        """
        self.store = store
        self.catalog = catalog

    async def create_rule(self, name: str, expression: str) -> Rule:
        """Parse a rule expression and store it under a name.

        Raises:
            RuleSyntaxError: If the expression does not parse.
            RuleValidationError: If a catalog is set and the rule does not fit it.
            StoreError: If the store fails.
        """
        node = parse_rule(expression)
        return await self.save_rule(name, node)

    async def save_rule(self, name: str, node: Node) -> Rule:
        """Store an already-built rule tree under a name."""
        rule = Rule(name=name, node=node)
        if self.catalog is not None:
            validate_rule(node, self.catalog)

        with LoggingContext(rule_name=name):
            await self.store.save(name, rule.encoding)
            logger.info("Rule saved", depth=node.depth)
        return rule

    async def get_rule(self, name: str) -> Rule:
        """Load and decode a stored rule.

        Raises:
            RuleNotFoundError: If no rule has that name.
            RuleDecodeError: If the stored encoding is invalid.
        """
        encoding = await self.store.load(name)
        return Rule(name=name, node=deserialize_rule(encoding))

    async def evaluate(self, name: str, context: Mapping[str, Any]) -> bool:
        """Evaluate a stored rule against a data record.

        Raises:
            RuleEvaluationError: If a field is missing or has the wrong type.
        """
        rule = await self.get_rule(name)
        with LoggingContext(rule_name=name):
            result = evaluate_rule(rule.node, context)
            logger.debug("Rule evaluated", result=result)
        return result

    async def combine(
        self,
        name: str,
        rule_names: Sequence[str],
        operator: OperatorKind = OperatorKind.AND,
    ) -> Rule:
        """Combine stored rules into a new stored rule.

        Rules are folded left in the order given.

        Raises:
            RuleCombineError: If ``rule_names`` is empty.
        """
        nodes = [(await self.get_rule(rule_name)).node for rule_name in rule_names]
        combined = combine_rules(nodes, operator)
        with LoggingContext(rule_name=name):
            logger.info(
                "Rules combined",
                sources=list(rule_names),
                operator=OperatorKind(operator).value,
            )
        return await self.save_rule(name, combined)

    async def delete_rule(self, name: str) -> None:
        """Delete a stored rule."""
        await self.store.delete(name)
        with LoggingContext(rule_name=name):
            logger.info("Rule deleted")

    async def list_rules(self) -> list[str]:
        """List stored rule names."""
        return await self.store.list_names()
