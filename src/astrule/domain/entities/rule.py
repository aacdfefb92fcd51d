"""Rule entity.

A rule is a named, parsed rule tree. The tree itself is immutable, so a Rule
can hand it out freely; combining rules shares their trees instead of
copying them.
"""

from dataclasses import dataclass
from typing import Any

from astrule.core.rules import Node, format_rule, serialize_rule


@dataclass(frozen=True)
class Rule:
    """Named rule entity.

    Attributes:
        name: Unique name the rule is stored under.
        node: Root of the rule's AST.
    """

    name: str
    node: Node

    def __post_init__(self) -> None:
        """Validate rule after initialization."""
        if not self.name or not self.name.strip():
            raise ValueError("Rule name is required")
        if len(self.name) > 255:
            raise ValueError("Rule name must be 255 characters or less")

    @property
    def text(self) -> str:
        """Canonical rule text."""
        return format_rule(self.node)

    @property
    def encoding(self) -> dict[str, Any]:
        """Persisted encoding of the rule tree."""
        return serialize_rule(self.node)
