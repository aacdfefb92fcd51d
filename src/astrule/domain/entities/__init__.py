"""Domain entities for astrule.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from astrule.domain.entities.rule import Rule

__all__ = [
    "Rule",
]
