"""Domain services for astrule.

Services contain business logic that doesn't naturally fit within a single entity.
"""

from astrule.domain.services.rule_service import RuleService

__all__ = [
    "RuleService",
]
