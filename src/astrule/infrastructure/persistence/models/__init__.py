"""SQLAlchemy models for astrule tables.

All models inherit from the Base class defined in database.py.
"""

from astrule.infrastructure.persistence.models.rule import RuleModel

__all__ = [
    "RuleModel",
]
