"""Persistence repositories for database operations."""

from astrule.infrastructure.persistence.repositories.rule_repository import (
    RuleRepository,
)

__all__ = [
    "RuleRepository",
]
