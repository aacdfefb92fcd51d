"""Repository for accessing and managing stored rules."""

import uuid
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from astrule.infrastructure.persistence.models.rule import RuleModel


class RuleRepository:
    """Repository for rule database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def get_by_name(self, name: str) -> RuleModel | None:
        """Get a rule by name.

        Args:
            name: The rule name.

        Returns:
            The RuleModel or None if not found.
        """
        result = await self.session.execute(
            select(RuleModel).where(RuleModel.name == name)
        )
        return result.scalar_one_or_none()

    async def upsert(self, name: str, ast: str) -> RuleModel:
        """Insert a rule, or replace the encoding of an existing one.

        Args:
            name: The rule name.
            ast: Canonical JSON encoding of the rule.

        Returns:
            The stored RuleModel.
        """
        rule = await self.get_by_name(name)
        if rule is None:
            rule = RuleModel(id=str(uuid.uuid4()), name=name, ast=ast)
            self.session.add(rule)
        else:
            rule.ast = ast
        await self.session.flush()
        return rule

    async def list_names(self) -> Sequence[str]:
        """List all rule names in alphabetical order."""
        result = await self.session.execute(
            select(RuleModel.name).order_by(RuleModel.name)
        )
        return result.scalars().all()

    async def delete(self, rule: RuleModel) -> None:
        """Delete a rule.

        Args:
            rule: The rule model to delete.
        """
        await self.session.delete(rule)
        await self.session.flush()
