"""Rule store backed by SQLAlchemy."""

import json

from sqlalchemy.exc import SQLAlchemyError

from astrule.core.logging import get_logger
from astrule.infrastructure.persistence.database import DatabaseManager
from astrule.infrastructure.persistence.repositories import RuleRepository
from astrule.infrastructure.store.base import (
    Encoding,
    RuleNotFoundError,
    RuleStore,
    StoreConnectionError,
    StoreError,
)

logger = get_logger(__name__)


class SqlRuleStore(RuleStore):
    """Stores rule encodings as canonical JSON text in the ``rules`` table."""

    def __init__(self, db: DatabaseManager) -> None:
        """Initialize the store.

        Args:
            db: Database manager owning the engine and sessions.
        """
        self.db = db

    async def save(self, rule_name: str, encoding: Encoding) -> None:
        ast = json.dumps(encoding, sort_keys=True, separators=(",", ":"), allow_nan=False)
        try:
            async with self.db.session() as session:
                await RuleRepository(session).upsert(rule_name, ast)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to save rule", rule_name=rule_name, error=str(e))
            raise StoreConnectionError(f"Failed to save rule '{rule_name}': {e}", rule_name) from e
        logger.debug("Rule saved", rule_name=rule_name)

    async def load(self, rule_name: str) -> Encoding:
        try:
            async with self.db.session() as session:
                rule = await RuleRepository(session).get_by_name(rule_name)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to load rule", rule_name=rule_name, error=str(e))
            raise StoreConnectionError(f"Failed to load rule '{rule_name}': {e}", rule_name) from e

        if rule is None:
            raise RuleNotFoundError(rule_name)

        try:
            return json.loads(rule.ast)
        except ValueError as e:
            raise StoreError(f"Rule '{rule_name}' is not stored as valid JSON", rule_name) from e

    async def delete(self, rule_name: str) -> None:
        try:
            async with self.db.session() as session:
                repository = RuleRepository(session)
                rule = await repository.get_by_name(rule_name)
                if rule is None:
                    raise RuleNotFoundError(rule_name)
                await repository.delete(rule)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to delete rule", rule_name=rule_name, error=str(e))
            raise StoreConnectionError(f"Failed to delete rule '{rule_name}': {e}", rule_name) from e
        logger.debug("Rule deleted", rule_name=rule_name)

    async def list_names(self) -> list[str]:
        try:
            async with self.db.session() as session:
                return list(await RuleRepository(session).list_names())
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to list rules", error=str(e))
            raise StoreConnectionError(f"Failed to list rules: {e}") from e
