"""Pytest configuration for all tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from astrule.core.config import Settings
from astrule.core.rules import Node, parse_rule
from astrule.infrastructure.persistence.database import DatabaseManager
from astrule.infrastructure.store import InMemoryRuleStore, SqlRuleStore


@pytest.fixture
def memory_store() -> InMemoryRuleStore:
    """Create an empty in-memory rule store."""
    return InMemoryRuleStore()


@pytest_asyncio.fixture
async def db_manager() -> AsyncGenerator[DatabaseManager, None]:
    """Create a database manager over a fresh in-memory SQLite database."""
    settings = Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        environment="testing",
    )
    db = DatabaseManager(settings)
    await db.create_tables()

    yield db

    await db.disconnect()


@pytest_asyncio.fixture
async def sql_store(db_manager: DatabaseManager) -> SqlRuleStore:
    """Create a SQL rule store backed by the in-memory database."""
    return SqlRuleStore(db_manager)


@pytest.fixture
def age_and_sales() -> Node:
    """Rule: age > 30 AND department == 'Sales'."""
    return parse_rule("age > 30 AND department == 'Sales'")


@pytest.fixture
def salary_or_experience() -> Node:
    """Rule: salary > 50000 OR experience > 5."""
    return parse_rule("salary > 50000 OR experience > 5")
