"""Infrastructure layer - External dependencies and implementations.

This layer contains the database adapter (SQLAlchemy) and the rule stores
built on it. It implements the store interface consumed by the domain layer.
"""

from astrule.infrastructure.persistence.database import Base, DatabaseManager

__all__ = [
    "Base",
    "DatabaseManager",
]
