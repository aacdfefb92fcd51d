"""SQLAlchemy model for the rules table.

Each row holds one named rule in its canonical JSON encoding.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from astrule.infrastructure.persistence.database import Base


class RuleModel(Base):
    """SQLAlchemy model for the rules table.

    Attributes:
        id: Primary key (UUID string).
        name: Unique rule name used to save and load the rule.
        ast: Canonical JSON encoding of the rule tree.
        created_at: Timestamp when the rule was first saved.
        updated_at: Timestamp when the rule was last saved.
    """

    __tablename__ = "rules"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Rule ID (UUID)",
    )
    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique rule name",
    )
    ast: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Canonical JSON encoding of the rule tree",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Rule(id={self.id}, name='{self.name}')>"
