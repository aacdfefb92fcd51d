"""Base abstractions for rule stores."""

from abc import ABC, abstractmethod
from typing import Any

Encoding = dict[str, Any]


class StoreError(Exception):
    """Base class for rule store failures."""

    def __init__(self, message: str, rule_name: str | None = None):
        self.message = message
        self.rule_name = rule_name
        super().__init__(message)


class RuleNotFoundError(StoreError):
    """Raised when no rule is stored under the requested name."""

    def __init__(self, rule_name: str):
        super().__init__(f"Rule '{rule_name}' not found", rule_name)


class StoreConnectionError(StoreError):
    """Raised when the backing store cannot be reached or fails."""
    pass


class RuleStore(ABC):
    """Abstract base class for rule stores.

    A store persists rule encodings (as produced by ``serialize_rule``) by
    name. It knows nothing about rule trees; decoding is the caller's job.
    """

    @abstractmethod
    async def save(self, rule_name: str, encoding: Encoding) -> None:
        """Store an encoding, replacing any rule with the same name."""
        ...

    @abstractmethod
    async def load(self, rule_name: str) -> Encoding:
        """Fetch the encoding stored under a name.

        Raises:
            RuleNotFoundError: If no rule has that name.
        """
        ...

    @abstractmethod
    async def delete(self, rule_name: str) -> None:
        """Remove a stored rule.

        Raises:
            RuleNotFoundError: If no rule has that name.
        """
        ...

    @abstractmethod
    async def list_names(self) -> list[str]:
        """Return all stored rule names in alphabetical order."""
        ...
