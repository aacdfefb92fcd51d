"""Rule store adapters."""

from astrule.infrastructure.store.base import (
    Encoding,
    RuleNotFoundError,
    RuleStore,
    StoreConnectionError,
    StoreError,
)
from astrule.infrastructure.store.memory_store import InMemoryRuleStore
from astrule.infrastructure.store.sql_store import SqlRuleStore

__all__ = [
    "Encoding",
    "RuleStore",
    "StoreError",
    "RuleNotFoundError",
    "StoreConnectionError",
    "InMemoryRuleStore",
    "SqlRuleStore",
]
