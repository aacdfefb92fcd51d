"""In-process rule store."""

import copy

from astrule.infrastructure.store.base import Encoding, RuleNotFoundError, RuleStore


class InMemoryRuleStore(RuleStore):
    """Keeps rule encodings in a dictionary.

    Encodings are deep-copied on the way in and out, so callers can never
    alter what is stored by mutating a dict they passed or received.
    """

    def __init__(self) -> None:
        self._rules: dict[str, Encoding] = {}

    async def save(self, rule_name: str, encoding: Encoding) -> None:
        self._rules[rule_name] = copy.deepcopy(encoding)

    async def load(self, rule_name: str) -> Encoding:
        try:
            return copy.deepcopy(self._rules[rule_name])
        except KeyError:
            raise RuleNotFoundError(rule_name) from None

    async def delete(self, rule_name: str) -> None:
        if self._rules.pop(rule_name, None) is None:
            raise RuleNotFoundError(rule_name)

    async def list_names(self) -> list[str]:
        return sorted(self._rules)
