"""astrule - textual business rules compiled to ASTs.

Rules such as ``age > 30 AND department == 'Sales'`` are parsed into an
immutable tree, evaluated against data records, combined with other rules
and stored in a portable JSON encoding.
"""

__version__ = "0.1.0"

from astrule.core.rules import (
    combine_rules,
    deserialize_rule,
    evaluate_rule,
    format_rule,
    parse_rule,
    serialize_rule,
)

__all__ = [
    "__version__",
    "parse_rule",
    "evaluate_rule",
    "combine_rules",
    "serialize_rule",
    "deserialize_rule",
    "format_rule",
]
