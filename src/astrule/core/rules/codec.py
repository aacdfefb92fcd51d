"""Serialization of rule trees to and from their persisted encoding.

The encoding is a nested, self-describing mapping::

    {"kind": "operator", "op": "AND" | "OR" | "NOT",
     "left": <node>, "right": <node>}          # "right" omitted for NOT

    {"kind": "operand", "field": "age", "cmp": ">",
     "literal": {"t": "int", "v": 30}}

Decoding is strict: arity is checked against ``op``, unknown tags are
rejected, and nothing is silently coerced except an integral ``v`` under a
``float`` tag. ``dumps``/``loads`` give the canonical JSON text, which is
byte-stable for a given tree.
"""

import json
from typing import Any, Mapping

from .ast import (
    MAX_TREE_DEPTH,
    Comparator,
    Literal,
    LiteralType,
    Node,
    Operand,
    Operator,
    OperatorKind,
)
from .exceptions import (
    ArityMismatchError,
    MalformedEncodingError,
    UnknownTagError,
)

KIND_OPERATOR = "operator"
KIND_OPERAND = "operand"

_OPERATOR_KEYS = frozenset({"kind", "op", "left", "right"})
_OPERAND_KEYS = frozenset({"kind", "field", "cmp", "literal"})
_LITERAL_KEYS = frozenset({"t", "v"})


def serialize(node: Node) -> dict[str, Any]:
    """Convert a rule tree into its encoding."""
    if isinstance(node, Operand):
        return {
            "kind": KIND_OPERAND,
            "field": node.field,
            "cmp": node.comparator.value,
            "literal": {"t": node.literal.type.value, "v": node.literal.value},
        }

    if isinstance(node, Operator):
        encoded: dict[str, Any] = {
            "kind": KIND_OPERATOR,
            "op": node.kind.value,
            "left": serialize(node.left),
        }
        if node.right is not None:
            encoded["right"] = serialize(node.right)
        return encoded

    raise TypeError(f"Cannot serialize {type(node).__name__}")


def deserialize(data: Any) -> Node:
    """Rebuild a rule tree from its encoding.

    Raises:
        ArityMismatchError: An operator is missing a child, or NOT has two.
        UnknownTagError: A kind, op, cmp or literal type tag is unknown.
        MalformedEncodingError: Any other structural problem.
    """
    return _decode_node(data, "$", 1)


def dumps(node: Node) -> str:
    """Serialize a rule tree to canonical JSON text."""
    return json.dumps(serialize(node), sort_keys=True, separators=(",", ":"), allow_nan=False)


def loads(text: str | bytes) -> Node:
    """Deserialize a rule tree from JSON text."""
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise MalformedEncodingError(f"Invalid JSON: {e}") from e
    return deserialize(data)


def _decode_node(data: Any, path: str, depth: int) -> Node:
    if depth > MAX_TREE_DEPTH:
        raise MalformedEncodingError(f"Rule tree deeper than {MAX_TREE_DEPTH} levels", path)
    if not isinstance(data, Mapping):
        raise MalformedEncodingError(f"Expected an object, got {type(data).__name__}", path)

    kind = _require_str(data, "kind", path)
    if kind == KIND_OPERATOR:
        return _decode_operator(data, path, depth)
    if kind == KIND_OPERAND:
        return _decode_operand(data, path)
    raise UnknownTagError(f"Unknown node kind '{kind}'", f"{path}.kind")


def _decode_operator(data: Mapping[str, Any], path: str, depth: int) -> Node:
    op_name = _require_str(data, "op", path)
    try:
        op = OperatorKind(op_name)
    except ValueError:
        raise UnknownTagError(f"Unknown operator '{op_name}'", f"{path}.op") from None

    _check_keys(data, _OPERATOR_KEYS, path)

    if data.get("left") is None:
        raise ArityMismatchError(f"{op.value} requires a 'left' child", path)
    if op.arity == 2 and data.get("right") is None:
        raise ArityMismatchError(f"{op.value} requires a 'right' child", path)
    if op.arity == 1 and "right" in data:
        raise ArityMismatchError(f"{op.value} takes a single child but has 'right'", path)

    children = [_decode_node(data["left"], f"{path}.left", depth + 1)]
    if op.arity == 2:
        children.append(_decode_node(data["right"], f"{path}.right", depth + 1))
    return Operator(op, tuple(children))


def _decode_operand(data: Mapping[str, Any], path: str) -> Node:
    for child_key in ("left", "right"):
        if child_key in data:
            raise MalformedEncodingError(f"Operand cannot have a '{child_key}' child", path)
    _check_keys(data, _OPERAND_KEYS, path)

    field = _require_str(data, "field", path)
    if not field:
        raise MalformedEncodingError("Operand field must not be empty", f"{path}.field")

    cmp = _require_str(data, "cmp", path)
    try:
        comparator = Comparator(cmp)
    except ValueError:
        raise UnknownTagError(f"Unknown comparator '{cmp}'", f"{path}.cmp") from None

    return Operand(field, comparator, _decode_literal(data.get("literal"), f"{path}.literal"))


def _decode_literal(data: Any, path: str) -> Literal:
    if not isinstance(data, Mapping):
        raise MalformedEncodingError("Operand requires a 'literal' object", path)
    _check_keys(data, _LITERAL_KEYS, path)

    type_name = _require_str(data, "t", path)
    try:
        literal_type = LiteralType(type_name)
    except ValueError:
        raise UnknownTagError(f"Unknown literal type '{type_name}'", f"{path}.t") from None

    if "v" not in data:
        raise MalformedEncodingError("Literal requires a 'v' value", path)
    value = data["v"]

    # JSON writers may drop the fraction of a whole float
    try:
        if literal_type is LiteralType.FLOAT and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        return Literal(literal_type, value)
    except (ValueError, OverflowError) as e:
        raise MalformedEncodingError(str(e), f"{path}.v") from None


def _require_str(data: Mapping[str, Any], key: str, path: str) -> str:
    if key not in data:
        raise MalformedEncodingError(f"Missing '{key}'", path)
    value = data[key]
    if not isinstance(value, str):
        raise MalformedEncodingError(f"'{key}' must be a string", f"{path}.{key}")
    return value


def _check_keys(data: Mapping[str, Any], allowed: frozenset[str], path: str) -> None:
    unexpected = sorted(str(key) for key in data.keys() - allowed)
    if unexpected:
        raise MalformedEncodingError(f"Unexpected keys: {', '.join(unexpected)}", path)


__all__ = [
    "serialize",
    "deserialize",
    "dumps",
    "loads",
]
