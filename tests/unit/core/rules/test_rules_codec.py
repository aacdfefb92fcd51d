"""Unit tests for rule serialization."""

import json

import pytest

from astrule.core.rules import (
    combine_rules,
    deserialize_rule,
    dumps_rule,
    evaluate_rule,
    loads_rule,
    parse_rule,
    serialize_rule,
)
from astrule.core.rules.ast import MAX_TREE_DEPTH, Literal, LiteralType, not_, operand
from astrule.core.rules.exceptions import (
    ArityMismatchError,
    MalformedEncodingError,
    RuleDecodeError,
    UnknownTagError,
)

AGE_OPERAND = {
    "kind": "operand",
    "field": "age",
    "cmp": ">",
    "literal": {"t": "int", "v": 30},
}


def test_serialize_operand():
    """Test the encoding of a single condition."""
    assert serialize_rule(parse_rule("age > 30")) == AGE_OPERAND


def test_serialize_operator():
    """Test the encoding of a binary operator."""
    encoded = serialize_rule(parse_rule("age > 30 AND department == 'Sales'"))

    assert encoded == {
        "kind": "operator",
        "op": "AND",
        "left": AGE_OPERAND,
        "right": {
            "kind": "operand",
            "field": "department",
            "cmp": "==",
            "literal": {"t": "string", "v": "Sales"},
        },
    }


def test_serialize_not_has_no_right():
    """Test NOT is encoded with a single child."""
    encoded = serialize_rule(parse_rule("NOT age > 30"))
    assert encoded == {"kind": "operator", "op": "NOT", "left": AGE_OPERAND}


def test_serialize_literal_tags():
    """Test each literal type gets its own tag."""
    tags = [
        serialize_rule(parse_rule(text))["literal"]
        for text in ("x == 1", "x == 1.0", "x == false", "x == '1'")
    ]
    assert tags == [
        {"t": "int", "v": 1},
        {"t": "float", "v": 1.0},
        {"t": "bool", "v": False},
        {"t": "string", "v": "1"},
    ]


def test_round_trip_combined_rule(age_and_sales, salary_or_experience):
    """Test a combined rule survives encoding and still evaluates the same."""
    combined = combine_rules([age_and_sales, salary_or_experience])
    context = {"age": 40, "salary": 55000, "department": "Sales", "experience": 6}

    restored = deserialize_rule(serialize_rule(combined))

    assert restored == combined
    assert evaluate_rule(restored, context) is evaluate_rule(combined, context) is True


def test_round_trip_through_json_text():
    """Test the JSON text form round-trips, including literal types."""
    rule = parse_rule("a == 1 OR b == 1.0 OR NOT (c == true AND d != 'x')")
    assert loads_rule(dumps_rule(rule)) == rule


def test_dumps_is_canonical():
    """Test equal trees give byte-identical text."""
    first = dumps_rule(parse_rule("a > 1 AND b == 'x'"))
    second = dumps_rule(parse_rule("(a > 1) and (b == \"x\")"))

    assert first == second
    assert " " not in first
    assert first.startswith('{"kind":"operator","left":')


def test_deserialize_accepts_whole_float():
    """Test an integral value under a float tag stays a float."""
    data = dict(AGE_OPERAND, literal={"t": "float", "v": 30})
    assert deserialize_rule(data).literal == Literal(LiteralType.FLOAT, 30.0)


def test_deserialize_does_not_share_input():
    """Test decoding does not keep references to the input mapping."""
    data = json.loads(json.dumps(AGE_OPERAND))
    node = deserialize_rule(data)
    data["field"] = "changed"
    assert node.field == "age"


class TestDecodeErrors:
    """Test that malformed encodings are rejected, not coerced."""

    def test_and_missing_right(self):
        """Test AND without a right child."""
        data = {"kind": "operator", "op": "AND", "left": AGE_OPERAND}
        with pytest.raises(ArityMismatchError) as exc_info:
            deserialize_rule(data)
        assert exc_info.value.path == "$"

    def test_or_missing_left(self):
        """Test OR without a left child."""
        data = {"kind": "operator", "op": "OR", "right": AGE_OPERAND}
        with pytest.raises(ArityMismatchError):
            deserialize_rule(data)

    def test_not_with_right(self):
        """Test NOT with two children."""
        data = {"kind": "operator", "op": "NOT", "left": AGE_OPERAND, "right": AGE_OPERAND}
        with pytest.raises(ArityMismatchError):
            deserialize_rule(data)

    def test_operand_with_left(self):
        """Test an operand carrying a child."""
        data = dict(AGE_OPERAND, left=AGE_OPERAND)
        with pytest.raises(MalformedEncodingError):
            deserialize_rule(data)

    def test_operand_with_right(self):
        """Test an operand carrying a right child."""
        data = dict(AGE_OPERAND, right=AGE_OPERAND)
        with pytest.raises(MalformedEncodingError):
            deserialize_rule(data)

    @pytest.mark.parametrize(
        "data, path",
        [
            (dict(AGE_OPERAND, kind="leaf"), "$.kind"),
            ({"kind": "operator", "op": "XOR", "left": AGE_OPERAND, "right": AGE_OPERAND}, "$.op"),
            (dict(AGE_OPERAND, cmp="=~"), "$.cmp"),
            (dict(AGE_OPERAND, literal={"t": "date", "v": "2024-01-01"}), "$.literal.t"),
        ],
    )
    def test_unknown_tags(self, data, path):
        """Test unknown kind, op, cmp and literal tags."""
        with pytest.raises(UnknownTagError) as exc_info:
            deserialize_rule(data)
        assert exc_info.value.path == path

    def test_nested_error_path(self):
        """Test errors deep in the tree report where they are."""
        data = {
            "kind": "operator",
            "op": "AND",
            "left": {"kind": "operator", "op": "NOT", "left": dict(AGE_OPERAND, cmp="~")},
            "right": AGE_OPERAND,
        }
        with pytest.raises(UnknownTagError) as exc_info:
            deserialize_rule(data)
        assert exc_info.value.path == "$.left.left.cmp"
        assert "$.left.left.cmp" in str(exc_info.value)

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            "operand",
            {},
            {"kind": 1},
            dict(AGE_OPERAND, field=""),
            dict(AGE_OPERAND, field=3),
            dict(AGE_OPERAND, extra=True),
            {k: v for k, v in AGE_OPERAND.items() if k != "literal"},
            dict(AGE_OPERAND, literal={"t": "int"}),
            dict(AGE_OPERAND, literal={"t": "int", "v": "30"}),
            dict(AGE_OPERAND, literal={"t": "int", "v": 30.5}),
            dict(AGE_OPERAND, literal={"t": "int", "v": True}),
            dict(AGE_OPERAND, literal={"t": "bool", "v": 1}),
            dict(AGE_OPERAND, literal={"t": "float", "v": 10 ** 400}),
            dict(AGE_OPERAND, literal={"t": "int", "v": 1, "x": 2}),
            {"kind": "operator", "op": "NOT", "left": "age > 30"},
        ],
    )
    def test_malformed(self, data):
        """Test structurally invalid encodings."""
        with pytest.raises(MalformedEncodingError):
            deserialize_rule(data)

    def test_too_deep(self):
        """Test encodings deeper than the tree limit are rejected."""
        data = AGE_OPERAND
        for _ in range(MAX_TREE_DEPTH):
            data = {"kind": "operator", "op": "NOT", "left": data}
        with pytest.raises(MalformedEncodingError):
            deserialize_rule(data)

    def test_at_depth_limit(self):
        """Test encodings at exactly the tree limit decode."""
        node = operand("age", ">", 30)
        for _ in range(MAX_TREE_DEPTH - 1):
            node = not_(node)
        assert deserialize_rule(serialize_rule(node)) == node

    def test_loads_invalid_json(self):
        """Test unparseable text."""
        with pytest.raises(MalformedEncodingError):
            loads_rule("{not json")

    def test_loads_rejects_nan(self):
        """Test non-finite float literals are rejected."""
        with pytest.raises(MalformedEncodingError):
            loads_rule('{"kind":"operand","field":"x","cmp":">","literal":{"t":"float","v":NaN}}')

    def test_all_decode_errors_share_base(self):
        """Test every decode error is a RuleDecodeError."""
        for error_type in (ArityMismatchError, UnknownTagError, MalformedEncodingError):
            assert issubclass(error_type, RuleDecodeError)
