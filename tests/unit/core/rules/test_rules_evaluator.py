"""Unit tests for Rule Evaluator."""

import pytest

from astrule.core.rules import evaluate_rule, parse_rule
from astrule.core.rules.ast import and_, not_, operand, or_
from astrule.core.rules.evaluator import Evaluator
from astrule.core.rules.exceptions import (
    MissingFieldError,
    RuleEvaluationError,
    TypeMismatchError,
)


def test_evaluator_scenario_age_and_department():
    """Test a simple conjunction against matching and non-matching records."""
    rule = parse_rule("age > 30 AND department == 'Sales'")

    assert evaluate_rule(rule, {"age": 35, "department": "Sales"}) is True
    assert evaluate_rule(rule, {"age": 25, "department": "Sales"}) is False


def test_evaluator_grouping_and_not():
    """Test parentheses and NOT."""
    rule = parse_rule("(a>1 OR b>2) AND NOT c==3")

    assert evaluate_rule(rule, {"a": 0, "b": 5, "c": 1}) is True
    assert evaluate_rule(rule, {"a": 0, "b": 5, "c": 3}) is False
    assert evaluate_rule(rule, {"a": 0, "b": 0, "c": 1}) is False


def test_evaluator_comparisons():
    """Test comparison operators."""
    context = {"age": 25}

    assert evaluate_rule(parse_rule("age == 25"), context) is True
    assert evaluate_rule(parse_rule("age != 18"), context) is True
    assert evaluate_rule(parse_rule("age > 20"), context) is True
    assert evaluate_rule(parse_rule("age < 30"), context) is True
    assert evaluate_rule(parse_rule("age >= 25"), context) is True
    assert evaluate_rule(parse_rule("age <= 25"), context) is True
    assert evaluate_rule(parse_rule("age > 25"), context) is False
    assert evaluate_rule(parse_rule("age < 25"), context) is False


def test_evaluator_numeric_coercion():
    """Test integers and floats compare with each other."""
    assert evaluate_rule(parse_rule("salary > 49999.5"), {"salary": 50000}) is True
    assert evaluate_rule(parse_rule("score == 3"), {"score": 3.0}) is True
    assert evaluate_rule(parse_rule("score <= 2"), {"score": 2.5}) is False


def test_evaluator_string_and_bool_equality():
    """Test string and boolean equality is exact."""
    context = {"department": "Sales", "active": True}

    assert evaluate_rule(parse_rule("department == 'Sales'"), context) is True
    assert evaluate_rule(parse_rule("department == 'sales'"), context) is False
    assert evaluate_rule(parse_rule("department != 'HR'"), context) is True
    assert evaluate_rule(parse_rule("active == true"), context) is True
    assert evaluate_rule(parse_rule("active != true"), context) is False


def test_evaluator_missing_field():
    """Test a field absent from the context."""
    with pytest.raises(MissingFieldError) as exc_info:
        evaluate_rule(parse_rule("age > 30"), {"salary": 10})
    assert exc_info.value.field == "age"


@pytest.mark.parametrize(
    "expression, context",
    [
        ("department > 'A'", {"department": "Sales"}),
        ("active < true", {"active": True}),
        ("age == '30'", {"age": 30}),
        ("name == 1", {"name": "Bob"}),
        ("active == 1", {"active": True}),
        ("count > 1", {"count": True}),
        ("count > 1", {"count": None}),
        ("tags == 'a'", {"tags": ["a"]}),
    ],
)
def test_evaluator_type_mismatch(expression, context):
    """Test incompatible value and literal types."""
    with pytest.raises(TypeMismatchError):
        evaluate_rule(parse_rule(expression), context)


def test_evaluator_type_mismatch_details():
    """Test the error names the field and both types."""
    with pytest.raises(TypeMismatchError) as exc_info:
        evaluate_rule(parse_rule("department > 'A'"), {"department": "Sales"})

    error = exc_info.value
    assert error.field == "department"
    assert error.comparator == ">"
    assert error.literal_type == "string"
    assert error.value_type == "string"
    assert isinstance(error, RuleEvaluationError)


def test_evaluator_and_short_circuit_suppresses_errors():
    """Test AND does not evaluate its right side once the left is false."""
    rule = and_(operand("age", ">", 100), operand("missing", "==", 1))
    assert evaluate_rule(rule, {"age": 35}) is False

    rule = and_(operand("age", ">", 100), operand("age", "==", "x"))
    assert evaluate_rule(rule, {"age": 35}) is False


def test_evaluator_or_short_circuit_suppresses_errors():
    """Test OR does not evaluate its right side once the left is true."""
    rule = or_(operand("age", ">", 1), operand("missing", "==", 1))
    assert evaluate_rule(rule, {"age": 35}) is True


def test_evaluator_errors_propagate_when_not_short_circuited():
    """Test errors on the right surface when the left does not decide."""
    rule = and_(operand("age", ">", 1), operand("missing", "==", 1))
    with pytest.raises(MissingFieldError):
        evaluate_rule(rule, {"age": 35})

    rule = or_(operand("age", ">", 100), operand("missing", "==", 1))
    with pytest.raises(MissingFieldError):
        evaluate_rule(rule, {"age": 35})


def test_evaluator_left_errors_always_propagate():
    """Test errors on the left are never suppressed."""
    rule = or_(operand("missing", "==", 1), operand("age", ">", 1))
    with pytest.raises(MissingFieldError):
        evaluate_rule(rule, {"age": 35})


def test_evaluator_not_propagates_errors():
    """Test NOT passes its child's error through unchanged."""
    with pytest.raises(MissingFieldError):
        evaluate_rule(not_(operand("missing", "==", 1)), {})


def test_evaluator_returns_bool():
    """Test results are real booleans."""
    evaluator = Evaluator({"a": 1, "b": 2})
    assert evaluator.evaluate(parse_rule("a == 1 AND b == 2")) is True
    assert evaluator.evaluate(parse_rule("a == 2 OR b == 3")) is False


def test_evaluator_shared_tree_is_reusable():
    """Test one tree can be evaluated against many contexts."""
    rule = parse_rule("x > 0")
    results = [evaluate_rule(rule, {"x": value}) for value in (-1, 0, 1)]
    assert results == [False, False, True]
