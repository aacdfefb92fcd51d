"""Rule Expression API."""

from typing import Any, Mapping, Sequence

from . import codec
from .ast import (
    Comparator,
    Literal,
    LiteralType,
    Node,
    Operand,
    Operator,
    OperatorKind,
)
from .combiner import combine
from .evaluator import Evaluator
from .exceptions import (
    ArityMismatchError,
    CombineErrorKind,
    MalformedEncodingError,
    MissingFieldError,
    RuleCombineError,
    RuleDecodeError,
    RuleDepthError,
    RuleError,
    RuleEvaluationError,
    RuleSyntaxError,
    RuleValidationError,
    SyntaxErrorKind,
    TypeMismatchError,
    UnknownTagError,
)
from .formatter import format_rule
from .lexer import Lexer
from .parser import Parser
from .rule_validator import validate_rule

def parse_rule(expression: str) -> Node:
    """Parse a rule expression string into an AST."""
    lexer = Lexer(expression)
    parser = Parser(lexer)
    return parser.parse()

def evaluate_rule(node: Node, context: Mapping[str, Any]) -> bool:
    """Evaluate a parsed rule AST against a context."""
    evaluator = Evaluator(context)
    return evaluator.evaluate(node)

def combine_rules(rules: Sequence[Node], operator: OperatorKind = OperatorKind.AND) -> Node:
    """Combine rule ASTs into one, folding left with AND (or OR)."""
    return combine(rules, operator)

def serialize_rule(node: Node) -> dict[str, Any]:
    """Convert a rule AST into its persisted encoding."""
    return codec.serialize(node)

def deserialize_rule(data: Any) -> Node:
    """Rebuild a rule AST from its persisted encoding."""
    return codec.deserialize(data)

def dumps_rule(node: Node) -> str:
    """Serialize a rule AST to canonical JSON text."""
    return codec.dumps(node)

def loads_rule(text: str | bytes) -> Node:
    """Deserialize a rule AST from JSON text."""
    return codec.loads(text)

__all__ = [
    "parse_rule",
    "evaluate_rule",
    "combine_rules",
    "serialize_rule",
    "deserialize_rule",
    "dumps_rule",
    "loads_rule",
    "format_rule",
    "validate_rule",
    "Node",
    "Operand",
    "Operator",
    "OperatorKind",
    "Comparator",
    "Literal",
    "LiteralType",
    "RuleError",
    "RuleSyntaxError",
    "SyntaxErrorKind",
    "RuleEvaluationError",
    "MissingFieldError",
    "TypeMismatchError",
    "RuleCombineError",
    "CombineErrorKind",
    "RuleDecodeError",
    "ArityMismatchError",
    "UnknownTagError",
    "MalformedEncodingError",
    "RuleDepthError",
    "RuleValidationError",
]
