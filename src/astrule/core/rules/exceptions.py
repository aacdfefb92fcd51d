"""Exceptions for rule parsing, evaluation, combination and decoding."""

from enum import Enum


class RuleError(Exception):
    """Base class for all rule-related errors."""
    pass


class SyntaxErrorKind(str, Enum):
    """Reason tags carried by RuleSyntaxError."""
    UNKNOWN_TOKEN = "unknown_token"
    UNMATCHED_PAREN = "unmatched_paren"
    MISSING_OPERAND = "missing_operand"
    INVALID_LITERAL = "invalid_literal"
    UNEXPECTED_TOKEN = "unexpected_token"
    NESTING_TOO_DEEP = "nesting_too_deep"
    TREE_TOO_DEEP = "tree_too_deep"


class RuleSyntaxError(RuleError):
    """Raised when rule syntax is invalid."""
    def __init__(
        self,
        message: str,
        position: int | None = None,
        kind: SyntaxErrorKind = SyntaxErrorKind.UNEXPECTED_TOKEN,
    ):
        self.message = message
        self.position = position
        self.kind = kind
        super().__init__(f"{message} at position {position}" if position is not None else message)


class RuleDepthError(RuleError):
    """Raised when an operator would exceed the maximum tree depth."""
    def __init__(self, depth: int, limit: int):
        self.depth = depth
        self.limit = limit
        super().__init__(f"Rule tree depth {depth} exceeds the limit of {limit}")


class RuleEvaluationError(RuleError):
    """Raised when rule evaluation fails."""
    pass


class MissingFieldError(RuleEvaluationError):
    """Raised when an operand references a field absent from the context."""
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Field '{field}' is missing from the context")


class TypeMismatchError(RuleEvaluationError):
    """Raised when a context value cannot be compared with an operand literal."""
    def __init__(self, field: str, comparator: str, literal_type: str, value_type: str):
        self.field = field
        self.comparator = comparator
        self.literal_type = literal_type
        self.value_type = value_type
        super().__init__(
            f"Cannot compare field '{field}' of type {value_type} "
            f"with a {literal_type} literal using '{comparator}'"
        )


class CombineErrorKind(str, Enum):
    """Reason tags carried by RuleCombineError."""
    EMPTY = "empty"
    TOO_DEEP = "too_deep"


class RuleCombineError(RuleError):
    """Raised when a sequence of rules cannot be combined."""
    def __init__(self, message: str, kind: CombineErrorKind):
        self.kind = kind
        super().__init__(message)


class RuleDecodeError(RuleError):
    """Raised when a persisted rule encoding cannot be decoded."""
    def __init__(self, message: str, path: str = "$"):
        self.message = message
        self.path = path
        super().__init__(f"{message} at {path}")


class ArityMismatchError(RuleDecodeError):
    """An operator entry has the wrong number of children."""
    pass


class UnknownTagError(RuleDecodeError):
    """A kind, op, cmp or literal tag is not recognised."""
    pass


class MalformedEncodingError(RuleDecodeError):
    """An entry is structurally invalid."""
    pass


class RuleValidationError(RuleError):
    """Raised when a rule does not fit an attribute catalog."""
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))
