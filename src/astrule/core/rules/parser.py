"""Parser for rule expressions.

Grammar, in decreasing precedence NOT > AND > OR::

    expression := term ( "OR" term )*
    term       := factor ( "AND" factor )*
    factor     := "NOT" factor | primary
    primary    := "(" expression ")" | condition
    condition  := IDENTIFIER comparator literal

AND and OR fold to the left, so ``a OR b OR c`` parses as ``OR(OR(a, b), c)``.
Each chained condition adds a level to the tree, so a flat chain can hold at
most ``MAX_TREE_DEPTH`` conditions even without any parentheses.
"""

from typing import NoReturn

from .ast import (
    MAX_TREE_DEPTH,
    Comparator,
    Literal,
    Node,
    Operand,
    Operator,
    OperatorKind,
)
from .exceptions import RuleDepthError, RuleSyntaxError, SyntaxErrorKind
from .lexer import COMPARATOR_TOKENS, LITERAL_TOKENS, Lexer, Token, TokenType

# Parentheses and NOT chains recurse through the parser
MAX_NESTING_DEPTH = 64

# Tokens that can only follow an operand, so seeing one where an operand is
# required means the operand is missing
_OPERAND_TERMINATORS = frozenset({
    TokenType.EOF, TokenType.AND, TokenType.OR, TokenType.RPAREN,
})


class Parser:
    """Recursive descent parser for rule expressions."""

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current_token: Token = self.lexer.get_next_token()
        self.nesting = 0

    def error(
        self,
        message: str,
        kind: SyntaxErrorKind = SyntaxErrorKind.UNEXPECTED_TOKEN,
        position: int | None = None,
    ) -> NoReturn:
        """Raise a syntax error."""
        raise RuleSyntaxError(
            message,
            self.current_token.position if position is None else position,
            kind,
        )

    def consume(self, token_type: TokenType) -> None:
        """Consume the current token if it matches the expected type."""
        if self.current_token.type == token_type:
            self.current_token = self.lexer.get_next_token()
        else:
            self.error(f"Expected {token_type.name}, found {self.current_token.type.name}")

    def parse(self) -> Node:
        """Parse the entire expression."""
        node = self.expression()
        if self.current_token.type == TokenType.RPAREN:
            self.error("Unmatched ')'", SyntaxErrorKind.UNMATCHED_PAREN)
        if self.current_token.type != TokenType.EOF:
            self.error(f"Unexpected token after expression: {self._describe(self.current_token)}")
        return node

    def expression(self) -> Node:
        """Parse logical OR expressions."""
        node = self.term()

        while self.current_token.type == TokenType.OR:
            token = self.current_token
            self.consume(TokenType.OR)
            right = self.term()
            node = self._operator(OperatorKind.OR, (node, right), token)

        return node

    def term(self) -> Node:
        """Parse logical AND expressions."""
        node = self.factor()

        while self.current_token.type == TokenType.AND:
            token = self.current_token
            self.consume(TokenType.AND)
            right = self.factor()
            node = self._operator(OperatorKind.AND, (node, right), token)

        return node

    def factor(self) -> Node:
        """Parse logical NOT expressions."""
        if self.current_token.type == TokenType.NOT:
            token = self.current_token
            self._enter(token)
            self.consume(TokenType.NOT)
            node = self.factor()
            self.nesting -= 1
            return self._operator(OperatorKind.NOT, (node,), token)

        return self.primary()

    def primary(self) -> Node:
        """Parse a parenthesised expression or a single condition."""
        token = self.current_token

        if token.type == TokenType.LPAREN:
            self._enter(token)
            self.consume(TokenType.LPAREN)
            node = self.expression()
            if self.current_token.type == TokenType.EOF:
                self.error("Unclosed '('", SyntaxErrorKind.UNMATCHED_PAREN, token.position)
            if self.current_token.type != TokenType.RPAREN:
                self.error(f"Expected ')', found {self._describe(self.current_token)}")
            self.consume(TokenType.RPAREN)
            self.nesting -= 1
            return node

        if token.type == TokenType.IDENTIFIER:
            return self.condition()

        if token.type in _OPERAND_TERMINATORS:
            self.error(
                f"Expected a condition, found {self._describe(token)}",
                SyntaxErrorKind.MISSING_OPERAND,
            )

        self.error(f"Expected a condition, found {self._describe(token)}")

    def condition(self) -> Node:
        """Parse ``field comparator literal``."""
        field_token = self.current_token
        self.consume(TokenType.IDENTIFIER)

        comparator_token = self.current_token
        if comparator_token.type not in COMPARATOR_TOKENS:
            self.error(
                f"Expected a comparator after '{field_token.value}', "
                f"found {self._describe(comparator_token)}"
            )
        self.consume(comparator_token.type)

        literal_token = self.current_token
        if literal_token.type in _OPERAND_TERMINATORS:
            self.error(
                f"Expected a literal after '{comparator_token.value}', "
                f"found {self._describe(literal_token)}",
                SyntaxErrorKind.MISSING_OPERAND,
            )
        if literal_token.type not in LITERAL_TOKENS:
            self.error(
                f"Expected a literal, found {self._describe(literal_token)}",
                SyntaxErrorKind.INVALID_LITERAL,
            )
        self.consume(literal_token.type)

        return Operand(
            field=str(field_token.value),
            comparator=Comparator(comparator_token.value),
            literal=Literal.of(literal_token.value),
        )

    def _enter(self, token: Token) -> None:
        self.nesting += 1
        if self.nesting > MAX_NESTING_DEPTH:
            self.error(
                f"Rule nesting exceeds {MAX_NESTING_DEPTH} levels",
                SyntaxErrorKind.NESTING_TOO_DEEP,
                token.position,
            )

    def _operator(self, kind: OperatorKind, children: tuple[Node, ...], token: Token) -> Node:
        try:
            return Operator(kind, children)
        except RuleDepthError:
            self.error(
                f"Rule chains too many conditions; tree depth exceeds {MAX_TREE_DEPTH} levels",
                SyntaxErrorKind.TREE_TOO_DEEP,
                token.position,
            )

    @staticmethod
    def _describe(token: Token) -> str:
        if token.type == TokenType.EOF:
            return "end of input"
        if token.type in (TokenType.IDENTIFIER, TokenType.STRING):
            return f"{token.type.name.lower()} '{token.value}'"
        return f"'{token.value}'" if token.value is not None else token.type.name
