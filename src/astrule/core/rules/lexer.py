"""Lexer for rule expressions."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, NoReturn

from .exceptions import RuleSyntaxError, SyntaxErrorKind

class TokenType(Enum):
    """Types of tokens in rule expressions."""
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    BOOLEAN = auto()
    IDENTIFIER = auto()

    # Comparators
    EQ = auto()  # ==
    NEQ = auto() # !=
    LT = auto()  # <
    GT = auto()  # >
    LTE = auto() # <=
    GTE = auto() # >=

    # Logical Operators
    AND = auto()
    OR = auto()
    NOT = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()

    EOF = auto()

COMPARATOR_TOKENS = frozenset({
    TokenType.EQ, TokenType.NEQ,
    TokenType.LT, TokenType.GT,
    TokenType.LTE, TokenType.GTE,
})

LITERAL_TOKENS = frozenset({
    TokenType.INTEGER, TokenType.FLOAT, TokenType.STRING, TokenType.BOOLEAN,
})

# Keywords are case-insensitive
KEYWORDS = {
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
}

@dataclass
class Token:
    """A single token in the rule expression."""
    type: TokenType
    value: str | int | float | bool | None
    position: int

class Lexer:
    """Tokenizes rule strings."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.current_char = self.text[0] if self.text else None

    def error(
        self,
        message: str,
        kind: SyntaxErrorKind,
        position: int | None = None,
    ) -> NoReturn:
        """Raise a syntax error."""
        raise RuleSyntaxError(message, self.pos if position is None else position, kind)

    def advance(self) -> None:
        """Move one character forward."""
        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek(self) -> str | None:
        """Look at the next character without moving."""
        peek_pos = self.pos + 1
        return self.text[peek_pos] if peek_pos < len(self.text) else None

    def skip_whitespace(self) -> None:
        """Skip over whitespace characters."""
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def _digits(self) -> str:
        result = ""
        while self.current_char is not None and self.current_char.isdecimal():
            result += self.current_char
            self.advance()
        return result

    def _number(self) -> Token:
        """Parse integer or float, with optional sign, fraction and exponent."""
        start_pos = self.pos
        result = ""
        is_float = False

        if self.current_char == "-":
            result += "-"
            self.advance()

        result += self._digits()

        if self.current_char == ".":
            result += "."
            self.advance()
            if self.current_char is None or not self.current_char.isdecimal():
                self.error(f"Malformed number '{result}'", SyntaxErrorKind.INVALID_LITERAL)
            result += self._digits()
            is_float = True

        if self.current_char in ("e", "E"):
            result += "e"
            self.advance()
            if self.current_char in ("+", "-"):
                result += self.current_char
                self.advance()
            if self.current_char is None or not self.current_char.isdecimal():
                self.error(f"Malformed number '{result}'", SyntaxErrorKind.INVALID_LITERAL)
            result += self._digits()
            is_float = True

        # Reject things like 12abc or 1.2.3
        if self.current_char is not None and (
            self.current_char.isalnum() or self.current_char in "_."
        ):
            self.error(
                f"Malformed number '{result}{self.current_char}'",
                SyntaxErrorKind.INVALID_LITERAL,
            )

        if is_float:
            value = float(result)
            if value in (float("inf"), float("-inf")):
                self.error(
                    f"Number '{result}' is out of range",
                    SyntaxErrorKind.INVALID_LITERAL,
                    start_pos,
                )
            return Token(TokenType.FLOAT, value, start_pos)

        try:
            value = int(result)
        except ValueError:
            self.error(
                f"Number starting '{result[:20]}' is too long",
                SyntaxErrorKind.INVALID_LITERAL,
                start_pos,
            )
        return Token(TokenType.INTEGER, value, start_pos)

    def _string(self) -> Token:
        """Parse quoted string. A backslash escapes the character after it."""
        start_pos = self.pos
        quote_char = self.current_char
        self.advance() # Skip opening quote

        result = ""
        while self.current_char is not None and self.current_char != quote_char:
            if self.current_char == "\\":
                self.advance()
                if self.current_char is None:
                    break
            result += self.current_char
            self.advance()

        if self.current_char is None:
            self.error("Unterminated string literal", SyntaxErrorKind.INVALID_LITERAL, start_pos)

        self.advance() # Skip closing quote
        return Token(TokenType.STRING, result, start_pos)

    def _identifier(self) -> Token:
        """Parse identifier or keyword."""
        start_pos = self.pos
        result = ""
        # Field names may contain letters, digits, underscores and dots
        while self.current_char is not None and (
            self.current_char.isalnum() or self.current_char in "_."
        ):
            result += self.current_char
            self.advance()

        lowered = result.lower()
        if lowered == "true":
            return Token(TokenType.BOOLEAN, True, start_pos)
        if lowered == "false":
            return Token(TokenType.BOOLEAN, False, start_pos)
        if lowered in KEYWORDS:
            return Token(KEYWORDS[lowered], lowered.upper(), start_pos)

        return Token(TokenType.IDENTIFIER, result, start_pos)

    def get_next_token(self) -> Token: # noqa: C901
        """Get the next token from input."""
        while self.current_char is not None:

            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            if self.current_char.isdecimal():
                return self._number()

            if self.current_char == "-" and (self.peek() or "").isdecimal():
                return self._number()

            if self.current_char in ("'", '"'):
                return self._string()

            if self.current_char.isalpha() or self.current_char == "_":
                return self._identifier()

            start_pos = self.pos

            if self.current_char == "=":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.EQ, "==", start_pos)
                self.error("Unexpected character '='. Did you mean '=='?", SyntaxErrorKind.UNKNOWN_TOKEN)

            if self.current_char == "!":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.NEQ, "!=", start_pos)
                self.error("Unexpected character '!'. Did you mean '!='?", SyntaxErrorKind.UNKNOWN_TOKEN)

            if self.current_char == "<":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.LTE, "<=", start_pos)
                self.advance()
                return Token(TokenType.LT, "<", start_pos)

            if self.current_char == ">":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.GTE, ">=", start_pos)
                self.advance()
                return Token(TokenType.GT, ">", start_pos)

            if self.current_char == "(":
                self.advance()
                return Token(TokenType.LPAREN, "(", start_pos)

            if self.current_char == ")":
                self.advance()
                return Token(TokenType.RPAREN, ")", start_pos)

            self.error(f"Invalid character '{self.current_char}'", SyntaxErrorKind.UNKNOWN_TOKEN)

        return Token(TokenType.EOF, None, self.pos)

    def tokenize(self) -> Iterator[Token]:
        """Generator that yields all tokens."""
        while True:
            token = self.get_next_token()
            yield token
            if token.type == TokenType.EOF:
                break
