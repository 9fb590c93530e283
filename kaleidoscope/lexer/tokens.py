"""
Token definitions for the Kaleidoscope lexer.

This module defines the shared vocabulary of the lexer and parser:
- Token types (keywords, identifiers, numbers, punctuation, operators)
- The closed set of binary operators and their precedence table
- Lookup tables used by the lexer for single-character tokens

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

from ..errors import SourceLocation


class TokenType(Enum):
    """
    Enumeration of all token types in Kaleidoscope.
    """

    # Special
    EOF = auto()                    # End of input

    # Keywords
    DEF = auto()                    # def
    EXTERN = auto()                 # extern

    # Primary
    IDENTIFIER = auto()             # foo, x1
    NUMBER = auto()                 # 3.14, 42, .5

    # Punctuation
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    COMMA = auto()                  # ,
    SEMICOLON = auto()              # ;

    # Binary operator, value holds the Operator
    OPERATOR = auto()


class Operator(Enum):
    """Binary operators. All of them are left-associative."""
    LESS_THAN = "<"
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"

    @property
    def precedence(self) -> int:
        return PRECEDENCE[self]

    def __str__(self) -> str:
        return self.value


# Binary operator precedence, higher binds tighter
PRECEDENCE = MappingProxyType({
    Operator.LESS_THAN: 10,
    Operator.PLUS: 20,
    Operator.MINUS: 20,
    Operator.TIMES: 40,
})


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    value holds the identifier name, the float of a number literal or the
    Operator of an operator token, and is None otherwise. The location is
    for diagnostics only and is ignored by equality.
    """
    type: TokenType
    value: Any = None
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.type.name}({self.value!s})"
        return self.type.name

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r})"
        return f"Token({self.type.name})"

    @property
    def lexeme(self) -> str:
        """Source text the token stands for."""
        if self.type in (TokenType.IDENTIFIER, TokenType.NUMBER):
            return str(self.value)
        if self.type == TokenType.OPERATOR:
            return self.value.value
        return TOKEN_LEXEMES.get(self.type, "")

    @property
    def is_operator(self) -> bool:
        return self.type == TokenType.OPERATOR

    @property
    def is_identifier(self) -> bool:
        return self.type == TokenType.IDENTIFIER


# Reserved words, matched exactly and case-sensitively
KEYWORDS = MappingProxyType({
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
})

PUNCTUATION = MappingProxyType({
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
})

OPERATORS = MappingProxyType({op.value: op for op in Operator})

TOKEN_LEXEMES = MappingProxyType({
    TokenType.DEF: "def",
    TokenType.EXTERN: "extern",
    **{token_type: text for text, token_type in PUNCTUATION.items()},
})
