"""
Kaleidoscope Lexer Package

Turns source characters into tokens: the two keywords, identifiers,
number literals, punctuation and the four binary operators.

Author: xwest
"""

from .tokens import Token, TokenType, Operator, PRECEDENCE
from .lexer import Lexer, tokenize_string
from .errors import LexerError, InvalidNumberError, UnknownCharacterError

__all__ = [
    "Lexer",
    "tokenize_string",
    "Token",
    "TokenType",
    "Operator",
    "PRECEDENCE",
    "LexerError",
    "InvalidNumberError",
    "UnknownCharacterError",
]
