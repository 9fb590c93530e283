"""
Error handling for the Kaleidoscope lexer.

Lexing stops at the first error: the consumer sees the error, never a
partial token list.

Author: xwest
"""

from ..errors import KaleidoscopeError, SourceLocation


class LexerError(KaleidoscopeError):
    """Base class for errors raised while tokenizing."""


class InvalidNumberError(LexerError):
    """Numeric text made of digits and dots that is not a valid float."""

    def __init__(self, lexeme: str, location: SourceLocation):
        super().__init__(
            f"Invalid numeric literal: '{lexeme}'",
            location,
            code="L003",
            help_text="A number is digits with at most one decimal point.",
        )
        self.lexeme = lexeme


class UnknownCharacterError(LexerError):
    """A character that cannot start any token."""

    def __init__(self, char: str, location: SourceLocation):
        if char.isprintable():
            help_text = f"The character '{char}' is not valid in Kaleidoscope source code."
        else:
            help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."
        super().__init__(
            f"Unknown character: '{char}'",
            location,
            code="L001",
            help_text=help_text,
        )
        self.char = char


# Error codes for categorization
ERROR_CODES = {
    "L001": "Unknown initial character",
    "L003": "Invalid numeric literal",
}
