"""
Error handling for the Kaleidoscope parser.

ParseError is the single error kind for grammar violations; it carries a
static, human-readable message. ParseWarning covers statements that were
parsed but were not cleanly terminated.

Author: xwest
"""

from typing import Optional, List

from ..errors import KaleidoscopeError, Diagnostic, SourceLocation
from ..lexer.tokens import Token, TokenType


class ParseError(KaleidoscopeError):
    """
    Exception raised when the parser encounters a syntax error.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        token: Optional[Token] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(
            message,
            location,
            code="P001",
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token


class ParseWarning:
    """
    Represents a parser warning that doesn't stop compilation.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        tokens: Optional[List[Token]] = None,
        help_text: Optional[str] = None
    ):
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            code="P100",
            help_text=help_text
        )
        self.tokens = list(tokens or [])

    def __str__(self) -> str:
        return str(self.diagnostic)

    def __repr__(self) -> str:
        return f"ParseWarning({self.message!r})"


# Static diagnostics, one per grammar violation
EXPECTED_STATEMENT = "Expected a statement, found end of input"
EXPECTED_FUNCTION_NAME = "Expected function name in prototype"
EXPECTED_PROTO_OPEN = "Expected '(' in prototype"
EXPECTED_PROTO_CLOSE = "Expected ')' in prototype"
EXPECTED_ARG_SEPARATOR = "Expected ')' or ',' in argument list"
EXPECTED_CLOSE_PAREN = "Expected ')'"
EXPECTED_EXPRESSION = "Expected expression"
NESTED_TOO_DEEPLY = "Expression is nested too deeply"

MISSING_SEMICOLON = "Expected ';' at end of statement"
TRAILING_TOKENS = "Ignoring unconsumed tokens after statement"


_SUGGESTIONS = {
    TokenType.SEMICOLON: ["Add a semicolon ';' to end the statement"],
    TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
    TokenType.LEFT_PAREN: ["Add an opening parenthesis '(' after the function name"],
    TokenType.IDENTIFIER: ["Name the function, e.g. 'def foo(x) x;'"],
}


def suggest_missing_token(expected: TokenType) -> List[str]:
    """Suggest what token might be missing."""
    return list(_SUGGESTIONS.get(expected, []))


def create_missing_token_error(message: str, expected: TokenType, found: Optional[Token]) -> ParseError:
    """Create an error for a token the grammar requires but did not find."""
    location = found.location if found is not None else None
    return ParseError(
        message,
        location,
        token=found,
        help_text=f"found {found}" if found is not None else "found end of input",
        suggestions=suggest_missing_token(expected)
    )


def create_invalid_expression_error(found: Optional[Token]) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    location = found.location if found is not None else None
    return ParseError(
        EXPECTED_EXPRESSION,
        location,
        token=found,
        help_text=f"found {found}" if found is not None else "found end of input",
    )
