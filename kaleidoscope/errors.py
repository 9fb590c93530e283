"""
Kaleidoscope error hierarchy.

Every error raised by the lexer, parser, code generator or JIT derives from
KaleidoscopeError so a driver can catch them all at the statement boundary,
report them and keep reading input:

    KaleidoscopeError
    ├── LexerError
    │   ├── InvalidNumberError
    │   └── UnknownCharacterError
    ├── ParseError
    ├── CodeGenError
    │   ├── VariableNotFoundError
    │   ├── FunctionNotFoundError
    │   └── InvalidArgumentsSizeError
    └── JITError

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source text, used for error reporting.

    Lines and columns are 1-based; offset counts characters from the
    start of the input.
    """
    filename: str
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass
class Diagnostic:
    """A single reportable message (error, warning, info)."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning", "info"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        result = f"{self.severity.upper()}: {self.message}"
        if self.code:
            result += f" [{self.code}]"
        if self.location is not None:
            result += f"\n  --> {self.location}"
        if self.help_text:
            result += f"\n  help: {self.help_text}"
        if self.suggestions:
            result += "\n  suggestions:"
            for suggestion in self.suggestions:
                result += f"\n    - {suggestion}"
        return result


class KaleidoscopeError(Exception):
    """
    Base class for all Kaleidoscope errors.

    Carries a Diagnostic; str() renders it for display.
    """

    severity = "error"

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity=self.severity,
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class JITError(KaleidoscopeError):
    """Raised when compiled code cannot be loaded or executed."""

    def __init__(self, message: str, help_text: Optional[str] = None):
        super().__init__(message, code="J001", help_text=help_text)
