"""
Code generation error handling for Kaleidoscope.

Errors raised while lowering an AST node into backend IR. None of them is
fatal to a session: the driver reports them and continues.

Author: xwest
"""

from typing import Optional

from ..errors import KaleidoscopeError


class CodeGenError(KaleidoscopeError):
    """
    Exception raised when an AST node cannot be lowered.
    """


class VariableNotFoundError(CodeGenError):
    """A name that is not a parameter of the function being generated."""

    def __init__(self, name: str):
        super().__init__(
            f"Unknown variable name: '{name}'",
            code="C001",
            help_text="Only parameters of the enclosing function are in scope."
        )
        self.name = name


class FunctionNotFoundError(CodeGenError):
    """A call to a function never declared or defined in this session."""

    def __init__(self, name: str):
        super().__init__(
            f"Unknown function referenced: '{name}'",
            code="C002",
            help_text="Declare it with 'extern' or define it with 'def' first."
        )
        self.name = name


class InvalidArgumentsSizeError(CodeGenError):
    """
    Argument count that does not match the function's declared arity.

    `given` is the number of arguments supplied; `expected` is the arity of
    the backend function when known.
    """

    def __init__(self, name: str, given: int, expected: Optional[int] = None):
        message = f"Incorrect number of arguments passed to '{name}': {given}"
        if expected is not None:
            message += f" (expected {expected})"
        super().__init__(message, code="C003")
        self.name = name
        self.given = given
        self.expected = expected


# Code generation error codes for categorization
CODEGEN_ERROR_CODES = {
    "C001": "Variable not found",
    "C002": "Function not found",
    "C003": "Invalid arguments size",
}
