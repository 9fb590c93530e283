"""
Kaleidoscope IR Generation Package

Lowers AST nodes into LLVM IR through the backend capability.

Author: xwest
"""

from .ir_generator import IRGenerator, IRGenContext, ANON_FUNCTION_NAME, EXPRESSION_TOO_DEEP
from .errors import (
    CodeGenError, VariableNotFoundError, FunctionNotFoundError,
    InvalidArgumentsSizeError
)

__all__ = [
    "IRGenerator",
    "IRGenContext",
    "ANON_FUNCTION_NAME",
    "EXPRESSION_TOO_DEEP",
    "CodeGenError",
    "VariableNotFoundError",
    "FunctionNotFoundError",
    "InvalidArgumentsSizeError",
]
