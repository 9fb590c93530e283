"""
Kaleidoscope Parser Package

Precedence-climbing parser producing one AST node per top-level statement.

Author: xwest
"""

from .ast_nodes import (
    ASTNodeType, ExprAST, NumberLiteral, VariableRef, BinaryOp, Call,
    Prototype, FunctionDef, format_ast
)
from .parser import Parser, parse_string
from .errors import ParseError, ParseWarning

__all__ = [
    # Core parser
    "Parser",
    "parse_string",

    # AST nodes
    "ASTNodeType", "ExprAST",
    "NumberLiteral", "VariableRef", "BinaryOp", "Call",
    "Prototype", "FunctionDef",
    "format_ast",

    # Error handling
    "ParseError", "ParseWarning",
]
