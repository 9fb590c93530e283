"""
Abstract Syntax Tree node definitions for Kaleidoscope.

Nodes are immutable and compare structurally, so two parses of the same
text produce equal trees. Each node owns its children; trees are built
bottom-up by the parser and only read afterwards.

Author: xwest
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ..lexer.tokens import Operator


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""
    NUMBER_LITERAL = "NumberLiteral"
    VARIABLE_REF = "VariableRef"
    BINARY_OP = "BinaryOp"
    CALL = "Call"
    PROTOTYPE = "Prototype"
    FUNCTION_DEF = "FunctionDef"


class ExprAST:
    """Base class for all AST nodes."""

    node_type: ASTNodeType

    def children(self) -> Tuple["ExprAST", ...]:
        """Get all child nodes."""
        return ()


@dataclass(frozen=True)
class NumberLiteral(ExprAST):
    """Numeric literal like `1.0`."""
    value: float

    node_type = ASTNodeType.NUMBER_LITERAL


@dataclass(frozen=True)
class VariableRef(ExprAST):
    """Reference to a function parameter, like `x`."""
    name: str

    node_type = ASTNodeType.VARIABLE_REF


@dataclass(frozen=True)
class BinaryOp(ExprAST):
    op: Operator
    lhs: ExprAST
    rhs: ExprAST

    node_type = ASTNodeType.BINARY_OP

    def children(self) -> Tuple[ExprAST, ...]:
        return (self.lhs, self.rhs)


@dataclass(frozen=True)
class Call(ExprAST):
    """Function call; arity is checked at code generation, not here."""
    callee: str
    args: Tuple[ExprAST, ...] = ()

    node_type = ASTNodeType.CALL

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    def children(self) -> Tuple[ExprAST, ...]:
        return self.args


@dataclass(frozen=True)
class Prototype(ExprAST):
    """
    A function's name and ordered parameter names.

    On its own (from `extern`) it is a declaration without a body.
    Parameter names are not checked for uniqueness.
    """
    name: str
    args: Tuple[str, ...] = ()

    node_type = ASTNodeType.PROTOTYPE

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def arity(self) -> int:
        return len(self.args)


@dataclass(frozen=True)
class FunctionDef(ExprAST):
    proto: Prototype
    body: ExprAST

    node_type = ASTNodeType.FUNCTION_DEF

    @property
    def name(self) -> str:
        return self.proto.name

    def children(self) -> Tuple[ExprAST, ...]:
        return (self.proto, self.body)


def format_ast(node: ExprAST) -> str:
    """Render a tree in a compact, s-expression like form for diagnostics."""
    if isinstance(node, NumberLiteral):
        return repr(node.value)
    elif isinstance(node, VariableRef):
        return node.name
    elif isinstance(node, BinaryOp):
        return f"({node.op} {format_ast(node.lhs)} {format_ast(node.rhs)})"
    elif isinstance(node, Call):
        args = " ".join(format_ast(arg) for arg in node.args)
        return f"(call {node.callee}{' ' + args if args else ''})"
    elif isinstance(node, Prototype):
        return f"(proto {node.name} ({' '.join(node.args)}))"
    elif isinstance(node, FunctionDef):
        return f"(def {format_ast(node.proto)} {format_ast(node.body)})"
    raise TypeError(f"Not an AST node: {node!r}")
