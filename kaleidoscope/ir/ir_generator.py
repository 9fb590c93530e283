"""
IR Generator for Kaleidoscope.

Lowers one AST node at a time into backend IR. State that outlives a call
lives in the backend (the module and its functions); the local scope of
parameter bindings lives only for the generation of one function body.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..lexer.tokens import Operator
from ..parser.ast_nodes import (
    ExprAST, NumberLiteral, VariableRef, BinaryOp, Call, Prototype, FunctionDef
)
from ..backend.llvm_backend import IRBackend
from .errors import (
    CodeGenError, VariableNotFoundError, FunctionNotFoundError,
    InvalidArgumentsSizeError
)

logger = logging.getLogger(__name__)

# Name given to the function wrapping a top-level expression
ANON_FUNCTION_NAME = "__anon_expr"

EXPRESSION_TOO_DEEP = "Expression is nested too deeply to compile"


@dataclass
class IRGenContext:
    """Context for generating one function body."""
    current_function: Optional[Any] = None
    named_values: Dict[str, Any] = field(default_factory=dict)  # Parameter name -> backend value


class IRGenerator:
    """
    Generates backend IR from Kaleidoscope AST nodes.

    Per function definition the generator walks through
    declared/reused -> block created -> scope bound -> body generating,
    and ends either verified and returned or deleted and errored. A
    function whose body failed never keeps a partial body; it is removed,
    or reduced to a declaration while other bodies still call it.
    """

    def __init__(self, backend: IRBackend):
        """
        Initialize the IR generator.

        Args:
            backend: Backend that owns the module being generated into
        """
        self.backend = backend
        self.context = IRGenContext()

    def generate(self, node: ExprAST) -> Any:
        """
        Lower one AST node.

        Returns:
            The backend value: a function for Prototype and FunctionDef,
            an instruction or constant for expressions

        Raises:
            CodeGenError: If the node references unknown names, calls a
                function with the wrong number of arguments or is nested
                too deeply to lower
        """
        try:
            if isinstance(node, FunctionDef):
                return self._generate_function(node)
            elif isinstance(node, Prototype):
                return self._generate_prototype(node)
            return self._generate_expression(node)
        except RecursionError:
            raise CodeGenError(
                EXPRESSION_TOO_DEEP,
                help_text="Split the expression across helper functions."
            ) from None

    def generate_top_level(self, node: ExprAST) -> Any:
        """Lower a top-level statement, wrapping bare expressions in an anonymous function."""
        if not isinstance(node, (FunctionDef, Prototype)):
            node = FunctionDef(Prototype(ANON_FUNCTION_NAME, ()), node)
        return self.generate(node)

    def _generate_prototype(self, proto: Prototype) -> Any:
        function = self.backend.declare_function(proto.name, proto.args)
        arity = self.backend.arity(function)
        if arity != proto.arity:
            raise InvalidArgumentsSizeError(proto.name, proto.arity, arity)
        return function

    def _generate_function(self, func_def: FunctionDef) -> Any:
        """Generate IR for a function definition."""
        proto = func_def.proto

        # extern-then-def and def-then-redef both land on the existing function
        function = self._generate_prototype(proto)

        self.backend.begin_body(function)

        previous_context = self.context
        self.context = IRGenContext(
            current_function=function,
            named_values=dict(zip(proto.args, self.backend.function_args(function)))
        )
        try:
            body = self._generate_expression(func_def.body)
        except Exception:
            self._discard_function(function, proto.name)
            raise
        finally:
            self.context = previous_context

        self.backend.ret(body)
        self.backend.verify_function(function)
        logger.debug("Generated function %s", proto.name)
        return function

    def _discard_function(self, function: Any, name: str):
        """
        Remove a function whose body failed to generate.

        A function still called from other bodies is reduced to a bare
        declaration instead, so those calls stay valid.
        """
        callers = self.backend.callers(function)
        if ANON_FUNCTION_NAME in callers:
            # An already evaluated top-level expression keeps nothing alive
            self.backend.clear_body(self.backend.get_function(ANON_FUNCTION_NAME))
            callers.remove(ANON_FUNCTION_NAME)
        if callers:
            self.backend.clear_body(function)
            logger.warning(
                "Keeping %s as a declaration without body; still called by %s",
                name, ", ".join(callers)
            )
        else:
            self.backend.delete_function(function)
            logger.debug("Deleted partially generated function %s", name)

    def _generate_expression(self, expr: ExprAST) -> Any:
        """Generate IR for an expression."""
        if isinstance(expr, NumberLiteral):
            return self.backend.const_real(expr.value)
        elif isinstance(expr, VariableRef):
            return self._generate_variable(expr)
        elif isinstance(expr, BinaryOp):
            return self._generate_binary_op(expr)
        elif isinstance(expr, Call):
            return self._generate_call(expr)
        raise CodeGenError(f"Cannot generate {type(expr).__name__} inside an expression")

    def _generate_variable(self, var: VariableRef) -> Any:
        value = self.context.named_values.get(var.name)
        if value is None:
            raise VariableNotFoundError(var.name)
        return value

    def _generate_binary_op(self, binary_op: BinaryOp) -> Any:
        """
        Lower a chain of binary operators, leftmost operand first.

        Left-associative chains nest along the left operand, so that spine
        is walked with a loop; only right operands recurse.
        """
        spine = []
        node: ExprAST = binary_op
        while isinstance(node, BinaryOp):
            spine.append(node)
            node = node.lhs

        lhs = self._generate_expression(node)
        for op_node in reversed(spine):
            rhs = self._generate_expression(op_node.rhs)
            self._require_function(op_node)
            lhs = self._emit_binary(op_node.op, lhs, rhs)
        return lhs

    def _emit_binary(self, op: Operator, lhs: Any, rhs: Any) -> Any:
        if op == Operator.LESS_THAN:
            return self.backend.fcmp_lt_to_real(lhs, rhs)
        elif op == Operator.PLUS:
            return self.backend.fadd(lhs, rhs)
        elif op == Operator.MINUS:
            return self.backend.fsub(lhs, rhs)
        elif op == Operator.TIMES:
            return self.backend.fmul(lhs, rhs)
        raise CodeGenError(f"Unsupported binary operator: {op}")

    def _generate_call(self, call: Call) -> Any:
        function = self.backend.get_function(call.callee)
        if function is None:
            raise FunctionNotFoundError(call.callee)

        arity = self.backend.arity(function)
        if arity != len(call.args):
            raise InvalidArgumentsSizeError(call.callee, len(call.args), arity)
        self._require_function(call)

        args = [self._generate_expression(arg) for arg in call.args]
        return self.backend.call(function, args)

    def _require_function(self, expr: ExprAST):
        """Instructions can only be emitted inside a function body."""
        if self.context.current_function is None:
            raise CodeGenError(
                f"Cannot emit {type(expr).__name__} outside of a function",
                help_text="Use generate_top_level() for top-level expressions."
            )
