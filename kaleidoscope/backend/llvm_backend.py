"""
LLVM Backend for Kaleidoscope.

Defines the backend capability the code generator drives (IRBackend) and
its llvmlite implementation. The generator never touches llvmlite directly:
it only asks the backend for constants, instructions, functions, blocks,
verification and deletion.

Author: xwest
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional, Sequence, Set

import llvmlite.binding as llvm
import llvmlite.ir as ll
from llvmlite.ir.instructions import CallInstr

logger = logging.getLogger(__name__)

# The one scalar type of the language
DOUBLE = ll.DoubleType()


class IRBackend(ABC):
    """
    Backend capability used by the code generator.

    Values and functions are opaque handles. The only things the generator
    relies on are identity comparison and arity introspection.
    """

    @abstractmethod
    def const_real(self, value: float) -> Any:
        """Materialize a floating-point constant."""

    @abstractmethod
    def fadd(self, lhs: Any, rhs: Any) -> Any:
        pass

    @abstractmethod
    def fsub(self, lhs: Any, rhs: Any) -> Any:
        pass

    @abstractmethod
    def fmul(self, lhs: Any, rhs: Any) -> Any:
        pass

    @abstractmethod
    def fcmp_lt_to_real(self, lhs: Any, rhs: Any) -> Any:
        """Ordered less-than, converted back to the scalar type (0.0/1.0)."""

    @abstractmethod
    def get_function(self, name: str) -> Optional[Any]:
        """Return the function called name, or None."""

    @abstractmethod
    def declare_function(self, name: str, param_names: Sequence[str]) -> Any:
        """Return the function called name, declaring it if it does not exist."""

    @abstractmethod
    def function_args(self, function: Any) -> List[Any]:
        """Formal parameters of a function, in order."""

    @abstractmethod
    def arity(self, function: Any) -> int:
        pass

    @abstractmethod
    def call(self, function: Any, args: Sequence[Any]) -> Any:
        pass

    @abstractmethod
    def begin_body(self, function: Any) -> Any:
        """Drop any existing body, append an entry block and position there."""

    @abstractmethod
    def ret(self, value: Any) -> Any:
        pass

    @abstractmethod
    def verify_function(self, function: Any) -> bool:
        """Check a completed function. Failures are reported, never raised."""

    @abstractmethod
    def delete_function(self, function: Any) -> None:
        """Remove a function from the module entirely."""

    @abstractmethod
    def clear_body(self, function: Any) -> None:
        """Drop the body of a function, leaving a declaration."""

    @abstractmethod
    def callers(self, function: Any) -> List[str]:
        """Names of the other functions whose bodies call function."""

    @abstractmethod
    def dump_value(self, value: Any) -> str:
        pass

    @abstractmethod
    def dump_module(self) -> str:
        pass


class LLVMBackend(IRBackend):
    """
    llvmlite implementation of IRBackend.

    Builds IR with llvmlite.ir and verifies it with llvmlite.binding.
    Function handles are llvmlite.ir.Function objects owned by one module.
    """

    def __init__(self, module_name: str = "kaleidoscope", target_triple: Optional[str] = None):
        """
        Initialize the LLVM backend.

        Args:
            module_name: Name of the LLVM module
            target_triple: Target triple (e.g., "x86_64-pc-linux-gnu"),
                defaults to the host process triple
        """
        self.module = ll.Module(name=module_name)
        self.module.triple = target_triple or llvm.get_process_triple()
        self.builder = ll.IRBuilder()

    # Values and instructions

    def const_real(self, value: float) -> ll.Constant:
        return ll.Constant(DOUBLE, float(value))

    def fadd(self, lhs, rhs):
        return self.builder.fadd(lhs, rhs, name="addtmp")

    def fsub(self, lhs, rhs):
        return self.builder.fsub(lhs, rhs, name="subtmp")

    def fmul(self, lhs, rhs):
        return self.builder.fmul(lhs, rhs, name="multmp")

    def fcmp_lt_to_real(self, lhs, rhs):
        cmp = self.builder.fcmp_ordered("<", lhs, rhs, name="cmptmp")
        return self.builder.uitofp(cmp, DOUBLE, name="booltmp")

    def call(self, function: ll.Function, args):
        return self.builder.call(function, list(args), name="calltmp")

    def ret(self, value):
        return self.builder.ret(value)

    # Functions

    def get_function(self, name: str) -> Optional[ll.Function]:
        value = self.module.globals.get(name)
        if isinstance(value, ll.Function):
            return value
        return None

    def declare_function(self, name: str, param_names: Sequence[str]) -> ll.Function:
        function = self.get_function(name)
        if function is not None:
            return function

        func_type = ll.FunctionType(DOUBLE, [DOUBLE] * len(param_names))
        function = ll.Function(self.module, func_type, name=name)
        for arg, param_name in zip(function.args, param_names):
            arg.name = param_name
        logger.debug("Declared function %s(%s)", name, ", ".join(param_names))
        return function

    def function_args(self, function: ll.Function) -> List[ll.Argument]:
        return list(function.args)

    def arity(self, function: ll.Function) -> int:
        return len(function.args)

    def begin_body(self, function: ll.Function) -> ll.Block:
        function.blocks.clear()
        block = function.append_basic_block(name="entry")
        self.builder.position_at_end(block)
        return block

    def verify_function(self, function: ll.Function) -> bool:
        try:
            llvm.parse_assembly(str(self.module)).verify()
        except RuntimeError as e:
            logger.warning("Verification of function %s failed: %s", function.name, e)
            return False
        return True

    def delete_function(self, function: ll.Function) -> None:
        name = function.name
        if self.module.globals.get(name) is not function:
            return
        del self.module.globals[name]
        release_global_name(self.module, name)
        logger.debug("Deleted function %s", name)

    def clear_body(self, function: ll.Function) -> None:
        function.blocks.clear()

    def callers(self, function: ll.Function) -> List[str]:
        names = []
        for other in self.module.functions:
            if other is function:
                continue
            if any(callee is function for callee in _callees(other)):
                names.append(other.name)
        return names

    # Dumps

    def dump_value(self, value) -> str:
        return str(value)

    def dump_module(self, keep_bodies: Optional[Set[str]] = None) -> str:
        """
        Textual IR of the module.

        Args:
            keep_bodies: If given, only functions named here are emitted
                with their bodies; every other function is emitted as a
                declaration. The module itself is left unchanged.
        """
        if keep_bodies is None:
            return str(self.module)

        stashed = []
        try:
            for function in self.module.functions:
                if function.name not in keep_bodies and function.blocks:
                    stashed.append((function, function.blocks))
                    function.blocks = []
            return str(self.module)
        finally:
            for function, blocks in stashed:
                function.blocks = blocks


def _callees(function: ll.Function) -> Iterator[ll.Function]:
    for block in function.blocks:
        for instruction in block.instructions:
            if isinstance(instruction, CallInstr):
                yield instruction.callee


def reachable_functions(function: ll.Function) -> List[ll.Function]:
    """function and every function reachable from it through calls, declarations included."""
    reached: List[ll.Function] = []
    seen: Set[str] = set()
    pending = [function]
    while pending:
        current = pending.pop()
        if current.name in seen:
            continue
        seen.add(current.name)
        reached.append(current)
        pending.extend(_callees(current))
    return reached


def release_global_name(module: ll.Module, name: str) -> None:
    """
    Make name available again for a new global in module.

    llvmlite.ir keeps used names in a private set of the module's NameScope
    and has no public way to free one.
    """
    used_names = getattr(module.scope, "_useset", None)
    if not isinstance(used_names, set):
        raise RuntimeError(
            "llvmlite.ir.NameScope no longer keeps its names in '_useset'; "
            f"cannot release global name '{name}'"
        )
    used_names.discard(name)
