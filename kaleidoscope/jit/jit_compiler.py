"""
Kaleidoscope JIT Compiler
=========================

Evaluates top-level expressions by compiling the current module with
LLVM's MCJIT and calling the anonymous function through ctypes.

Each evaluation adds a snapshot of the module to the engine and removes it
again afterwards, so later redefinitions are always picked up.
"""

import ctypes
import logging
import time
from dataclasses import dataclass

import llvmlite.binding as llvm

from ..backend.llvm_backend import LLVMBackend, reachable_functions
from ..errors import JITError
from ..ir.ir_generator import ANON_FUNCTION_NAME

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Result of evaluating one function"""
    function_name: str
    value: float
    compilation_time_ms: float = 0.0


class JITCompiler:
    """MCJIT-based evaluator for nullary functions of a backend's module"""

    def __init__(self, backend: LLVMBackend):
        self.backend = backend

        llvm.initialize_native_target()
        llvm.initialize_native_asmprinter()

        target = llvm.Target.from_triple(backend.module.triple)
        self.target_machine = target.create_target_machine()
        backing_module = llvm.parse_assembly("")
        self.engine = llvm.create_mcjit_compiler(backing_module, self.target_machine)

    def evaluate(self, function_name: str = ANON_FUNCTION_NAME) -> EvaluationResult:
        """
        Compile the module and call function_name, which must take no arguments.

        Raises:
            JITError: If the function is missing, takes arguments, calls an
                external function the process cannot resolve, or the module
                fails to compile
        """
        function = self.backend.get_function(function_name)
        if function is None or function.is_declaration:
            raise JITError(f"No function body to evaluate: '{function_name}'")
        if self.backend.arity(function) != 0:
            raise JITError(f"Cannot evaluate '{function_name}': it takes arguments")

        reachable = reachable_functions(function)
        unresolved = sorted(
            f.name for f in reachable
            if f.is_declaration and not llvm.address_of_symbol(f.name)
        )
        if unresolved:
            raise JITError(
                f"Unresolved external function(s): {', '.join(unresolved)}",
                help_text="Only functions defined with 'def' or present in the host process can be called."
            )

        start = time.perf_counter()
        try:
            # Bodies outside the call graph of function are left out of the snapshot
            snapshot = self.backend.dump_module(keep_bodies={f.name for f in reachable})
            module = llvm.parse_assembly(snapshot)
            module.verify()
        except RuntimeError as e:
            raise JITError(f"Module failed to compile: {e}") from e

        self.engine.add_module(module)
        try:
            self.engine.finalize_object()
            self.engine.run_static_constructors()
            compilation_time_ms = (time.perf_counter() - start) * 1000

            address = self.engine.get_function_address(function_name)
            if not address:
                raise JITError(f"Function '{function_name}' has no machine code")
            cfunc = ctypes.CFUNCTYPE(ctypes.c_double)(address)
            value = cfunc()
        finally:
            self.engine.remove_module(module)

        logger.debug("Evaluated %s = %r in %.2fms", function_name, value, compilation_time_ms)
        return EvaluationResult(function_name, value, compilation_time_ms)
