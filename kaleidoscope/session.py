"""
Kaleidoscope compilation session.

Driver-facing entry point: feed one line of source at a time and get back
either the lowered value or a KaleidoscopeError. A session owns one backend
module, one generator and, optionally, one JIT; it is meant to be used
from a single thread.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .backend.llvm_backend import LLVMBackend
from .ir.ir_generator import IRGenerator
from .lexer.lexer import Lexer
from .parser.ast_nodes import ExprAST, FunctionDef, Prototype
from .parser.errors import ParseWarning
from .parser.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class SessionConfig:
    """Configuration for a compilation session."""
    module_name: str = "kaleidoscope"
    target_triple: Optional[str] = None  # Host process triple when None
    enable_jit: bool = True
    filename: str = "<stdin>"


@dataclass
class StatementResult:
    """Outcome of one successfully processed statement."""
    node: ExprAST
    value: Any                                   # Backend function handle
    ir: str
    warnings: List[ParseWarning] = field(default_factory=list)
    result: Optional[float] = None               # Evaluated value of a top-level expression

    @property
    def is_expression(self) -> bool:
        return not isinstance(self.node, (FunctionDef, Prototype))


class Session:
    """
    One interactive compilation session.

    Every call to feed() runs the lexer, parser and code generator on one
    line. Errors propagate as KaleidoscopeError subclasses; the session
    stays usable afterwards.
    """

    def __init__(self, config: Optional[SessionConfig] = None):
        self.config = config or SessionConfig()
        self.backend = LLVMBackend(self.config.module_name, self.config.target_triple)
        self.generator = IRGenerator(self.backend)
        self.jit = None
        if self.config.enable_jit:
            from .jit.jit_compiler import JITCompiler
            self.jit = JITCompiler(self.backend)
        self.line_number = 0

    def feed(self, line: str) -> Optional[StatementResult]:
        """
        Process one line of source.

        Returns:
            None for a line with no tokens (blank or comment only),
            otherwise the StatementResult

        Raises:
            LexerError, ParseError, CodeGenError, JITError
        """
        self.line_number += 1
        tokens = Lexer(line, self.config.filename, line=self.line_number).tokenize()
        if not tokens:
            return None

        parser = Parser(tokens)
        node = parser.parse()
        logger.debug("Parsed %s on line %d", type(node).__name__, self.line_number)

        value = self.generator.generate_top_level(node)
        result = StatementResult(
            node=node,
            value=value,
            ir=self.backend.dump_value(value),
            warnings=parser.warnings,
        )

        if result.is_expression and self.jit is not None:
            result.result = self.jit.evaluate(value.name).value
        return result

    def start_file(self, filename: str):
        """Report locations against filename, counting lines from 1 again."""
        self.config.filename = filename
        self.line_number = 0

    def dump_module(self) -> str:
        """Textual IR of everything generated so far."""
        return self.backend.dump_module()
