"""
Kaleidoscope Compiler Package

A front-end for the Kaleidoscope toy language: source text is tokenized,
parsed one top-level statement at a time and lowered to LLVM IR, with
top-level expressions evaluated through a JIT.

Architecture:
    kaleidoscope/
    ├── lexer/           # Tokenization
    ├── parser/          # Precedence-climbing parser and AST
    ├── ir/              # AST to IR lowering
    ├── backend/         # IR backend capability (llvmlite)
    ├── jit/             # In-process evaluation
    ├── session.py       # Line-at-a-time driver interface
    └── cli.py           # Command line front-end

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__email__ = "dev@neuralscript.org"
__license__ = "MIT"

from .errors import KaleidoscopeError, JITError, Diagnostic, SourceLocation
from .lexer import Lexer, LexerError
from .parser import Parser, ParseError, ParseWarning
from .ir import IRGenerator, CodeGenError
from .backend import IRBackend, LLVMBackend
from .session import Session, SessionConfig, StatementResult

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "IRGenerator",
    "IRBackend",
    "LLVMBackend",
    "Session",
    "SessionConfig",
    "StatementResult",

    # Errors
    "KaleidoscopeError",
    "LexerError",
    "ParseError",
    "ParseWarning",
    "CodeGenError",
    "JITError",
    "Diagnostic",
    "SourceLocation",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
