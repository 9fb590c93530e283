"""
Kaleidoscope JIT Package

Evaluates top-level expressions in-process.
"""

from .jit_compiler import JITCompiler, EvaluationResult

__all__ = ['JITCompiler', 'EvaluationResult']
