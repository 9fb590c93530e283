"""
Kaleidoscope Backend Package.

The IR backend capability and its llvmlite implementation.

Author: xwest
"""

from .llvm_backend import IRBackend, LLVMBackend, DOUBLE

__all__ = ['IRBackend', 'LLVMBackend', 'DOUBLE']
