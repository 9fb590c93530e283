"""
Test suite for the llvmlite backend.

Tests cover:
- Non-fatal verification
- Releasing names of deleted functions
- Caller lookup, call graphs and partial module dumps

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kaleidoscope.backend import LLVMBackend
from kaleidoscope.backend.llvm_backend import release_global_name, reachable_functions
from kaleidoscope.ir import IRGenerator
from kaleidoscope.parser import parse_string

TRIPLE = "x86_64-unknown-linux-gnu"


class TestLLVMBackend(unittest.TestCase):
    """Test cases for LLVMBackend."""

    def setUp(self):
        self.backend = LLVMBackend("test", TRIPLE)
        self.generator = IRGenerator(self.backend)

    def _gen(self, source):
        return self.generator.generate_top_level(parse_string(source))

    def test_verify_accepts_valid_function(self):
        function = self.backend.declare_function("ok", ["x"])
        self.backend.begin_body(function)
        self.backend.ret(self.backend.function_args(function)[0])
        self.assertTrue(self.backend.verify_function(function))

    def test_verify_reports_invalid_module(self):
        """A block without terminator is logged, not raised."""
        function = self.backend.declare_function("broken", ["x"])
        self.backend.begin_body(function)
        with self.assertLogs("kaleidoscope.backend.llvm_backend", level="WARNING") as logs:
            self.assertFalse(self.backend.verify_function(function))
        self.assertIn("broken", logs.output[0])

    def test_module_scope_tracks_used_names(self):
        """release_global_name relies on this layout of llvmlite.ir.NameScope."""
        used_names = getattr(self.backend.module.scope, "_useset", None)
        self.assertIsInstance(used_names, set)
        self.backend.declare_function("f", [])
        self.assertIn("f", used_names)

    def test_deleted_name_is_released(self):
        function = self.backend.declare_function("f", ["x"])
        self.backend.delete_function(function)
        self.assertIsNone(self.backend.get_function("f"))
        self.assertFalse(self.backend.module.scope.is_used("f"))
        self.assertIsNot(self.backend.declare_function("f", ["x"]), function)

    def test_release_without_name_set_fails(self):
        class Scope:
            pass

        class Module:
            scope = Scope()

        with self.assertRaises(RuntimeError):
            release_global_name(Module(), "f")

    def test_callers(self):
        g = self._gen("def g(x) x;")
        self._gen("def h(x) g(x) + g(1);")
        self._gen("def k(x) x;")
        self._gen("def r(x) r(x);")
        self.assertEqual(self.backend.callers(g), ["h"])
        self.assertEqual(self.backend.callers(self.backend.get_function("r")), [])

    def test_clear_body(self):
        function = self._gen("def g(x) x;")
        self.backend.clear_body(function)
        self.assertTrue(function.is_declaration)
        self.assertIn("declare double @\"g\"", self.backend.dump_module())

    def test_reachable_functions(self):
        self._gen("extern sin(x);")
        self._gen("def a(x) sin(x);")
        self._gen("def b(x) a(x) * b(x);")
        self._gen("def unrelated(x) x;")
        names = {f.name for f in reachable_functions(self.backend.get_function("b"))}
        self.assertEqual(names, {"a", "b", "sin"})

    def test_dump_module_keep_bodies(self):
        f = self._gen("def f(x) x;")
        self._gen("def g(x) x*2;")
        text = self.backend.dump_module(keep_bodies={"g"})
        self.assertIn("declare double @\"f\"", text)
        self.assertIn("define double @\"g\"", text)
        self.assertFalse(f.is_declaration)
        self.assertIn("define double @\"f\"", self.backend.dump_module())


if __name__ == "__main__":
    unittest.main(verbosity=2)
