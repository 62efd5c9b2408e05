import unittest

from tscript.lang.error import ExecutionError
from tscript.runtime.environment import Environment
from tscript.syntax.token import Token, TokenType


def name(text):
    return Token(TokenType.IDENTIFIER, text, None, 1, len(text), len(text))


class EnvironmentTestCase(unittest.TestCase):

    def test_define_get(self):
        environment = Environment()
        environment.define("a", 1.0)
        self.assertEqual(1.0, environment.get(name("a")))

        environment.define("a", "redefined")  # same scope: silently replaced
        self.assertEqual("redefined", environment.get(name("a")))

    def test_undefined(self):
        environment = Environment(Environment())
        self.assertRaises(ExecutionError, environment.get, name("missing"))
        self.assertRaises(ExecutionError, environment.assign, name("missing"), 1.0)
        self.assertNotIn("missing", environment)  # assign never creates a binding

        with self.assertRaises(ExecutionError) as context:
            environment.get(name("missing"))
        self.assertIn("Undefined variable", context.exception.message)
        self.assertEqual("missing", context.exception.token.text)

    def test_chain(self):
        outer = Environment()
        outer.define("a", 1.0)
        inner = Environment(Environment(outer))

        self.assertEqual(1.0, inner.get(name("a")))
        self.assertIn("a", inner)

        inner.assign(name("a"), 2.0)
        self.assertEqual(2.0, outer.get(name("a")))
        self.assertNotIn("a", inner.values)

    def test_shadowing(self):
        outer = Environment()
        outer.define("a", "outer")
        inner = Environment(outer)
        inner.define("a", "inner")

        self.assertEqual("inner", inner.get(name("a")))
        self.assertEqual("outer", outer.get(name("a")))

        inner.assign(name("a"), "changed")
        self.assertEqual("changed", inner.get(name("a")))
        self.assertEqual("outer", outer.get(name("a")))

    def test_shared_parent(self):
        parent = Environment()
        parent.define("n", 0.0)
        first, second = Environment(parent), Environment(parent)

        first.assign(name("n"), 5.0)
        self.assertEqual(5.0, second.get(name("n")))


if __name__ == '__main__':
    unittest.main()
