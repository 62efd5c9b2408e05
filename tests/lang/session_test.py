import io
import os
import tempfile
import unittest

from tscript.lang.error import ErrorHandler, GenericException, LexError, ParseError
from tscript.lang.session import Session
from tscript.lang.shell import Shell


def setUpModule():
    os.environ["ANSI_COLORS_DISABLED"] = "1"  # plain diagnostics, whatever the terminal


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.handler = ErrorHandler(stream=self.err)

    def write_file(self, source):
        file = tempfile.NamedTemporaryFile("w", suffix=".ts", delete=False)
        with file:
            file.write(source)
        self.addCleanup(os.remove, file.name)
        return file.name

    def test_cmd_line(self):
        sess = Session(self.handler, Session.SH_FILE, cmd_line=True, stdout=self.out)
        self.assertFalse(self.handler.fatal)

        sess.add("var x = 2;", 1)
        sess.run()
        sess.add("print(x * 3);", 2)
        sess.run()
        self.assertEqual("6\n", self.out.getvalue())

    def test_add_is_lazy(self):
        sess = Session(self.handler, Session.SH_FILE, cmd_line=True, stdout=self.out)
        sess.add("print(1);", 1)
        sess.add("print(2);", 2)
        self.assertEqual("", self.out.getvalue())

        sess.run()
        self.assertEqual("1\n2\n", self.out.getvalue())
        self.assertEqual([], sess.to_exec)

    def test_add_raises(self):
        sess = Session(self.handler, Session.SH_FILE, cmd_line=True, stdout=self.out)
        self.assertRaises(LexError, sess.add, "\"unterminated", 1)
        self.assertRaises(ParseError, sess.add, "var;", 2)
        self.assertEqual([], sess.to_exec)

    def test_runtime_error_in_cmd_line(self):
        sess = Session(self.handler, Session.SH_FILE, cmd_line=True, stdout=self.out)
        sess.add("5 + true;", 7)
        sess.run()
        self.assertIn("<in>:7:3: error: Operands must be two numbers or two strings.", self.err.getvalue())

        sess.add("print(\"still alive\");", 8)
        sess.run()
        self.assertEqual("still alive\n", self.out.getvalue())

    def test_file(self):
        path = self.write_file("fun add(a, b) {\n  return a + b;\n}\nprint(add(1, 2));\n")
        sess = Session(self.handler, path, cmd_line=False, stdout=self.out)
        sess.run()
        self.assertEqual("3\n", self.out.getvalue())

    def test_file_runtime_error_is_fatal(self):
        path = self.write_file("print(1);\nprint(undefined);\nprint(2);\n")
        sess = Session(self.handler, path, cmd_line=False, stdout=self.out)

        self.assertRaises(SystemExit, sess.run)
        self.assertEqual("1\n", self.out.getvalue())
        self.assertIn(f"{path}:2:7: error: Undefined variable 'undefined'.", self.err.getvalue())

    def test_bad_paths(self):
        self.assertRaises(GenericException, Session, self.handler, "/nonexistent/dir/prog.ts", False)
        self.assertRaises(GenericException, Session, self.handler, Session.SH_FILE, False)

    def test_show(self):
        sess = Session(self.handler, Session.SH_FILE, cmd_line=True, show_tokens=True, show_ast=True,
                       stdout=self.out)
        sess.add("1 + 2;", 1)

        output = self.out.getvalue()
        self.assertIn("NUMBER '1' 1.0 1:1", output)
        self.assertIn("EOF", output)
        self.assertIn("(; (+ 1 2))", output)

    def test_preprocess_line(self):
        cases = {
            "fun f() {": ("fun f() {", True),
            "print(1,": ("print(1,", True),
            "}   ": ("}", False),
            "var x = 1;": ("var x = 1;", False),
            "print(\"{\");": ("print(\"{\");", False),
            "print(\")\"": ("print(\")\"", True),
            "x; // (": ("x; // (", False),
            "/* { */ f(": ("/* { */ f(", True),
            "print(\"open": ("print(\"open", True),
            "/* open": ("/* open", True),
            "@ {": ("@ {", False),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(case), case)


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.shell = Shell(Session(ErrorHandler(stream=self.err), Session.SH_FILE, cmd_line=True, stdout=self.out))

    def test_lines(self):
        self.shell.onecmd("var x = 1;")
        self.shell.onecmd("print(x++);")
        self.shell.onecmd("print(x);")
        self.assertEqual("1\n2\n", self.out.getvalue())

    def test_continuation(self):
        self.shell.onecmd("fun f() {")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.shell.onecmd("return 4;")
        self.shell.onecmd("}")
        self.assertEqual(Shell.prompt, self.shell.prompt)

        self.shell.onecmd("print(f());")
        self.assertEqual("4\n", self.out.getvalue())

    def test_errors_do_not_exit(self):
        self.shell.onecmd("1 +;")
        self.shell.onecmd("print(\"ok\");")
        self.assertIn("error: Expect expression.", self.err.getvalue())
        self.assertEqual("ok\n", self.out.getvalue())

    def test_surrogate_escape_is_reported(self):
        self.assertFalse(self.shell.onecmd("print(\"\\uD800\");"))
        self.shell.onecmd("print(\"ok\");")
        self.assertIn("error: invalid escape sequence", self.err.getvalue())
        self.assertEqual("ok\n", self.out.getvalue())

    def test_brackets_in_strings(self):
        self.shell.onecmd("print(\"{\");")
        self.assertEqual(Shell.prompt, self.shell.prompt)

        self.shell.onecmd("print(1); // (")
        self.assertEqual("{\n1\n", self.out.getvalue())

    def test_string_continuation(self):
        self.shell.onecmd("print(\"two")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.shell.onecmd("lines\");")
        self.assertEqual(Shell.prompt, self.shell.prompt)
        self.assertEqual("two\nlines\n", self.out.getvalue())

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))

    def test_command_words_as_source(self):
        should_run = ["var exit = 1;", "exit = 2;", "var help = exit + 1;", "print(help);"]
        for case in should_run:
            self.assertFalse(self.shell.onecmd(case), case)
        self.assertEqual("3\n", self.out.getvalue())

        self.shell.onecmd("print(")
        self.assertFalse(self.shell.onecmd("exit"))  # inside a continuation
        self.shell.onecmd(");")
        self.assertEqual("3\n2\n", self.out.getvalue())
        self.assertEqual("", self.err.getvalue())


if __name__ == '__main__':
    unittest.main()
