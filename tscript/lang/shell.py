"""Handles interactive/command-line mode for the T-Script interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """T-Script interpreter shell."""
    intro = "T-Script interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # shown while braces or parens are left open
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._start_line = 0  # line num the pending (continued) source started on
        self.line_num = 0

    def parseline(self, line):
        """Only a bare command word (e.g. 'exit') is a shell command. Anything longer, like 'exit = 2;', and any line
        inside a continuation is T-Script source.
        """
        command, arg, line = super().parseline(line)
        if self._tmp_line or arg:
            return None, None, line
        return command, arg, line

    def default(self, line):
        """Executes arbitrary T-Script source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._start_line = self.line_num

            line, add_to_prev = self.sess.preprocess_line(self._tmp_line + line)

            if add_to_prev:
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, self._start_line)
                self.sess.run()

    def do_help(self, arg):
        """Prints a short language intro instead of command docs."""
        print("Welcome to the T-Script interpreter!\n\n"
              "T-Script is a small dynamically typed language with C-like syntax: numbers, \n"
              "strings, booleans and null, variables, if/while/for, and first-class functions \n"
              "with closures.\n\n"
              "Try it out by typing 'var x = 2 + 3 * 4;'. Then type 'print(x);' to see 14. \n"
              "Functions are declared with 'fun add(a, b) { return a + b; }'. Unclosed braces \n"
              "continue on the next line.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        if self._tmp_line:  # blank line inside a continuation
            self._tmp_line += "\n"
            self.line_num += 1
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
