"""Session control for T-Script. Runs source through the lexer, parser and interpreter, either in command-line mode
(one chunk of source per prompt) or file interpretation mode (the whole file as one chunk).
"""

import sys
from collections import Counter

from tscript.lang.error import GenericException, LexError
from tscript.runtime.interpreter import Interpreter
from tscript.syntax.lexer import lex
from tscript.syntax.parser import parse
from tscript.syntax.printer import AstPrinter
from tscript.syntax.token import TokenType


class Session:
    """Governs a T-Script session: a single interpreter whose global scope persists across everything added."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, show_tokens=False, show_ast=False, stdout=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                # used for error messages
        self.cmd_line = cmd_line        # whether or not in command-line mode
        self.show_tokens = show_tokens  # print tokens of everything added
        self.show_ast = show_ast        # print syntax tree of everything added
        self.stdout = stdout

        self.interpreter = Interpreter(error_handler, stdout)
        self.to_exec = []  # list of (source, line_num, statements) to execute

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.add(source, 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line from the command-line. Returns updated value of line and whether the line continues on
        the next one (unclosed braces or parentheses, or an unterminated string or comment). Brackets inside strings
        and comments do not count.
        """
        line = line.rstrip()
        try:
            tokens = lex(line)
        except LexError as error:
            return line, error.unterminated  # other lex errors are reported when the line is added

        counts = Counter(token.type for token in tokens)
        add_to_prev = (counts[TokenType.LEFT_BRACE] > counts[TokenType.RIGHT_BRACE]
                       or counts[TokenType.LEFT_PAREN] > counts[TokenType.RIGHT_PAREN])
        return line, add_to_prev

    def add(self, source, line_num):
        """Lexes and parses source, queueing its statements. Execution is delayed until run is called. line_num is the
        line source starts on, used for error messages.
        """
        self.error_handler.register_source(self.path, source, line_num)  # in case error is raised

        tokens = lex(source)
        if self.show_tokens:
            for token in tokens:
                print(token, file=self.stdout)

        statements = parse(tokens)
        if self.show_ast:
            printer = AstPrinter()
            for statement in statements:
                print(printer.print(statement), file=self.stdout)

        self.to_exec.append((source, line_num, statements))
        self.error_handler.remove_source(self.path)  # error was not raised

    def run(self):
        """Runs this session's queued statements. Runtime errors are reported by the interpreter, and end the program
        if not in command-line mode.
        """
        while self.to_exec:
            source, line_num, statements = self.to_exec.pop(0)
            self.error_handler.register_source(self.path, source, line_num)

            if not self.interpreter.interpret(statements) and self.error_handler.fatal:
                sys.exit(1)

            self.error_handler.remove_source(self.path)
