"""Error handling for the T-Script language. Only GenericExceptions should be encountered while running a program: if
another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Error taxonomy:
    - LexError: unexpected character, unterminated string/comment, bad escape sequence
    - ParseError: unexpected token, too many params/args, invalid assignment/increment target
    - ExecutionError: undefined variable, operand type mismatch, bad call target, wrong arity
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a T-Script error/warning. The message is a
    format string whose '{}' slots are filled with (bolded) exprs. line/start/end locate the offending source snippet
    and are used for the caret diagnosis.
    """

    def __init__(self, msg, exprs=None, line=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.message = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets

        self.line = line
        self.start = max(start, 0)
        self.end = end if end > self.start else self.start + 1  # needed for error display
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.message)

    @property
    def column(self):
        """1-based column of the start of the offending snippet."""
        return self.start + 1

    def chain(self):
        """Every diagnostic carried by this error, in reporting order."""
        return [self]


class LexError(GenericException):
    """Raised by the lexer. column is the cursor column after the offending character was read. unterminated marks
    errors caused by input ending inside a string or comment, which more input could fix.
    """

    def __init__(self, msg, exprs=None, line=None, column=0, unterminated=False):
        super().__init__(msg, exprs, line=line, start=column - 1, end=column)
        self.unterminated = unterminated


class ParseError(GenericException):
    """Raised by the parser at token. errors holds every diagnostic collected during the parse (self included)."""

    def __init__(self, msg, token, exprs=None):
        super().__init__(msg, exprs, line=token.line, start=token.column - token.length, end=token.column)
        self.token = token
        self.errors = [self]

    def chain(self):
        return list(self.errors)


class ExecutionError(GenericException):
    """Raised by the interpreter at token. The only error kind caught by Interpreter.interpret."""

    def __init__(self, token, msg, exprs=None):
        super().__init__(msg, exprs, line=token.line, start=token.column - token.length, end=token.column)
        self.token = token


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report custom T-Script errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.traceback = {}  # path: (source, line_num of source's first line)
        self.reported = 0

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_source(self, path, source, line_num):
        """Registers source in traceback given path. Should be called prior to Session lex/parse/run."""
        self.traceback[path] = (source, line_num)

    def remove_source(self, path):
        """Removes source from traceback given path. Should be called after a successful Session add."""
        self.traceback[path] = (None, None)

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)

    def _locate(self, error):
        """Returns (path, absolute line number, offending line text) for error, using the registered source."""
        if not self.traceback:
            return None, None, None

        path, (source, line_num) = next(iter(self.traceback.items()))  # assumes dict is insertion-ordered
        if source is None or error.line is None:
            return path, None, None

        lines = source.split("\n")
        text = lines[error.line - 1] if 0 < error.line <= len(lines) else None
        return path, line_num + error.line - 1, text

    @staticmethod
    def diagnose(error, text, warning=False):
        """Returns offending part of text highlighted and bolded, with a caret line underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        start = min(error.start, len(text))
        end = max(min(error.end, len(text)), start)

        diagnosis = "  " + text[:start]
        diagnosis += colored(text[start:end], color, attrs=["bold"])
        diagnosis += text[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _header(self, error):
        path, line_num, text = self._locate(error)
        if path is None:
            return "", None
        if line_num is None:
            return colored(f"{path}: ", attrs=["bold"]), None
        return colored(f"{path}:{line_num}:{error.column}: ", attrs=["bold"]), text

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)
        header, text = self._header(error)

        self._print(header + colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg)
        if not error.internal and text and error.diagnosis:
            self._print(ErrorHandler.diagnose(error, text, warning=True))

    def report(self, error):
        """Prints every diagnostic of error without deciding whether to exit."""
        for diagnostic in error.chain():
            header, text = self._header(diagnostic)
            error_msg = header

            if diagnostic.internal:
                error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

            error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + diagnostic.msg
            self._print(error_msg)

            if not diagnostic.internal and text and diagnostic.diagnosis:
                self._print(ErrorHandler.diagnose(diagnostic, text))

            self.reported += 1

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (source, line_num) representing origination of error.
        """
        self.report(error)

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.traceback[path] = (None, None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False

        if issubclass(exc_type, KeyboardInterrupt):
            self.throw(GenericException("keyboard interrupt"))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(GenericException("maximum recursion depth exceeded", diagnosis=False))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
