"""Uses the T-Script lexer/parser/interpreter to run .ts files or to run in command-line mode. Also uses the error
handling context manager. Called from the tscript executable script.
"""

import argparse
import os

from tscript.lang.error import ErrorHandler
from tscript.lang.session import Session
from tscript.lang.shell import Shell


def main(argv=None):
    """Runs the T-Script interpreter. Called from the tscript executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="tscript", description="T-Script interpreter")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--tokens", action="store_true", help="print the tokens of everything that is run")
        parser.add_argument("--ast", action="store_true", help="print the syntax tree of everything that is run")
        parser.add_argument("--no-color", action="store_true", help="do not color error messages")
        args = parser.parse_args(argv)

        if args.no_color:
            os.environ["NO_COLOR"] = "1"  # honored by termcolor

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, show_tokens=args.tokens, show_ast=args.ast)
            sess.run()

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, show_tokens=args.tokens,
                           show_ast=args.ast)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
