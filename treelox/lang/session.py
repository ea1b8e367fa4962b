"""Session control for treelox. A Session owns one interpreter and pushes source text through the whole pipeline:
scan, parse, resolve, interpret. Globals, functions and the resolver's table outlive each run, so command-line mode can
feed the same Session one line at a time.
"""

import contextlib
import io

from treelox.lang.error import LoxError
from treelox.runtime.interpreter import Interpreter
from treelox.runtime.resolver import Resolver
from treelox.syntax.parser import Parser
from treelox.syntax.scanner import Scanner
from treelox.syntax.token import TokenType


class Session:
    """Governs a treelox session, with control over the interpreter that persists between runs."""
    OK = "ok"
    STATIC_ERROR = "static error"    # scan/parse failure: nothing was executed
    RUNTIME_ERROR = "runtime error"  # execution stopped at a runtime error

    def __init__(self, interpreter=None):
        self.interpreter = interpreter if interpreter is not None else Interpreter()

    @staticmethod
    def parse(source):
        """Returns (statements, success) for source. Diagnostics have already been reported when this returns."""
        scanner = Scanner(source)
        tokens = scanner.scan_tokens()

        parser = Parser(tokens)
        statements = parser.parse()

        return statements, scanner.success() and parser.success()

    def run(self, source):
        """Runs source to completion or to its first runtime error. Returns OK, STATIC_ERROR or RUNTIME_ERROR."""
        try:
            statements, success = Session.parse(source)
            if not success:
                return Session.STATIC_ERROR

            Resolver(self.interpreter).resolve(statements)
        except RecursionError:
            LoxError("Stack overflow.")  # nested too deeply to parse or resolve
            return Session.STATIC_ERROR

        if self.interpreter.interpret(statements):
            return Session.RUNTIME_ERROR
        return Session.OK

    def run_file(self, path):
        """Runs the file at path. A file that can't be read as UTF-8 text is a static error."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                source = file.read()
        except (OSError, UnicodeDecodeError):
            LoxError(f"'{path}' could not be opened")
            return Session.STATIC_ERROR

        return self.run(source)

    @staticmethod
    def is_complete(source):
        """Whether source closes every brace it opens, not counting braces in strings or comments. Used for line
        continuations in command-line mode.
        """
        with contextlib.redirect_stderr(io.StringIO()):  # scan errors are reported when the source actually runs
            tokens = Scanner(source).scan_tokens()

        opened = sum(1 for token in tokens if token.type is TokenType.LEFT_BRACE)
        closed = sum(1 for token in tokens if token.type is TokenType.RIGHT_BRACE)
        return opened <= closed
