"""Error handling for treelox. Everything that can cut a statement short travels through one channel: the LoxResult
hierarchy. Real errors (scan, parse, runtime) report themselves to standard error as soon as they are constructed, so
an error value that is caught and dropped still leaves a diagnostic behind. Break and ReturnValue ride the same channel
but are never reported: the interpreter consumes them at loop and call boundaries.

If a Python exception that is not a LoxResult makes it all the way to ErrorHandler, it is assumed to be an internal
issue.
"""

import sys

from termcolor import colored


ERROR = "red"


def report(line, where, message):
    """Writes a single diagnostic line. where is either empty, " at end" or " at 'LEXEME'"."""
    prefix = "Error" if line is None else f"[line {line}] Error"
    print(colored(f"{prefix}{where}: ", ERROR, attrs=["bold"]) + message, file=sys.stderr)


class LoxResult(Exception):
    """Anything that unwinds the execution of a statement list."""


class LoxError(LoxResult):
    """Reportable error. If token is given, its line and lexeme locate the error; otherwise line is used as is."""

    def __init__(self, message, token=None, line=None):
        super().__init__(message)
        self.message = message
        self.token = token
        self.line = token.line if token is not None else line
        self.report()

    @property
    def where(self):
        if self.token is None:
            return ""
        if self.token.is_eof:
            return " at end"
        return f" at '{self.token.lexeme}'"

    def report(self):
        report(self.line, self.where, self.message)


class ScanError(LoxError):
    """Malformed source text, located by line only."""

    def __init__(self, message, line):
        super().__init__(message, line=line)


class ParseError(LoxError):
    """Malformed syntax at a specific token."""

    def __init__(self, token, message):
        super().__init__(message, token=token)


class LoxRuntimeError(LoxError):
    """Fatal to the current top-level run, never to the interpreter."""

    def __init__(self, token, message):
        super().__init__(message, token=token)


class Break(LoxResult):
    """Signal raised by 'break', consumed by the innermost running loop."""

    def __init__(self, keyword):
        super().__init__("break")
        self.keyword = keyword


class ReturnValue(LoxResult):
    """Signal raised by 'return', consumed by the function call that is running."""

    def __init__(self, keyword, value):
        super().__init__("return")
        self.keyword = keyword
        self.value = value


class ErrorHandler:
    """Context manager that keeps Python-level failures from escaping as tracebacks. LoxErrors have already been
    reported when they get here, so they are only swallowed (or turned into an exit when fatal).
    """
    EXIT_STATIC = 65   # scan or parse failure
    EXIT_RUNTIME = 70  # runtime failure
    EXIT_INTERNAL = 1

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.had_error = False

    def throw(self, message, internal=False, code=EXIT_INTERNAL):
        """Reports message and exits if fatal."""
        self.had_error = True

        error_msg = ""
        if internal:
            error_msg += colored("[internal] ", ERROR, attrs=["bold"])
        error_msg += colored("error: ", ERROR, attrs=["bold"]) + message
        print(error_msg, file=sys.stderr)

        if self.fatal:
            sys.exit(code)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw("keyboard interrupt")
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is not None and issubclass(exc_type, LoxError):
            self.had_error = True
            if self.fatal:
                code = ErrorHandler.EXIT_RUNTIME if exc_type is LoxRuntimeError else ErrorHandler.EXIT_STATIC
                sys.exit(code)
        elif exc_type is not None:
            self.throw(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True)

        return not do_exit
