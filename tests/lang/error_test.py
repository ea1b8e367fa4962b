import contextlib
import io
import re
import unittest

from treelox.lang.error import (Break, ErrorHandler, LoxError, LoxResult, LoxRuntimeError, ParseError, ReturnValue,
                                ScanError)
from treelox.syntax.token import Token, TokenType


def captured(func, *args, **kwargs):
    """Returns (result, stderr output without colours) of calling func."""
    stderr = io.StringIO()
    with contextlib.redirect_stderr(stderr):
        result = func(*args, **kwargs)
    return result, re.sub(r"\x1b\[[0-9;]*m", "", stderr.getvalue())


class ErrorTestCase(unittest.TestCase):

    def test_report_format(self):
        plus = Token(TokenType.PLUS, "+", None, 4)
        cases = [
            (lambda: ScanError("Unexpected character.", 2), "[line 2] Error: Unexpected character.\n"),
            (lambda: ParseError(plus, "Expect expression."), "[line 4] Error at '+': Expect expression.\n"),
            (lambda: ParseError(Token.eof(7), "Expect ';'."), "[line 7] Error at end: Expect ';'.\n"),
            (lambda: LoxRuntimeError(plus, "Operands must be numbers."),
             "[line 4] Error at '+': Operands must be numbers.\n"),
            (lambda: LoxRuntimeError(None, "Stack overflow."), "Error: Stack overflow.\n"),
        ]
        for make, expected in cases:
            error, output = captured(make)
            self.assertEqual(expected, output)
            self.assertIsInstance(error, LoxError)

    def test_attributes(self):
        token = Token(TokenType.IDENTIFIER, "x", None, 3)
        error, __ = captured(LoxRuntimeError, token, "Undefined variable 'x'.")
        self.assertEqual(3, error.line)
        self.assertIs(token, error.token)
        self.assertEqual("Undefined variable 'x'.", error.message)
        self.assertEqual("Undefined variable 'x'.", str(error))

    def test_signals_silent(self):
        keyword = Token(TokenType.RETURN, "return", None, 1)
        signal, output = captured(ReturnValue, keyword, 5.0)
        self.assertEqual("", output)
        self.assertEqual(5.0, signal.value)
        self.assertIsInstance(signal, LoxResult)
        self.assertNotIsInstance(signal, LoxError)

        signal, output = captured(Break, Token(TokenType.BREAK, "break", None, 1))
        self.assertEqual("", output)
        self.assertNotIsInstance(signal, LoxError)


class ErrorHandlerTestCase(unittest.TestCase):

    def raise_in(self, handler, exception):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            with handler:
                raise exception
        return re.sub(r"\x1b\[[0-9;]*m", "", stderr.getvalue())

    def test_exit_codes(self):
        cases = [
            (lambda: ParseError(Token.eof(1), "Expect expression."), ErrorHandler.EXIT_STATIC),
            (lambda: ScanError("Unterminated string.", 1), ErrorHandler.EXIT_STATIC),
            (lambda: LoxRuntimeError(None, "Division by zero."), ErrorHandler.EXIT_RUNTIME),
        ]
        for make, code in cases:
            error, __ = captured(make)
            with self.assertRaises(SystemExit) as context:
                self.raise_in(ErrorHandler(), error)
            self.assertEqual(code, context.exception.code)

    def test_not_fatal(self):
        handler = ErrorHandler(fatal=False)
        error, __ = captured(LoxRuntimeError, None, "Division by zero.")

        output = self.raise_in(handler, error)
        self.assertTrue(handler.had_error)
        self.assertEqual("", output)  # already reported when constructed

    def test_internal_error(self):
        handler = ErrorHandler(fatal=False)
        output = self.raise_in(handler, ValueError("boom"))
        self.assertTrue(handler.had_error)
        self.assertIn("[internal] error: unknown error: 'ValueError: boom'", output)

        with self.assertRaises(SystemExit) as context:
            self.raise_in(ErrorHandler(), ValueError("boom"))
        self.assertEqual(ErrorHandler.EXIT_INTERNAL, context.exception.code)

    def test_keyboard_interrupt(self):
        output = self.raise_in(ErrorHandler(fatal=False), KeyboardInterrupt())
        self.assertIn("error: keyboard interrupt", output)

    def test_system_exit_propagates(self):
        with self.assertRaises(SystemExit) as context:
            self.raise_in(ErrorHandler(fatal=False), SystemExit(3))
        self.assertEqual(3, context.exception.code)

    def test_no_error(self):
        handler = ErrorHandler()
        with handler:
            pass
        self.assertFalse(handler.had_error)


if __name__ == '__main__':
    unittest.main()
