import contextlib
import io
import os
import re
import sys
import tempfile
import unittest

from treelox.lang.session import Session
from treelox.runtime.interpreter import Interpreter


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.sess = Session()

    def run_source(self, method, arg):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            status = method(arg)
        return status, stdout.getvalue(), re.sub(r"\x1b\[[0-9;]*m", "", stderr.getvalue())  # strip colours

    def test_statuses(self):
        cases = {
            "print 1;": Session.OK,
            "": Session.OK,
            "print 1": Session.STATIC_ERROR,
            "var x = @;": Session.STATIC_ERROR,
            "print 1 / 0;": Session.RUNTIME_ERROR,
        }
        for case, expected in cases.items():
            status, __, __ = self.run_source(self.sess.run, case)
            self.assertEqual(expected, status, case)

    def test_persistence(self):
        self.run_source(self.sess.run, "var greeting = \"hi\"; fun shout(s) { return s + \"!\"; }")
        status, stdout, __ = self.run_source(self.sess.run, "print shout(greeting);")
        self.assertEqual(Session.OK, status)
        self.assertEqual("hi!\n", stdout)

    def test_resolved_locals_persist(self):
        # a closure created in one run still finds its captured scope in the next
        self.run_source(self.sess.run, "fun make() { var n = 0; fun next() { n = n + 1; return n; } return next; }")
        self.run_source(self.sess.run, "var next = make(); next();")
        __, stdout, __ = self.run_source(self.sess.run, "print next();")
        self.assertEqual("2\n", stdout)

    def test_shared_interpreter(self):
        interpreter = Interpreter()
        first, second = Session(interpreter), Session(interpreter)
        self.run_source(first.run, "var shared = 1;")
        __, stdout, __ = self.run_source(second.run, "print shared;")
        self.assertEqual("1\n", stdout)

    def test_parse(self):
        with contextlib.redirect_stderr(io.StringIO()):
            statements, success = Session.parse("print 1; print 2;")
            self.assertEqual(2, len(statements))
            self.assertTrue(success)

            __, success = Session.parse("print $;")
            self.assertFalse(success)

    def test_run_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "script.lox")
            with open(path, "w") as file:
                file.write("var a = 2;\nprint a * 21;\n")

            status, stdout, __ = self.run_source(self.sess.run_file, path)
            self.assertEqual(Session.OK, status)
            self.assertEqual("42\n", stdout)

    def test_run_missing_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "missing.lox")
            status, __, stderr = self.run_source(self.sess.run_file, path)

        self.assertEqual(Session.STATIC_ERROR, status)
        self.assertIn(f"Error: '{path}' could not be opened", stderr)

    def test_run_undecodable_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "latin1.lox")
            with open(path, "wb") as file:
                file.write(b'print "\xff";')

            status, stdout, stderr = self.run_source(self.sess.run_file, path)

        self.assertEqual(Session.STATIC_ERROR, status)
        self.assertEqual("", stdout)
        self.assertIn(f"Error: '{path}' could not be opened", stderr)

    def test_too_deep_to_resolve(self):
        source = "print " + " + ".join(["1"] * 3000) + ";"

        limit = sys.getrecursionlimit()
        self.addCleanup(sys.setrecursionlimit, limit)
        sys.setrecursionlimit(1000)

        status, stdout, stderr = self.run_source(self.sess.run, source)
        self.assertEqual(Session.STATIC_ERROR, status)
        self.assertEqual("", stdout)
        self.assertIn("Error: Stack overflow.", stderr)

        sys.setrecursionlimit(limit)
        status, stdout, __ = self.run_source(self.sess.run, source)
        self.assertEqual(Session.OK, status)
        self.assertEqual("3000\n", stdout)

    def test_is_complete(self):
        cases = {
            "print 1;": True,
            'print "{";': True,
            "// {": True,
            "/* { */ var a;": True,
            'print "}"; {': False,
            "fun f() {": False,
            "fun f() {\n{ }": False,
            "fun f() {\n}": True,
            "}": True,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.is_complete(case), case)


if __name__ == '__main__':
    unittest.main()
