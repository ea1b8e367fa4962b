"""Runs treelox source files, or starts command-line mode when no file is given. Called from the treelox console
script. Exit codes: 65 if the file failed to scan or parse, 70 if it stopped at a runtime error.
"""

import argparse
import os
import sys

from treelox.lang.error import ErrorHandler
from treelox.lang.session import Session
from treelox.lang.shell import Shell


EXIT_CODES = {
    Session.OK: 0,
    Session.STATIC_ERROR: ErrorHandler.EXIT_STATIC,
    Session.RUNTIME_ERROR: ErrorHandler.EXIT_RUNTIME,
}


def main(argv=None):
    """Runs treelox interpreter. Called from treelox executable script."""
    with ErrorHandler():
        parser = argparse.ArgumentParser(prog="treelox")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--no-color", action="store_true", help="disable coloured diagnostics")
        args = parser.parse_args(argv)

        if args.no_color:
            os.environ["NO_COLOR"] = "1"  # read by termcolor on every call

        if args.file is not None:
            status = Session().run_file(args.file)
            sys.exit(EXIT_CODES[status])

        Shell(Session()).cmdloop()


if __name__ == "__main__":
    main()
