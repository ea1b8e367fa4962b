"""Handles interactive/command-line mode for the treelox interpreter. Uses cmd as backend."""

import cmd

from treelox.lang.error import ErrorHandler


class Shell(cmd.Cmd):
    """treelox interpreter shell."""
    intro = "treelox interpreter :: Python backend\nType 'help' for more information, 'exit' to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.error_handler = ErrorHandler(fatal=False)

        self._tmp_line = ""

    def parseline(self, line):
        """Only a bare word is a shell command, so source like 'help = 2;' or 'exit(1);' still reaches default."""
        command, arg, line = super().parseline(line)
        if arg or (self._tmp_line and command != "EOF"):  # inside an open block, only Ctrl-D is a command
            return None, None, line
        return command, arg, line

    def default(self, line):
        """Executes arbitrary treelox source. Lines are collected until every '{' has been closed."""
        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source = f"{self._tmp_line}\n{line}" if self._tmp_line else line

            if not self.sess.is_complete(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            self.sess.run(source)

    def do_help(self, arg):
        """Prints a short tour of the language instead of per-command docs."""
        print("Welcome to the treelox interpreter!\n\n"
              "treelox is a small dynamically-typed language with C-like syntax: numbers, strings, \n"
              "booleans and nil, 'var' declarations, blocks, if/else, while, for and break, and \n"
              "first-class functions with closures.\n\n"
              "Try it out by typing 'fun sq(x) { return x * x; }'. Next, try typing \n"
              "'print sq(4);'. This will print 16.")

    def emptyline(self):
        """An empty line runs nothing (cmd would repeat the last line)."""
        return ""

    def do_EOF(self, arg):
        """Ctrl-D: ends the line and leaves the shell."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
