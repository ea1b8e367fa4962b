"""Callable values: user-defined functions with their closures, and natives implemented in Python.

Callables compare equal only when they are the same object; two closures created from the same declaration are
different values.
"""

import time
from abc import ABC, abstractmethod

from treelox.lang.error import ReturnValue
from treelox.runtime.environment import Environment


class LoxCallable(ABC):
    """Anything that can appear to the left of a call's parentheses."""

    @abstractmethod
    def arity(self):
        """Number of arguments call expects. The interpreter checks it before calling."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Runs the callable and returns its value."""


class LoxFunction(LoxCallable):
    """A function declaration paired with the scope that was current when the declaration ran."""

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self):
        return self.declaration.name.lexeme

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        env = Environment(self.closure)  # lexical, not the caller's scope
        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.lexeme, arg)

        try:
            interpreter.execute_function_body(self.declaration.body, env)
        except ReturnValue as signal:
            return signal.value
        return None

    def __str__(self):
        return f"<fn {self.name}>"

    def __repr__(self):
        return f"LoxFunction({self.name!r}, arity={self.arity()})"


class NativeFunction(LoxCallable):
    """Wraps a Python callable taking the argument values positionally."""

    def __init__(self, name, arity, func):
        self.name = name
        self._arity = arity
        self.func = func

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.func(*arguments)

    def __str__(self):
        return f"<native fn {self.name}>"

    def __repr__(self):
        return f"NativeFunction({self.name!r}, arity={self._arity})"


def clock():
    """Milliseconds since the epoch, as a number."""
    return float(time.time_ns() // 1_000_000)


NATIVES = [NativeFunction("clock", 0, clock)]
