"""Runtime scopes. A scope maps names to values and links to the scope enclosing it. The link is fixed when the scope
is created; only the bindings change. Scopes are shared freely: a closure and the block that defined it may both keep
the same scope alive.
"""

from treelox.lang.error import LoxRuntimeError


class Environment:

    def __init__(self, enclosing=None):
        self.values = {}
        self._enclosing = enclosing

    @property
    def enclosing(self):
        return self._enclosing

    def define(self, name, value):
        """Binds name in this scope, replacing any previous binding."""
        self.values[name] = value

    def get(self, name):
        """Looks name (a token) up from this scope outward. Used only for unresolved, i.e. global, variables."""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        """Rebinds an existing variable, searching from this scope outward."""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance):
        """Returns the scope exactly distance links out."""
        env = self
        for __ in range(distance):
            env = env.enclosing
        return env

    def get_at(self, distance, name):
        """Reads name (a string) from the scope the resolver found it in. The binding is known to exist."""
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        """Writes name (a token) in the scope the resolver found it in."""
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self):
        return f"Environment(names={list(self.values)}, enclosing={self.enclosing is not None})"
