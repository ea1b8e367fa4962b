"""Tree-walking evaluator. Statements are executed and expressions evaluated by recursive visitor dispatch over the
syntax tree.

Runtime values are plain Python objects:

```
nil      -> None
boolean  -> bool
number   -> float
string   -> str
callable -> LoxCallable
```

Control flow that leaves a statement early (runtime errors, 'break', 'return') is raised as a LoxResult and caught
where it is consumed: Break by the innermost loop, ReturnValue by LoxFunction.call, runtime errors by interpret.
Whatever unwinds, every scope entered on the way is restored first.
"""

import math
import sys

from treelox.lang.error import Break, LoxRuntimeError, ReturnValue
from treelox.runtime.callable import NATIVES, LoxCallable, LoxFunction
from treelox.runtime.environment import Environment
from treelox.syntax.token import TokenType


def type_tag(value):
    """Name of value's runtime type. bool has to be checked before numbers."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, LoxCallable):
        return "function"
    raise TypeError(f"not a runtime value: {value!r}")


def is_truthy(value):
    return value is not None and value is not False


def stringify(value):
    """Text shown by print and by string concatenation."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        if float(value).is_integer():
            return str(int(value))
        return repr(float(value))
    return str(value)


class Interpreter:
    ARITHMETIC = {TokenType.MINUS, TokenType.STAR, TokenType.SLASH}
    RELATIONAL = {TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL}
    NUMERIC = ("number", "boolean")  # booleans take part in arithmetic as 0 and 1
    RECURSION_LIMIT = 100_000        # host frames; a treelox call takes about 15, so roughly 6000 nested calls

    def __init__(self):
        self.globals = Environment()
        self.environment = self.globals  # current scope, swapped by execute_block

        self.locals = {}       # expr node (by identity): scope distance, filled by the resolver
        self.loop_depth = 0    # number of loops running in the current function; 0 means break is illegal

        for native in NATIVES:
            self.globals.define(native.name, native)

        if sys.getrecursionlimit() < Interpreter.RECURSION_LIMIT:
            sys.setrecursionlimit(Interpreter.RECURSION_LIMIT)

    def interpret(self, statements):
        """Executes top-level statements in order. Stops at the first runtime error and returns True if there was one.
        The interpreter stays usable for later runs either way.
        """
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError:
            return True
        except ReturnValue as signal:
            LoxRuntimeError(signal.keyword, "Can't return from top-level code.")
            return True
        except RecursionError:
            LoxRuntimeError(None, "Stack overflow.")
            return True
        return False

    def resolve(self, expr, depth):
        """Called by the resolver for every local variable reference."""
        self.locals[expr] = depth

    def execute(self, stmt):
        stmt.accept(self)

    def evaluate(self, expr):
        return expr.accept(self)

    def execute_block(self, statements, environment):
        """Runs statements in environment, restoring the current one however the block is left."""
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous

    def execute_function_body(self, statements, environment):
        """Like execute_block, but loops of the caller are not visible to 'break' in the body."""
        loop_depth = self.loop_depth
        self.loop_depth = 0
        try:
            self.execute_block(statements, environment)
        finally:
            self.loop_depth = loop_depth

    def look_up_variable(self, name, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    # statements

    def visit_expression_stmt(self, stmt):
        self.evaluate(stmt.expression)

    def visit_print_stmt(self, stmt):
        print(stringify(self.evaluate(stmt.expression)))

    def visit_var_stmt(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    def visit_block_stmt(self, stmt):
        self.execute_block(stmt.statements, Environment(self.environment))

    def visit_if_stmt(self, stmt):
        if is_truthy(self.evaluate(stmt.condition)):
            self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            self.execute(stmt.else_branch)

    def visit_while_stmt(self, stmt):
        self.loop_depth += 1
        try:
            while is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.body)
        except Break:
            pass
        finally:
            self.loop_depth -= 1

    def visit_break_stmt(self, stmt):
        if self.loop_depth == 0:
            raise LoxRuntimeError(stmt.keyword, "Can't break outside of a loop.")
        raise Break(stmt.keyword)

    def visit_function_stmt(self, stmt):
        self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

    def visit_return_stmt(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        raise ReturnValue(stmt.keyword, value)

    # expressions

    def visit_literal_expr(self, expr):
        return expr.value

    def visit_grouping_expr(self, expr):
        return self.evaluate(expr.expression)

    def visit_variable_expr(self, expr):
        return self.look_up_variable(expr.name, expr)

    def visit_assign_expr(self, expr):
        value = self.evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    def visit_logical_expr(self, expr):
        left = self.evaluate(expr.left)

        if expr.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right)

    def visit_unary_expr(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.MINUS:
            return -self.check_number_operand(expr.operator, right)
        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        raise LoxRuntimeError(expr.operator, "Unknown unary operator.")

    def visit_binary_expr(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        if operator.type is TokenType.PLUS:
            return self.add(operator, left, right)

        if operator.type in Interpreter.ARITHMETIC:
            left, right = self.check_number_operands(operator, left, right)
            if operator.type is TokenType.MINUS:
                return left - right
            if operator.type is TokenType.STAR:
                return left * right
            if right == 0:
                raise LoxRuntimeError(operator, "Division by zero.")
            return left / right

        if type_tag(left) != type_tag(right):
            raise LoxRuntimeError(operator, "Operands must be of the same type.")

        if operator.type is TokenType.EQUAL_EQUAL:
            return Interpreter.is_equal(left, right)
        if operator.type is TokenType.BANG_EQUAL:
            return not Interpreter.is_equal(left, right)

        if operator.type in Interpreter.RELATIONAL:
            if isinstance(left, LoxCallable):
                raise LoxRuntimeError(operator, "Functions can't be ordered.")
            return Interpreter.compare(operator.type, left, right)

        raise LoxRuntimeError(operator, "Unknown binary operator.")

    def visit_call_expr(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions.")

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        return callee.call(self, arguments)

    # operators

    @staticmethod
    def add(operator, left, right):
        """'+' adds numbers, concatenates strings, and renders the number when exactly one side is a string."""
        left_tag, right_tag = type_tag(left), type_tag(right)

        if left_tag == right_tag == "string":
            return left + right
        if left_tag == "string" and right_tag == "number":
            return left + stringify(right)
        if left_tag == "number" and right_tag == "string":
            return stringify(left) + right
        if left_tag in Interpreter.NUMERIC and right_tag in Interpreter.NUMERIC:
            return float(left) + float(right)

        raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

    @staticmethod
    def check_number_operand(operator, operand):
        """Returns operand as a float. Booleans count as 0 and 1."""
        if type_tag(operand) in Interpreter.NUMERIC:
            return float(operand)
        raise LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def check_number_operands(operator, left, right):
        if type_tag(left) in Interpreter.NUMERIC and type_tag(right) in Interpreter.NUMERIC:
            return float(left), float(right)
        raise LoxRuntimeError(operator, "Operands must be numbers.")

    @staticmethod
    def is_equal(left, right):
        """Equality for two values of the same type. Functions are equal only to themselves."""
        if isinstance(left, LoxCallable):
            return left is right
        return left == right

    @staticmethod
    def compare(operator_type, left, right):
        """Orders two values of the same type: numbers and strings naturally, false before true, nil equal to nil."""
        if left is None:
            left = right = 0
        if operator_type is TokenType.GREATER:
            return left > right
        if operator_type is TokenType.GREATER_EQUAL:
            return left >= right
        if operator_type is TokenType.LESS:
            return left < right
        return left <= right
