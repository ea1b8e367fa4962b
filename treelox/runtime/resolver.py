"""Static resolution of local variables. Walks the tree once before it runs, mirroring the scopes the interpreter will
create: one per block, one per function call (parameters and body share it), none at the top level. Every Variable and
Assign node whose name is declared in an enclosing local scope gets its distance recorded in the interpreter; anything
else is left for the interpreter to find among the globals.
"""


class Resolver:

    def __init__(self, interpreter):
        self.interpreter = interpreter
        self.scopes = []  # innermost last, each a set of declared names

    def resolve(self, statements):
        for stmt in statements:
            stmt.accept(self)

    def resolve_expr(self, expr):
        expr.accept(self)

    def begin_scope(self):
        self.scopes.append(set())

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        """Declares name (a token) in the innermost scope. No-op at the top level, where everything is global."""
        if self.scopes:
            self.scopes[-1].add(name.lexeme)

    def resolve_local(self, expr, name):
        for distance, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, distance)
                return

    def resolve_function(self, function):
        self.begin_scope()
        for param in function.params:
            self.declare(param)
        self.resolve(function.body)
        self.end_scope()

    # statements

    def visit_block_stmt(self, stmt):
        self.begin_scope()
        self.resolve(stmt.statements)
        self.end_scope()

    def visit_var_stmt(self, stmt):
        # the initializer runs before the name is bound, so it sees the enclosing binding
        if stmt.initializer is not None:
            self.resolve_expr(stmt.initializer)
        self.declare(stmt.name)

    def visit_function_stmt(self, stmt):
        self.declare(stmt.name)
        self.resolve_function(stmt)

    def visit_expression_stmt(self, stmt):
        self.resolve_expr(stmt.expression)

    def visit_print_stmt(self, stmt):
        self.resolve_expr(stmt.expression)

    def visit_if_stmt(self, stmt):
        self.resolve_expr(stmt.condition)
        stmt.then_branch.accept(self)
        if stmt.else_branch is not None:
            stmt.else_branch.accept(self)

    def visit_while_stmt(self, stmt):
        self.resolve_expr(stmt.condition)
        stmt.body.accept(self)

    def visit_break_stmt(self, stmt):
        pass

    def visit_return_stmt(self, stmt):
        if stmt.value is not None:
            self.resolve_expr(stmt.value)

    # expressions

    def visit_variable_expr(self, expr):
        self.resolve_local(expr, expr.name)

    def visit_assign_expr(self, expr):
        self.resolve_expr(expr.value)
        self.resolve_local(expr, expr.name)

    def visit_binary_expr(self, expr):
        self.resolve_expr(expr.left)
        self.resolve_expr(expr.right)

    def visit_logical_expr(self, expr):
        self.resolve_expr(expr.left)
        self.resolve_expr(expr.right)

    def visit_unary_expr(self, expr):
        self.resolve_expr(expr.right)

    def visit_grouping_expr(self, expr):
        self.resolve_expr(expr.expression)

    def visit_call_expr(self, expr):
        self.resolve_expr(expr.callee)
        for argument in expr.arguments:
            self.resolve_expr(argument)

    def visit_literal_expr(self, expr):
        pass
