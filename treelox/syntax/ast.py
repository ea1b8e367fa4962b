"""Syntax tree for treelox. Two closed families of nodes, Expr and Stmt, each dispatched to a visitor through accept.

```
<expr> ::= Literal(value) | Grouping(expression) | Unary(operator, right) | Binary(left, operator, right)
         | Logical(left, operator, right) | Variable(name) | Assign(name, value) | Call(callee, paren, arguments)

<stmt> ::= Expression(expression) | Print(expression) | Var(name, initializer?) | Block(statements)
         | If(condition, then_branch, else_branch?) | While(condition, body) | Break(keyword)
         | Function(name, params, body) | Return(keyword, value?)
```

Nodes are frozen after the parser builds them and are shared by reference, never copied. They deliberately keep
object identity as their equality and hash (eq=False): two uses of `x` on the same line are different nodes, and the
resolver's distance table must be able to tell them apart.
"""

from abc import ABC
from dataclasses import dataclass


class Node(ABC):
    """Superclass of every syntax tree node. accept(visitor) calls visitor.visit_<node>_<family>(self), e.g. a Binary
    expression calls visit_binary_expr and a While statement calls visit_while_stmt.
    """
    family = ""

    def accept(self, visitor):
        return getattr(visitor, f"visit_{type(self).__name__.lower()}_{self.family}")(self)


class Expr(Node):
    family = "expr"


class Stmt(Node):
    family = "stmt"


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: object


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: object
    right: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: object
    right: Expr


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: object
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: object


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: object
    value: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: object  # closing paren, used to locate runtime errors
    arguments: tuple


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: object
    initializer: Expr = None


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: tuple


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt = None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True, eq=False)
class Break(Stmt):
    keyword: object


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: object
    params: tuple
    body: tuple


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: object
    value: Expr = None
