"""Abstract syntax tree for T-Script: two closed sets of immutable node types, expressions and statements.

Consumers (Interpreter, AstPrinter) dispatch on the node type with structural pattern matching, so adding a variant
here means adding a case to each consumer. Nodes form a tree: every node is owned by exactly one parent, and
sequences of children are tuples.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from tscript.syntax.token import Token


class Expr:
    """Superclass of every expression node."""


class Stmt:
    """Superclass of every statement node."""


@dataclass(frozen=True)
class Literal(Expr):
    value: Any  # None, bool, float or str


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assignment(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    """Short-circuiting && and ||."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Ternary(Expr):
    condition: Expr
    then_branch: Expr
    else_branch: Expr


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to locate call errors
    args: Tuple[Expr, ...]


@dataclass(frozen=True)
class Postfix(Expr):
    variable: Token
    operator: Token


@dataclass(frozen=True)
class Prefix(Expr):
    variable: Token
    operator: Token


@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Func(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]
