"""Tree-walking evaluator for T-Script. Statements and expressions are executed directly from the syntax tree produced
by the parser, using a chain of Environments for variables.

Statement execution returns None on normal completion or a Returning record when a return statement ran. Returning
is passed up through blocks, ifs and loops until the function call that owns it, so returning never goes through
the exception machinery.
"""

import math
from dataclasses import dataclass
from typing import Any

from tscript.lang.error import ErrorHandler, ExecutionError
from tscript.runtime.callable import ArgumentError, Callable, Function, Print
from tscript.runtime.environment import Environment
from tscript.syntax import nodes
from tscript.syntax.token import Token, TokenType


EXPONENT_THRESHOLD = 1e21  # integral numbers this large print in exponent form, e.g. 1e+21


@dataclass(frozen=True)
class Returning:
    """Result of executing a return statement."""
    keyword: Token
    value: Any


def is_number(*values):
    return all(isinstance(value, float) for value in values)


def to_int32(value):
    """Converts a number to a signed 32-bit integer the way bitwise operators expect."""
    if not math.isfinite(value):
        return 0
    value = int(value) & 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def divide(left, right):
    """IEEE-754 division: dividing by zero gives +-Infinity (or NaN) instead of raising."""
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


class Interpreter:
    """Executes programs against one persistent global scope. Each Interpreter has its own globals, with the native
    functions already defined in them.
    """

    def __init__(self, error_handler=None, stdout=None):
        if error_handler is None:
            error_handler = ErrorHandler(fatal=False)

        self.error_handler = error_handler  # where runtime errors are reported
        self.stdout = stdout                # None means sys.stdout at print time

        self.globals = Environment()
        self.environment = self.globals

        self.globals.define("print", Print())

    def interpret(self, statements):
        """Executes statements in order. The first runtime error is reported and abandons the rest of statements.
        Returns whether every statement ran without a runtime error.
        """
        try:
            for statement in statements:
                returning = self.execute(statement)
                if returning:
                    keyword = returning.keyword
                    self.error_handler.warn("'{}' outside of a function stops the program", "return",
                                            line=keyword.line, start=keyword.column - keyword.length,
                                            end=keyword.column)
                    break
        except ExecutionError as error:
            self.error_handler.report(error)
            return False

        return True

    # statements

    def execute(self, statement):
        """Executes statement, returning a Returning if a return statement ran and None otherwise."""
        match statement:
            case nodes.ExpressionStmt(expression=expression):
                self.evaluate(expression)

            case nodes.Var(name=name, initializer=initializer):
                value = None
                if initializer is not None:
                    value = self.evaluate(initializer)
                self.environment.define(name.text, value)

            case nodes.Block(statements=statements):
                return self.execute_block(statements, Environment(self.environment))

            case nodes.If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if self.is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                elif else_branch is not None:
                    return self.execute(else_branch)

            case nodes.While(condition=condition, body=body):
                while self.is_truthy(self.evaluate(condition)):
                    returning = self.execute(body)
                    if returning:
                        return returning

            case nodes.Func(name=name):
                self.environment.define(name.text, Function(statement, self.environment))

            case nodes.Return(keyword=keyword, value=value):
                return Returning(keyword, None if value is None else self.evaluate(value))

            case _:
                raise TypeError(f"cannot execute {type(statement).__name__}")

        return None

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current environment afterwards no matter what."""
        previous = self.environment
        try:
            self.environment = environment

            for statement in statements:
                returning = self.execute(statement)
                if returning:
                    return returning
        finally:
            self.environment = previous

        return None

    # expressions

    def evaluate(self, expression):
        match expression:
            case nodes.Literal(value=value):
                return value

            case nodes.Grouping(expression=inner):
                return self.evaluate(inner)

            case nodes.Variable(name=name):
                return self.environment.get(name)

            case nodes.Assignment(name=name, value=value):
                value = self.evaluate(value)
                self.environment.assign(name, value)
                return value

            case nodes.Unary(operator=operator, right=right):
                return self.unary(operator, self.evaluate(right))

            case nodes.Binary(left=left, operator=operator, right=right):
                return self.binary(self.evaluate(left), operator, self.evaluate(right))

            case nodes.Logical(left=left, operator=operator, right=right):
                left = self.evaluate(left)
                if operator.type is TokenType.OR:
                    if self.is_truthy(left):
                        return left
                elif not self.is_truthy(left):
                    return left
                return self.evaluate(right)

            case nodes.Ternary(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if self.is_truthy(self.evaluate(condition)):
                    return self.evaluate(then_branch)
                return self.evaluate(else_branch)

            case nodes.Prefix(variable=variable, operator=operator):
                __, new = self.step(variable, operator)
                return new

            case nodes.Postfix(variable=variable, operator=operator):
                old, __ = self.step(variable, operator)
                return old

            case nodes.Call(callee=callee, paren=paren, args=args):
                return self.call(self.evaluate(callee), paren, [self.evaluate(arg) for arg in args])

        raise TypeError(f"cannot evaluate {type(expression).__name__}")

    def unary(self, operator, right):
        if operator.type is TokenType.BANG:
            return not self.is_truthy(right)

        self.check_number(operator, right)
        return -right

    def binary(self, left, operator, right):
        match operator.type:
            case TokenType.EQUAL_EQUAL:
                return self.is_equal(left, right)
            case TokenType.BANG_EQUAL:
                return not self.is_equal(left, right)
            case TokenType.PLUS:
                if is_number(left, right) or (isinstance(left, str) and isinstance(right, str)):
                    return left + right
                raise ExecutionError(operator, "Operands must be two numbers or two strings.")

        self.check_numbers(operator, left, right)

        match operator.type:
            case TokenType.MINUS:
                return left - right
            case TokenType.STAR:
                return left * right
            case TokenType.SLASH:
                return divide(left, right)
            case TokenType.GREATER:
                return left > right
            case TokenType.GREATER_EQUAL:
                return left >= right
            case TokenType.LESS:
                return left < right
            case TokenType.LESS_EQUAL:
                return left <= right
            case TokenType.AMPERSAND:
                return float(to_int32(left) & to_int32(right))
            case TokenType.PIPE:
                return float(to_int32(left) | to_int32(right))

        raise TypeError(f"unknown binary operator {operator.type.name}")

    def step(self, variable, operator):
        """Increments/decrements variable in place. Returns (old value, new value)."""
        value = self.environment.get(variable)
        self.check_number(operator, value)

        new = value + 1 if operator.type is TokenType.PLUS_PLUS else value - 1
        self.environment.assign(variable, new)
        return value, new

    def call(self, callee, paren, args):
        if not isinstance(callee, Callable):
            raise ExecutionError(paren, "Can only call functions.")

        arity = callee.arity()
        if arity != Callable.VARIADIC and len(args) != arity:
            raise ExecutionError(paren, "Expected {} arguments but got {}.", [str(arity), str(len(args))])

        try:
            return callee.call(self, args)
        except ArgumentError as error:
            raise ExecutionError(paren, str(error)) from error

    # helpers

    @staticmethod
    def is_truthy(value):
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    @staticmethod
    def is_equal(left, right):
        if left is None and right is None:
            return True
        if left is None or right is None:
            return False
        if isinstance(left, (bool, float, str)):
            return type(left) is type(right) and left == right
        return left is right

    @staticmethod
    def check_number(operator, operand):
        if not is_number(operand):
            raise ExecutionError(operator, "Operand must be a number.")

    @staticmethod
    def check_numbers(operator, left, right):
        if not is_number(left, right):
            raise ExecutionError(operator, "Operands must be numbers.")

    @staticmethod
    def stringify(value):
        """Text print shows for a T-Script value."""
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
            if value.is_integer() and abs(value) < EXPONENT_THRESHOLD:
                return str(int(value))
            return repr(value)
        return str(value)
