"""Values that can be called from T-Script: user-defined functions (closures) and native functions like print."""

from abc import abstractmethod, ABC

from tscript.runtime.environment import Environment


class ArgumentError(Exception):
    """Raised by native functions that reject their arguments. Reported as an ExecutionError at the call site."""


class Callable(ABC):
    """Anything a call expression can invoke."""
    VARIADIC = -1  # arity of callables that accept any number of arguments

    @abstractmethod
    def arity(self):
        """Number of parameters expected, or VARIADIC."""

    @abstractmethod
    def call(self, interpreter, args):
        """Invokes this callable with already-evaluated args and returns its result."""


class Function(Callable):
    """A function declared in T-Script, closed over the environment it was declared in."""

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, args):
        environment = Environment(self.closure)
        for param, arg in zip(self.declaration.params, args):
            environment.define(param.text, arg)

        returning = interpreter.execute_block(self.declaration.body, environment)
        return returning.value if returning else None

    def __str__(self):
        return f"<fn {self.declaration.name.text}>"


class Print(Callable):
    """Native print: writes its arguments, separated by spaces, to the interpreter's output."""

    def arity(self):
        return Callable.VARIADIC

    def call(self, interpreter, args):
        if not args:
            raise ArgumentError("print expects at least one argument.")

        print(*(interpreter.stringify(arg) for arg in args), file=interpreter.stdout)
        return None

    def __str__(self):
        return "<native fn print>"
