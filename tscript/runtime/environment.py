from tscript.lang.error import ExecutionError


class Environment:
    """A scope's name: value bindings plus a link to its enclosing scope. Several environments (and closures) may share
    one enclosing environment; mutations through any of them are visible to all.
    """

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this scope, shadowing (not touching) any outer binding. Redefinition replaces silently."""
        self.values[name] = value

    def get(self, name):
        """Returns the value bound to token name in the nearest scope that has it."""
        environment = self
        while environment is not None:
            if name.text in environment.values:
                return environment.values[name.text]
            environment = environment.enclosing

        raise ExecutionError(name, "Undefined variable '{}'.", name.text)

    def assign(self, name, value):
        """Rebinds token name in the nearest scope that has it. Never creates a binding."""
        environment = self
        while environment is not None:
            if name.text in environment.values:
                environment.values[name.text] = value
                return
            environment = environment.enclosing

        raise ExecutionError(name, "Undefined variable '{}'.", name.text)

    def __contains__(self, name):
        return name in self.values or (self.enclosing is not None and name in self.enclosing)
