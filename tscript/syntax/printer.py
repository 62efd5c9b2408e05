"""Renders T-Script syntax trees in a parenthesized prefix form, e.g. `2 + 3 * 4` becomes `(+ 2 (* 3 4))`. Used by the
--ast flag of the command-line interpreter and by the parser tests.
"""

from tscript.syntax import nodes


class AstPrinter:

    def print(self, node):
        """Returns the prefix rendering of an expression or statement node."""
        match node:
            case nodes.Literal(value=value):
                return self.literal(value)
            case nodes.Variable(name=name):
                return name.text
            case nodes.Assignment(name=name, value=value):
                return self.parenthesize("=", name.text, value)
            case nodes.Binary(left=left, operator=operator, right=right) | \
                    nodes.Logical(left=left, operator=operator, right=right):
                return self.parenthesize(operator.text, left, right)
            case nodes.Unary(operator=operator, right=right):
                return self.parenthesize(operator.text, right)
            case nodes.Ternary(condition=condition, then_branch=then_branch, else_branch=else_branch):
                return self.parenthesize("?:", condition, then_branch, else_branch)
            case nodes.Grouping(expression=expression):
                return self.parenthesize("group", expression)
            case nodes.Call(callee=callee, args=args):
                return self.parenthesize("call", callee, *args)
            case nodes.Postfix(variable=variable, operator=operator):
                return self.parenthesize("postfix" + operator.text, variable.text)
            case nodes.Prefix(variable=variable, operator=operator):
                return self.parenthesize("prefix" + operator.text, variable.text)

            case nodes.ExpressionStmt(expression=expression):
                return self.parenthesize(";", expression)
            case nodes.Var(name=name, initializer=initializer):
                if initializer is None:
                    return self.parenthesize("var", name.text)
                return self.parenthesize("var", name.text, initializer)
            case nodes.Block(statements=statements):
                return self.parenthesize("block", *statements)
            case nodes.If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if else_branch is None:
                    return self.parenthesize("if", condition, then_branch)
                return self.parenthesize("if", condition, then_branch, else_branch)
            case nodes.While(condition=condition, body=body):
                return self.parenthesize("while", condition, body)
            case nodes.Func(name=name, params=params, body=body):
                params = "(" + " ".join(param.text for param in params) + ")"
                return self.parenthesize("fun", name.text, params, *body)
            case nodes.Return(value=value):
                if value is None:
                    return "(return)"
                return self.parenthesize("return", value)

        raise TypeError(f"cannot print {type(node).__name__}")

    @staticmethod
    def literal(value):
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            return str(int(value)) if value.is_integer() else repr(value)
        if isinstance(value, str):
            return f"\"{value}\""
        return str(value)

    def parenthesize(self, name, *parts):
        """parts are nodes (printed recursively) or already-rendered strings."""
        rendered = [part if isinstance(part, str) else self.print(part) for part in parts]
        return "(" + " ".join([name] + rendered) + ")"
