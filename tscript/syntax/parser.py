"""Recursive-descent parser for T-Script. Turns a token list into a list of statements.

Grammar, from loosest to tightest binding:

```
<program>     ::= <declaration>* EOF
<declaration> ::= "fun" <function> | "var" <var_decl> | <statement>
<function>    ::= IDENTIFIER "(" <params>? ")" <block>
<var_decl>    ::= IDENTIFIER ("=" <expression>)? ";"
<statement>   ::= <return> | <for> | <while> | <if> | <block> | <expr_stmt>
<for>         ::= "for" "(" (<var_decl> | <expr_stmt> | ";") <expression>? ";" <expression>? ")" <statement>

<expression>  ::= <assignment>
<assignment>  ::= IDENTIFIER "=" <assignment> | <ternary>        ; right-associative
<ternary>     ::= <or> ("?" <expression> ":" <ternary>)?
<or>          ::= <and> ("||" <and>)*
<and>         ::= <equality> ("&&" <equality>)*
<equality>    ::= <bitwise> (("==" | "!=") <bitwise>)*
<bitwise>     ::= <comparison> (("&" | "|") <comparison>)*
<comparison>  ::= <term> ((">" | ">=" | "<" | "<=") <term>)*
<term>        ::= <factor> (("+" | "-") <factor>)*
<factor>      ::= <unary> (("*" | "/") <unary>)*
<unary>       ::= ("++" | "--") IDENTIFIER | ("!" | "-") <unary> | <postfix>
<postfix>     ::= <call> ("++" | "--")?                          ; <call> must be an IDENTIFIER
<call>        ::= <primary> ("(" <args>? ")")*
<primary>     ::= "true" | "false" | "null" | NUMBER | STRING | IDENTIFIER | "(" <expression> ")"
```

for loops are desugared into while loops here, so the interpreter never sees them.
"""

from tscript.lang.error import ParseError
from tscript.syntax import nodes
from tscript.syntax.token import TokenType


MAX_ARGS = 255

# tokens that start a new declaration/statement, used to resynchronize after an error
STATEMENT_STARTS = {
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.CONST,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.RETURN,
}


class Parser:
    """Parses a list of Tokens (terminated by EOF) into statements. Call parse once per Parser."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.current = 0
        self.errors = []

    def parse(self):
        """Returns the program's statements. On a syntax error the parser resynchronizes at the next statement boundary
        and keeps going, so that every error in the input is collected. If any were found, the first ParseError is
        raised with all of them attached as its errors attribute.
        """
        statements = []

        while not self.is_at_end():
            try:
                statements.append(self.declaration())
            except ParseError as error:
                self.errors.append(error)
                self.synchronize()

        if self.errors:
            first = self.errors[0]
            first.errors = list(self.errors)
            raise first

        return statements

    # declarations/statements

    def declaration(self):
        if self.match(TokenType.FUN):
            return self.function("function")
        if self.match(TokenType.VAR):
            return self.var_declaration()
        return self.statement()

    def function(self, kind):
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    raise self.error(self.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenType.COMMA):
                    break

        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        return nodes.Func(name, tuple(params), tuple(self.block()))

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return nodes.Var(name, initializer)

    def statement(self):
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.LEFT_BRACE):
            return nodes.Block(tuple(self.block()))
        return self.expression_statement()

    def return_statement(self):
        keyword = self.previous()

        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(keyword, value)

    def for_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = nodes.Block((body, nodes.ExpressionStmt(increment)))
        if condition is None:
            condition = nodes.Literal(True)
        body = nodes.While(condition, body)
        if initializer is not None:
            body = nodes.Block((initializer, body))

        return body

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return nodes.While(condition, self.statement())

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.statement()

        return nodes.If(condition, then_branch, else_branch)

    def block(self):
        """Parses declarations up to the closing brace (opening brace already consumed)."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            statements.append(self.declaration())

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expression = self.expression()
        if not self.is_at_end():  # a trailing expression may omit its ';'
            self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return nodes.ExpressionStmt(expression)

    # expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expression = self.ternary()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expression, nodes.Variable):
                return nodes.Assignment(expression.name, value)
            raise self.error(equals, "Invalid assignment target.")

        return expression

    def ternary(self):
        expression = self.logical_or()

        if self.match(TokenType.QUESTION_MARK):
            then_branch = self.expression()
            self.consume(TokenType.COLON, "Expect ':' after then branch of ternary.")
            else_branch = self.ternary()
            expression = nodes.Ternary(expression, then_branch, else_branch)

        return expression

    def logical_or(self):
        expression = self.logical_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            expression = nodes.Logical(expression, operator, self.logical_and())
        return expression

    def logical_and(self):
        expression = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            expression = nodes.Logical(expression, operator, self.equality())
        return expression

    def binary(self, operand, *types):
        """Left-associative loop shared by every binary precedence level."""
        expression = operand()
        while self.match(*types):
            operator = self.previous()
            expression = nodes.Binary(expression, operator, operand())
        return expression

    def equality(self):
        return self.binary(self.bitwise, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def bitwise(self):
        return self.binary(self.comparison, TokenType.AMPERSAND, TokenType.PIPE)

    def comparison(self):
        return self.binary(self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS,
                           TokenType.LESS_EQUAL)

    def term(self):
        return self.binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self.binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def unary(self):
        if self.match(TokenType.PLUS_PLUS, TokenType.MINUS_MINUS):
            operator = self.previous()
            right = self.unary()

            if not isinstance(right, nodes.Variable):
                raise self.error(operator, "Invalid left-hand side in prefix expression target.")
            return nodes.Prefix(right.name, operator)

        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return nodes.Unary(operator, self.unary())

        return self.postfix()

    def postfix(self):
        expression = self.call()

        if self.match(TokenType.PLUS_PLUS, TokenType.MINUS_MINUS):
            operator = self.previous()

            if not isinstance(expression, nodes.Variable):
                raise self.error(operator, "Invalid right-hand side in postfix expression target.")
            expression = nodes.Postfix(expression.name, operator)

        return expression

    def call(self):
        expression = self.primary()
        while self.match(TokenType.LEFT_PAREN):
            expression = self.finish_call(expression)
        return expression

    def finish_call(self, callee):
        args = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(args) >= MAX_ARGS:
                    raise self.error(self.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                args.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, paren, tuple(args))

    def primary(self):
        if self.match(TokenType.FALSE):
            return nodes.Literal(False)
        if self.match(TokenType.TRUE):
            return nodes.Literal(True)
        if self.match(TokenType.NULL):
            return nodes.Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return nodes.Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expression = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return nodes.Grouping(expression)

        raise self.error(self.peek(), "Expect expression.")

    # error recovery

    def synchronize(self):
        """Discards tokens until the probable start of the next statement: just past a ';' or right before a keyword
        that begins a declaration/statement. Always consumes at least one token.
        """
        self.advance()

        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    # cursor primitives

    def error(self, token, message):
        where = "end of input" if token.type is TokenType.EOF else token.text
        message = message.replace("{", "{{").replace("}", "}}")
        return ParseError(message + " Got '{}'.", token, where)

    def consume(self, type, message):
        if self.check(type):
            return self.advance()
        raise self.error(self.peek(), message)

    def match(self, *types):
        for type in types:
            if self.check(type):
                self.advance()
                return True
        return False

    def check(self, type):
        if self.is_at_end():
            return False
        return self.peek().type is type

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]


def parse(tokens):
    """Returns the statements of tokens. Raises ParseError carrying every syntax error found."""
    return Parser(tokens).parse()
