"""Lexical analysis for T-Script. Converts source text into a flat list of Tokens in a single forward pass, tracking
line and column for diagnostics.

Lexing is not resumable: the first LexError aborts the pass, and the caller decides what to do with the rest of the
input.
"""

import string

from tscript.lang.error import LexError
from tscript.syntax.token import KEYWORDS, Token, TokenType


SINGLE = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    "*": TokenType.STAR,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
    "?": TokenType.QUESTION_MARK,
    ",": TokenType.COMMA,
}

# first char: (second char, token if second char matches, token otherwise)
DOUBLE = {
    "!": ("=", TokenType.BANG_EQUAL, TokenType.BANG),
    "=": ("=", TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": ("=", TokenType.LESS_EQUAL, TokenType.LESS),
    ">": ("=", TokenType.GREATER_EQUAL, TokenType.GREATER),
    "&": ("&", TokenType.AND, TokenType.AMPERSAND),
    "|": ("|", TokenType.OR, TokenType.PIPE),
    "+": ("+", TokenType.PLUS_PLUS, TokenType.PLUS),
    "-": ("-", TokenType.MINUS_MINUS, TokenType.MINUS),
}

ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\"": "\"", "\\": "\\", "0": "\0"}
HEX_ESCAPES = {"u": 4, "x": 2}  # escape char: number of hex digits
SURROGATES = (0xD800, 0xDFFF)

IDENTIFIER_START = set(string.ascii_letters + "_$")
IDENTIFIER_CHARS = IDENTIFIER_START | set(string.digits)


def is_digit(char):
    return "0" <= char <= "9"


class Lexer:
    """Scans a source string into Tokens. Call lex once per Lexer."""

    def __init__(self, source):
        self.source = source
        self.tokens = []

        self.start = 0    # position of the first char of the token being scanned
        self.current = 0  # position of the next char to read
        self.line = 1
        self.column = 0

    def lex(self):
        """Lexes the whole source and returns its tokens, terminated by a single EOF token."""
        while not self.at_end():
            self.start = self.current
            self.scan_token()

        self.start = self.current
        self.add_token(TokenType.EOF)
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in SINGLE:
            self.add_token(SINGLE[char])
        elif char in DOUBLE:
            second, matched, unmatched = DOUBLE[char]
            self.add_token(matched if self.match(second) else unmatched)
        elif char == "/":
            if self.match("/"):
                self.line_comment()
            elif self.match("*"):
                self.block_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif char in " \r\t\n":
            pass
        elif char == "\"":
            self.add_token(TokenType.STRING, self.string())
        elif is_digit(char):
            self.add_token(TokenType.NUMBER, self.number())
        elif char in IDENTIFIER_START:
            self.add_token(self.identifier())
        else:
            raise LexError("unexpected character '{}' at {}", [char, f"{self.line}:{self.column}"], self.line,
                           self.column)

    def line_comment(self):
        while self.peek() != "\n" and not self.at_end():
            self.advance()

    def block_comment(self):
        while not self.at_end():
            if self.peek() == "*" and self.peek_next() == "/":
                self.advance()
                self.advance()
                return
            self.advance()

        raise LexError("unterminated multi-line comment", line=self.line, column=self.column, unterminated=True)

    def string(self):
        """Consumes a string literal (opening quote already read) and returns its decoded value."""
        literal = []

        while self.peek() != "\"" and not self.at_end():
            char = self.advance()
            if char == "\\":
                literal.append(self.escape())
            else:
                literal.append(char)

        if self.at_end():
            raise LexError("unterminated string", line=self.line, column=self.column, unterminated=True)

        self.advance()  # closing "
        return "".join(literal)

    def escape(self):
        """Decodes the escape sequence following a backslash."""
        if self.at_end():
            raise LexError("unterminated string", line=self.line, column=self.column, unterminated=True)

        char = self.advance()
        if char in ESCAPES:
            return ESCAPES[char]
        if char in HEX_ESCAPES:
            digits = self.hex_digits(char, HEX_ESCAPES[char])
            code_point = int(digits, 16)
            if SURROGATES[0] <= code_point <= SURROGATES[1]:  # lone surrogates cannot be encoded for output
                raise LexError("invalid escape sequence '{}': surrogate code point", f"\\{char}{digits}", self.line,
                               self.column)
            return chr(code_point)

        raise LexError("invalid escape sequence '{}'", "\\" + char, self.line, self.column)

    def hex_digits(self, kind, count):
        digits = ""
        for _ in range(count):
            if self.peek() not in string.hexdigits or self.at_end():
                raise LexError("invalid escape sequence '{}': expected {} hex digits", [f"\\{kind}{digits}", str(count)],
                               self.line, self.column + 1)
            digits += self.advance()
        return digits

    def number(self):
        while is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()  # .
            while is_digit(self.peek()):
                self.advance()

        return float(self.source[self.start:self.current])

    def identifier(self):
        while self.peek() in IDENTIFIER_CHARS:
            self.advance()

        return KEYWORDS.get(self.source[self.start:self.current], TokenType.IDENTIFIER)

    def add_token(self, type, literal=None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(type, text, literal, self.line, self.column, len(text)))

    def match(self, expected):
        if self.at_end() or self.source[self.current] != expected:
            return False
        self.advance()
        return True

    def advance(self):
        char = self.source[self.current]
        self.current += 1

        if char == "\n":
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return char

    def peek(self):
        if self.at_end():
            return "\0"
        return self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def at_end(self):
        return self.current >= len(self.source)


def lex(source):
    """Returns the tokens of source. Raises LexError on the first lexical error."""
    return Lexer(source).lex()
