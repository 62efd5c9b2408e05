"""Shared lexical vocabulary: the closed set of token kinds and the immutable Token record produced by the lexer and
consumed by the parser.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class TokenType(Enum):
    # single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    SEMICOLON = auto()
    COLON = auto()
    DOT = auto()
    QUESTION_MARK = auto()
    COMMA = auto()

    # one or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    AMPERSAND = auto()
    AND = auto()
    PIPE = auto()
    OR = auto()
    PLUS_PLUS = auto()
    MINUS_MINUS = auto()

    # literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # keywords
    CLASS = auto()
    IF = auto()
    ELSE = auto()
    TRUE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    NULL = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    VAR = auto()
    CONST = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS = {
    "class": TokenType.CLASS,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "null": TokenType.NULL,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "var": TokenType.VAR,
    "const": TokenType.CONST,
    "while": TokenType.WHILE,
}


@dataclass(frozen=True)
class Token:
    """Minimal lexical unit. literal is the decoded value of NUMBER (float) and STRING (str) tokens, None otherwise.
    column is the cursor column right after the token was read, so the token starts at column - length.
    """
    type: TokenType
    text: str
    literal: Any
    line: int
    column: int
    length: int

    def __str__(self):
        return f"{self.type.name} {self.text!r} {self.literal!r} {self.line}:{self.column}"
