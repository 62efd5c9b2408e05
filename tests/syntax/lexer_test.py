import unittest

from tscript.lang.error import LexError
from tscript.syntax.lexer import Lexer, lex
from tscript.syntax.token import KEYWORDS, TokenType


def types(source):
    return [token.type for token in lex(source)]


class LexerTestCase(unittest.TestCase):

    def test_single_and_double_chars(self):
        cases = {
            "()": [TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN],
            "{}[]": [TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE, TokenType.LEFT_BRACKET, TokenType.RIGHT_BRACKET],
            "+-*/.,:;?": [TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH, TokenType.DOT,
                          TokenType.COMMA, TokenType.COLON, TokenType.SEMICOLON, TokenType.QUESTION_MARK],
            "! != = ==": [TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL],
            "< <= > >=": [TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL],
            "& && | ||": [TokenType.AMPERSAND, TokenType.AND, TokenType.PIPE, TokenType.OR],
            "++ -- + -": [TokenType.PLUS_PLUS, TokenType.MINUS_MINUS, TokenType.PLUS, TokenType.MINUS],
        }
        for case, expected in cases.items():
            self.assertEqual(expected + [TokenType.EOF], types(case), case)

    def test_eof(self):
        tokens = lex("")
        self.assertEqual(1, len(tokens))
        self.assertEqual(TokenType.EOF, tokens[0].type)

        self.assertEqual(1, types("1 2 3").count(TokenType.EOF))

    def test_expression(self):
        tokens = lex("2 + 3")
        self.assertEqual([TokenType.NUMBER, TokenType.PLUS, TokenType.NUMBER, TokenType.EOF],
                         [token.type for token in tokens])
        self.assertEqual(2.0, tokens[0].literal)
        self.assertEqual("+", tokens[1].text)
        self.assertIsNone(tokens[1].literal)

    def test_numbers(self):
        should_pass = {"42": 42.0, "3.14": 3.14, "0": 0.0, "007.50": 7.5}
        for case, result in should_pass.items():
            token = lex(case)[0]
            self.assertEqual(TokenType.NUMBER, token.type, case)
            self.assertEqual(result, token.literal, case)
            self.assertIsInstance(token.literal, float, case)

        # a dot must be followed by a digit to belong to the number
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.EOF], types("1."))
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.IDENTIFIER, TokenType.EOF], types("1.x"))

    def test_strings(self):
        should_pass = {
            "\"hello\"": "hello",
            "\"\"": "",
            "\"a\\nb\"": "a\nb",
            "\"\\t\\r\\\"\\\\\\0\"": "\t\r\"\\\0",
            "\"\\u0041\\x42\"": "AB",
            "\"\\u00e9\"": "\u00e9",
            "\"two\nlines\"": "two\nlines",
        }
        for case, result in should_pass.items():
            token = lex(case)[0]
            self.assertEqual(TokenType.STRING, token.type, case)
            self.assertEqual(result, token.literal, case)
            self.assertEqual(case, token.text, case)

        should_raise = ["\"unterminated", "\"\\q\"", "\"\\u00G1\"", "\"\\x4\"", "\"\\u12\"", "\"abc\\", "\"\\uD800\"",
                        "\"\\udfff\""]
        for case in should_raise:
            self.assertRaises(LexError, lex, case)

    def test_surrogate_escapes(self):
        with self.assertRaises(LexError) as context:
            lex("print(\"\\uD800\");")
        self.assertIn("invalid escape sequence", context.exception.message)
        self.assertIn("\\uD800", context.exception.message)
        self.assertFalse(context.exception.unterminated)

        self.assertEqual("\ud7ff\ue000", lex("\"\\uD7FF\\uE000\"")[0].literal)  # neighbors are fine

    def test_unterminated_flag(self):
        should_continue = ["\"open", "/* open", "\"ends in \\"]
        for case in should_continue:
            with self.assertRaises(LexError) as context:
                lex(case)
            self.assertTrue(context.exception.unterminated, case)

        with self.assertRaises(LexError) as context:
            lex("@")
        self.assertFalse(context.exception.unterminated)

    def test_unterminated_string(self):
        with self.assertRaises(LexError) as context:
            lex("\"unterminated")
        self.assertIn("unterminated string", context.exception.message)
        self.assertEqual(1, context.exception.line)

    def test_comments(self):
        self.assertEqual([TokenType.NUMBER, TokenType.EOF], types("// a comment\n1"))
        self.assertEqual([TokenType.NUMBER, TokenType.EOF], types("1 // trailing"))
        self.assertEqual([TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF], types("1 /* a\n * b */ 2"))

        tokens = lex("/* one\ntwo */ x")
        self.assertEqual(2, tokens[0].line)

        with self.assertRaises(LexError) as context:
            lex("/* never closed")
        self.assertIn("unterminated multi-line comment", context.exception.message)

    def test_identifiers_and_keywords(self):
        for keyword, type in KEYWORDS.items():
            tokens = lex(keyword)
            self.assertEqual(type, tokens[0].type, keyword)
            self.assertIsNone(tokens[0].literal, keyword)

        should_pass = ["foo", "_bar", "$baz", "x1", "iffy", "nullable", "camelCase"]
        for case in should_pass:
            tokens = lex(case)
            self.assertEqual([TokenType.IDENTIFIER, TokenType.EOF], [token.type for token in tokens], case)
            self.assertEqual(case, tokens[0].text, case)

    def test_unexpected_character(self):
        should_raise = ["@", "#", "1 ~ 2", "`", "\\"]
        for case in should_raise:
            self.assertRaises(LexError, lex, case)

        with self.assertRaises(LexError) as context:
            lex("a\n  #")
        error = context.exception
        self.assertEqual(2, error.line)
        self.assertEqual(3, error.column)
        self.assertIn("#", error.message)

    def test_positions(self):
        tokens = lex("var x = 10;\nprint(x);")
        var, x, equal, ten, semicolon, print_ = tokens[:6]

        self.assertEqual((1, 3, 3), (var.line, var.column, var.length))
        self.assertEqual((1, 5, 1), (x.line, x.column, x.length))
        self.assertEqual((1, 10, 2), (ten.line, ten.column, ten.length))
        self.assertEqual((2, 5, 5), (print_.line, print_.column, print_.length))
        self.assertEqual("print", print_.text)

    def test_relex(self):
        for token in lex("12.5 \"hi\\n\" foo while <= 7"):
            if token.type is TokenType.EOF:
                continue
            relexed = lex(token.text)[0]
            self.assertEqual(token.type, relexed.type, token)
            self.assertEqual(token.literal, relexed.literal, token)

    def test_lexer_object(self):
        lexer = Lexer("a b")
        tokens = lexer.lex()
        self.assertIs(tokens, lexer.tokens)
        self.assertEqual(3, len(tokens))


if __name__ == '__main__':
    unittest.main()
