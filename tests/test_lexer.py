"""
Test suite for the Kaleidoscope lexer.

Tests cover:
- Keywords, identifiers, numbers, punctuation and operators
- Whitespace and comment skipping
- Lookahead behaviour at end of input
- Lexical errors

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kaleidoscope.lexer import (
    Lexer, tokenize_string, Token, TokenType, Operator, PRECEDENCE,
    InvalidNumberError, UnknownCharacterError, LexerError
)


class TestLexer(unittest.TestCase):
    """Test cases for tokenization."""

    def _types(self, source: str):
        return [token.type for token in tokenize_string(source)]

    def test_number_keyword_identifier(self):
        """Test the basic token kinds in sequence."""
        tokens = tokenize_string("3.141592 def fib x")
        self.assertEqual(tokens, [
            Token(TokenType.NUMBER, 3.141592),
            Token(TokenType.DEF),
            Token(TokenType.IDENTIFIER, "fib"),
            Token(TokenType.IDENTIFIER, "x"),
        ])

    def test_extern_keyword(self):
        self.assertEqual(self._types("extern sin(x);"), [
            TokenType.EXTERN, TokenType.IDENTIFIER, TokenType.LEFT_PAREN,
            TokenType.IDENTIFIER, TokenType.RIGHT_PAREN, TokenType.SEMICOLON,
        ])

    def test_keywords_are_case_sensitive(self):
        tokens = tokenize_string("Def define extern1")
        self.assertTrue(all(t.type == TokenType.IDENTIFIER for t in tokens))
        self.assertEqual([t.value for t in tokens], ["Def", "define", "extern1"])

    def test_identifier_with_digits(self):
        tokens = tokenize_string("x1y2 3")
        self.assertEqual(tokens, [
            Token(TokenType.IDENTIFIER, "x1y2"),
            Token(TokenType.NUMBER, 3.0),
        ])

    def test_number_forms(self):
        values = [t.value for t in tokenize_string("42 .5 1. 007")]
        self.assertEqual(values, [42.0, 0.5, 1.0, 7.0])

    def test_operators(self):
        tokens = tokenize_string("< + - *")
        self.assertEqual([t.value for t in tokens], [
            Operator.LESS_THAN, Operator.PLUS, Operator.MINUS, Operator.TIMES
        ])
        self.assertTrue(all(t.is_operator for t in tokens))

    def test_no_whitespace_needed(self):
        self.assertEqual(self._types("foo(a,b)*2;"), [
            TokenType.IDENTIFIER, TokenType.LEFT_PAREN, TokenType.IDENTIFIER,
            TokenType.COMMA, TokenType.IDENTIFIER, TokenType.RIGHT_PAREN,
            TokenType.OPERATOR, TokenType.NUMBER, TokenType.SEMICOLON,
        ])

    def test_comment_only_input(self):
        """A comment with nothing else produces no tokens."""
        self.assertEqual(tokenize_string("# just a comment"), [])
        self.assertEqual(tokenize_string("   # indented comment\n"), [])

    def test_comment_ends_at_newline(self):
        tokens = tokenize_string("# skip this\nx # and this\r\ny")
        self.assertEqual([t.value for t in tokens], ["x", "y"])

    def test_empty_input(self):
        self.assertEqual(tokenize_string(""), [])
        self.assertEqual(tokenize_string(" \t\n\r\x0c"), [])

    def test_eof_repeats(self):
        """Once input is exhausted every call returns EOF."""
        lexer = Lexer("x")
        self.assertEqual(lexer.next_token(), Token(TokenType.IDENTIFIER, "x"))
        for _ in range(3):
            self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_lazy_iteration_over_generator(self):
        """The lexer accepts any iterable of characters."""
        chars = (c for c in "a+1")
        lexer = Lexer(chars)
        iterator = iter(lexer)
        self.assertEqual(next(iterator), Token(TokenType.IDENTIFIER, "a"))
        self.assertEqual(next(iterator), Token(TokenType.OPERATOR, Operator.PLUS))
        self.assertEqual(next(iterator), Token(TokenType.NUMBER, 1.0))
        with self.assertRaises(StopIteration):
            next(iterator)

    def test_locations(self):
        tokens = Lexer("a\n  b", "demo.ks").tokenize()
        self.assertEqual((tokens[0].location.line, tokens[0].location.column), (1, 1))
        self.assertEqual((tokens[1].location.line, tokens[1].location.column), (2, 3))
        self.assertEqual(str(tokens[1].location), "demo.ks:2:3")

    def test_starting_line(self):
        tokens = Lexer("a\nb", "f.ks", line=7).tokenize()
        self.assertEqual([t.location.line for t in tokens], [7, 8])

    def test_location_ignored_by_equality(self):
        first = tokenize_string("x")[0]
        second = tokenize_string("   x")[0]
        self.assertEqual(first, second)
        self.assertNotEqual(first.location, second.location)

    def test_lexemes(self):
        tokens = tokenize_string("def f ( ) , ; *")
        self.assertEqual([t.lexeme for t in tokens], ["def", "f", "(", ")", ",", ";", "*"])


class TestLexerErrors(unittest.TestCase):
    """Test cases for lexical errors."""

    def test_unknown_character(self):
        with self.assertRaises(UnknownCharacterError) as cm:
            tokenize_string("x @ y")
        self.assertEqual(cm.exception.char, "@")
        self.assertEqual(cm.exception.code, "L001")
        self.assertEqual(cm.exception.location.column, 3)

    def test_division_is_not_an_operator(self):
        with self.assertRaises(UnknownCharacterError) as cm:
            tokenize_string("a / b")
        self.assertEqual(cm.exception.char, "/")

    def test_non_ascii_identifier_rejected(self):
        with self.assertRaises(UnknownCharacterError) as cm:
            tokenize_string("é")
        self.assertEqual(cm.exception.char, "é")

    def test_invalid_number(self):
        with self.assertRaises(InvalidNumberError) as cm:
            tokenize_string("1..2")
        self.assertEqual(cm.exception.lexeme, "1..2")
        self.assertEqual(cm.exception.code, "L003")

    def test_lone_dot_is_invalid_number(self):
        with self.assertRaises(InvalidNumberError):
            tokenize_string(".")

    def test_errors_share_base_class(self):
        with self.assertRaises(LexerError):
            tokenize_string("$")

    def test_error_message_rendering(self):
        with self.assertRaises(UnknownCharacterError) as cm:
            Lexer("$", "input.ks").tokenize()
        text = str(cm.exception)
        self.assertIn("Unknown character: '$'", text)
        self.assertIn("[L001]", text)
        self.assertIn("input.ks:1:1", text)


class TestOperators(unittest.TestCase):
    """Test cases for the operator precedence table."""

    def test_precedence_values(self):
        self.assertEqual(Operator.LESS_THAN.precedence, 10)
        self.assertEqual(Operator.PLUS.precedence, 20)
        self.assertEqual(Operator.MINUS.precedence, 20)
        self.assertEqual(Operator.TIMES.precedence, 40)

    def test_precedence_table_is_read_only(self):
        with self.assertRaises(TypeError):
            PRECEDENCE[Operator.PLUS] = 99

    def test_operator_str(self):
        self.assertEqual(str(Operator.TIMES), "*")


if __name__ == "__main__":
    unittest.main(verbosity=2)
