#!/usr/bin/env python3
"""
Lexer Tests for MiniSQL

Covers keywords, identifiers, literals, operators, positions,
the EOF sentinel, and lexical errors.

Run: python -m pytest minisql/tests -v
"""

import os
import sys
import unittest

# Add parent directories to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from minisql.parser import Keyword, LexError, Lexer, TokenType


def token_types(sql):
    return [token.type for token in Lexer(sql).tokenize()]


class TestTokens(unittest.TestCase):
    """Test token recognition"""

    def test_simple_select(self):
        """Test tokens of a SELECT * statement"""
        tokens = Lexer("SELECT * FROM t;").tokenize()
        self.assertEqual([t.type for t in tokens], [
            TokenType.KEYWORD, TokenType.STAR, TokenType.KEYWORD,
            TokenType.IDENTIFIER, TokenType.SEMICOLON, TokenType.EOF,
        ])
        self.assertEqual(tokens[0].value, Keyword.SELECT)
        self.assertEqual(tokens[2].value, Keyword.FROM)
        self.assertEqual(tokens[3].value, 't')

    def test_keywords_case_insensitive(self):
        """Test keywords match regardless of case"""
        tokens = Lexer("select FrOm Varchar null").tokenize()
        self.assertEqual([t.value for t in tokens[:-1]], [
            Keyword.SELECT, Keyword.FROM, Keyword.VARCHAR, Keyword.NULL,
        ])

    def test_all_keywords(self):
        """Test every reserved word is a keyword"""
        for keyword in Keyword:
            token = Lexer(keyword.name.lower()).next_token()
            self.assertTrue(token.is_keyword(keyword), keyword)

    def test_identifier_keeps_case(self):
        """Test non-keywords become identifiers with original case"""
        token = Lexer("Users").next_token()
        self.assertEqual(token.type, TokenType.IDENTIFIER)
        self.assertEqual(token.value, 'Users')

    def test_identifier_with_digits_and_underscore(self):
        """Test identifiers may contain digits and underscores"""
        tokens = Lexer("_col1 user_id2").tokenize()
        self.assertEqual([t.value for t in tokens[:-1]], ['_col1', 'user_id2'])

    def test_keyword_prefix_is_identifier(self):
        """Test a word that only starts with a keyword is an identifier"""
        token = Lexer("selected").next_token()
        self.assertEqual(token.type, TokenType.IDENTIFIER)

    def test_operators(self):
        """Test single and two character operators"""
        self.assertEqual(token_types("= != > >= < <= + - * /")[:-1], [
            TokenType.EQUALS, TokenType.NOT_EQUALS,
            TokenType.GREATER_THAN, TokenType.GREATER_EQUALS,
            TokenType.LESS_THAN, TokenType.LESS_EQUALS,
            TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.DIVIDE,
        ])

    def test_operators_without_spaces(self):
        """Test operators are split from adjacent operands"""
        self.assertEqual(token_types("a>=1")[:-1], [
            TokenType.IDENTIFIER, TokenType.GREATER_EQUALS, TokenType.INTEGER,
        ])

    def test_punctuation(self):
        """Test parentheses, comma and semicolon"""
        self.assertEqual(token_types("(,);")[:-1], [
            TokenType.LPAREN, TokenType.COMMA, TokenType.RPAREN, TokenType.SEMICOLON,
        ])

    def test_whitespace_skipped(self):
        """Test tabs and newlines separate tokens"""
        self.assertEqual(token_types(" \tSELECT\n\r\n  a  ")[:-1], [
            TokenType.KEYWORD, TokenType.IDENTIFIER,
        ])


class TestLiterals(unittest.TestCase):
    """Test numeric and string literals"""

    def test_integer(self):
        token = Lexer("42").next_token()
        self.assertEqual(token.type, TokenType.INTEGER)
        self.assertEqual(token.value, 42)

    def test_leading_zeros(self):
        self.assertEqual(Lexer("007").next_token().value, 7)

    def test_decimal_single_digit(self):
        """Test 1.5 combines as whole * 10 + frac"""
        self.assertEqual(Lexer("1.5").next_token().value, 15)

    def test_decimal_multiple_digits(self):
        """Test 12.34 combines as 12 * 10 + 34"""
        self.assertEqual(Lexer("12.34").next_token().value, 154)

    def test_second_decimal_point_not_consumed(self):
        """Test a second point ends the number and is then rejected"""
        lexer = Lexer("1.2.3")
        self.assertEqual(lexer.next_token().value, 12)
        with self.assertRaises(LexError):
            lexer.next_token()

    def test_single_quoted_string(self):
        token = Lexer("'hello world'").next_token()
        self.assertEqual(token.type, TokenType.STRING)
        self.assertEqual(token.value, 'hello world')

    def test_double_quoted_string(self):
        """Test the other quote kind is kept verbatim"""
        token = Lexer('"it\'s"').next_token()
        self.assertEqual(token.value, "it's")

    def test_no_escape_processing(self):
        """Test backslashes are literal characters"""
        token = Lexer(r"'a\nb'").next_token()
        self.assertEqual(token.value, 'a\\nb')

    def test_empty_string(self):
        self.assertEqual(Lexer("''").next_token().value, '')


class TestLexErrors(unittest.TestCase):
    """Test lexical errors"""

    def test_unterminated_string(self):
        with self.assertRaises(LexError) as ctx:
            Lexer("'abc").next_token()
        self.assertIn("Unterminated string literal", ctx.exception.message)

    def test_unterminated_string_position(self):
        """Test the error points at the opening quote"""
        lexer = Lexer("SELECT 'abc")
        lexer.next_token()
        with self.assertRaises(LexError) as ctx:
            lexer.next_token()
        self.assertEqual(ctx.exception.column, 8)
        self.assertEqual(ctx.exception.offset, 7)

    def test_decimal_point_at_end(self):
        with self.assertRaises(LexError) as ctx:
            Lexer("1.").next_token()
        self.assertEqual(ctx.exception.message, "Unexpected end of input after decimal point")

    def test_decimal_point_without_digit(self):
        with self.assertRaises(LexError) as ctx:
            Lexer("1.x").next_token()
        self.assertEqual(ctx.exception.message, "Expected digit after decimal point, got 'x'")

    def test_bang_without_equals(self):
        with self.assertRaises(LexError) as ctx:
            Lexer("!a").next_token()
        self.assertEqual(ctx.exception.message, "Expected '=' after '!'")

    def test_unexpected_character(self):
        with self.assertRaises(LexError) as ctx:
            Lexer("@").next_token()
        self.assertEqual(ctx.exception.message, "Unexpected character: '@'")

    @unittest.skipUnless(hasattr(sys, 'set_int_max_str_digits'), "no integer digit limit")
    def test_number_over_digit_limit(self):
        """Test an over-long literal is a lexical error at its first digit"""
        saved = sys.get_int_max_str_digits()
        sys.set_int_max_str_digits(4300)
        try:
            lexer = Lexer("a " + "9" * 5000)
            lexer.next_token()
            with self.assertRaises(LexError) as ctx:
                lexer.next_token()
        finally:
            sys.set_int_max_str_digits(saved)
        self.assertTrue(ctx.exception.message.startswith("Invalid number: 9999"))
        self.assertEqual(ctx.exception.column, 3)
        self.assertEqual(ctx.exception.offset, 2)

    @unittest.skipUnless(hasattr(sys, 'set_int_max_str_digits'), "no integer digit limit")
    def test_decimal_parts_over_digit_limit(self):
        saved = sys.get_int_max_str_digits()
        sys.set_int_max_str_digits(4300)
        try:
            with self.assertRaises(LexError) as whole_ctx:
                Lexer("9" * 5000 + ".5").next_token()
            with self.assertRaises(LexError) as frac_ctx:
                Lexer("1." + "9" * 5000).next_token()
        finally:
            sys.set_int_max_str_digits(saved)
        self.assertTrue(whole_ctx.exception.message.startswith("Invalid integer part in number"))
        self.assertTrue(frac_ctx.exception.message.startswith("Invalid decimal part in number"))

    def test_error_kind(self):
        with self.assertRaises(LexError) as ctx:
            Lexer("#").next_token()
        self.assertEqual(ctx.exception.to_dict()['kind'], 'lexical')


class TestTokenStream(unittest.TestCase):
    """Test the lazy token stream"""

    def test_eof_is_repeated(self):
        """Test EOF is returned forever once input is exhausted"""
        lexer = Lexer("a")
        self.assertEqual(lexer.next_token().type, TokenType.IDENTIFIER)
        for _ in range(3):
            self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_empty_input(self):
        self.assertEqual(token_types(""), [TokenType.EOF])
        self.assertEqual(token_types("   \n "), [TokenType.EOF])

    def test_iteration_stops_after_eof(self):
        self.assertEqual(len(list(Lexer("a b"))), 3)

    def test_lazy_error(self):
        """Test tokens before a bad character are produced first"""
        lexer = Lexer("a @")
        self.assertEqual(lexer.next_token().value, 'a')
        with self.assertRaises(LexError):
            lexer.next_token()

    def test_positions(self):
        """Test line, column and offset tracking"""
        tokens = Lexer("SELECT\n  a").tokenize()
        self.assertEqual((tokens[0].line, tokens[0].column, tokens[0].offset), (1, 1, 0))
        self.assertEqual((tokens[1].line, tokens[1].column, tokens[1].offset), (2, 3, 9))

    def test_describe(self):
        tokens = Lexer("FROM x 5 'y' ( ").tokenize()
        self.assertEqual([t.describe() for t in tokens], [
            "keyword FROM", "identifier 'x'", "number 5", "string 'y'", "'('", "end of input",
        ])


if __name__ == '__main__':
    unittest.main()
