"""
SQL Lexer - Tokenizes SQL statements

Converts raw SQL text into a lazy stream of tokens for the parser.
Each call to ``next_token`` consumes exactly the characters of one token;
once the input is exhausted every further call returns an EOF token.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from .errors import LexError


class TokenType(Enum):
    """Types of tokens in SQL"""
    # Literals
    INTEGER = auto()
    STRING = auto()
    IDENTIFIER = auto()
    KEYWORD = auto()

    # Operators
    EQUALS = auto()
    NOT_EQUALS = auto()
    LESS_THAN = auto()
    GREATER_THAN = auto()
    LESS_EQUALS = auto()
    GREATER_EQUALS = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    DIVIDE = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    SEMICOLON = auto()

    # Special
    EOF = auto()


class Keyword(Enum):
    """Reserved words recognized by the lexer"""
    SELECT = auto()
    CREATE = auto()
    TABLE = auto()
    WHERE = auto()
    ORDER = auto()
    BY = auto()
    ASC = auto()
    DESC = auto()
    FROM = auto()
    AND = auto()
    OR = auto()
    NOT = auto()
    TRUE = auto()
    FALSE = auto()
    PRIMARY = auto()
    KEY = auto()
    CHECK = auto()
    INT = auto()
    BOOL = auto()
    VARCHAR = auto()
    NULL = auto()


@dataclass(frozen=True)
class Token:
    """A single token"""
    type: TokenType
    value: Any
    line: int = 1
    column: int = 1
    offset: int = 0

    def is_keyword(self, keyword: Keyword) -> bool:
        return self.type == TokenType.KEYWORD and self.value == keyword

    def describe(self) -> str:
        """Human-readable description used in error messages"""
        if self.type == TokenType.KEYWORD:
            return f"keyword {self.value.name}"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        if self.type == TokenType.INTEGER:
            return f"number {self.value}"
        if self.type == TokenType.STRING:
            return f"string '{self.value}'"
        if self.type == TokenType.EOF:
            return "end of input"
        return f"'{self.value}'"

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r})"


def _is_digit(char: str) -> bool:
    return '0' <= char <= '9'


def _is_identifier_start(char: str) -> bool:
    return ('a' <= char <= 'z') or ('A' <= char <= 'Z') or char == '_'


class Lexer:
    """SQL Lexer - converts SQL text to tokens"""

    KEYWORDS = {keyword.name: keyword for keyword in Keyword}

    SINGLE_CHAR_TOKENS = {
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        ',': TokenType.COMMA,
        ';': TokenType.SEMICOLON,
        '*': TokenType.STAR,
        '/': TokenType.DIVIDE,
        '+': TokenType.PLUS,
        '-': TokenType.MINUS,
        '=': TokenType.EQUALS,
    }

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def _current_char(self) -> Optional[str]:
        """Get current character or None if at end"""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def _advance(self) -> str:
        """Advance position and return current char"""
        char = self._current_char()
        self.pos += 1
        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _skip_whitespace(self) -> None:
        """Skip whitespace characters"""
        while self._current_char() is not None and self._current_char().isspace():
            self._advance()

    def _error(self, message: str) -> LexError:
        """Build a LexError at the current position"""
        return LexError(message, self.line, self.column, self.pos)

    def _make_token(self, token_type: TokenType, value: Any, start: tuple) -> Token:
        line, column, offset = start
        return Token(token_type, value, line, column, offset)

    def _read_number(self, start: tuple) -> Token:
        """
        Read a numeric literal.

        A single decimal point is allowed when followed by a digit. The
        digits on each side are read as separate integers and combined as
        ``whole * 10 + frac``, so ``1.5`` yields 15 and ``12.34`` yields 154.
        """
        whole = []
        frac = None

        while True:
            char = self._current_char()
            if char == '.' and frac is None:
                self._advance()
                next_char = self._current_char()
                if next_char is None:
                    raise self._error("Unexpected end of input after decimal point")
                if not _is_digit(next_char):
                    raise self._error(f"Expected digit after decimal point, got '{next_char}'")
                frac = []
            elif char is not None and _is_digit(char):
                digits = whole if frac is None else frac
                digits.append(self._advance())
            else:
                break

        if frac is None:
            value = self._to_int(whole, "Invalid number: {}", start)
        else:
            value = (self._to_int(whole, "Invalid integer part in number: {}", start) * 10 +
                     self._to_int(frac, "Invalid decimal part in number: {}", start))

        return self._make_token(TokenType.INTEGER, value, start)

    @staticmethod
    def _to_int(digits: List[str], message: str, start: tuple) -> int:
        """Convert digits, reporting interpreter conversion limits as a LexError"""
        text = ''.join(digits)
        try:
            return int(text)
        except ValueError:
            raise LexError(message.format(text), *start) from None

    def _read_identifier(self, start: tuple) -> Token:
        """Read an identifier or keyword"""
        value = []
        while self._current_char() is not None and (self._current_char().isalnum() or
                                                    self._current_char() == '_'):
            value.append(self._advance())

        identifier = ''.join(value)
        if not identifier:
            raise self._error("Empty identifier")

        keyword = self.KEYWORDS.get(identifier.upper())
        if keyword is not None:
            return self._make_token(TokenType.KEYWORD, keyword, start)

        return self._make_token(TokenType.IDENTIFIER, identifier, start)

    def _read_string(self, quote_char: str, start: tuple) -> Token:
        """Read a string literal (no escape sequences)"""
        self._advance()  # Opening quote

        value = []
        while self._current_char() is not None and self._current_char() != quote_char:
            value.append(self._advance())

        if self._current_char() is None:
            line, column, offset = start
            raise LexError(f"Unterminated string literal starting with {quote_char}",
                           line, column, offset)

        self._advance()  # Closing quote
        return self._make_token(TokenType.STRING, ''.join(value), start)

    def _read_comparison(self, char: str, start: tuple) -> Token:
        """Read <, <=, >, >=, or !="""
        self._advance()
        has_equals = self._current_char() == '='
        if has_equals:
            self._advance()

        if char == '<':
            if has_equals:
                return self._make_token(TokenType.LESS_EQUALS, '<=', start)
            return self._make_token(TokenType.LESS_THAN, '<', start)
        if char == '>':
            if has_equals:
                return self._make_token(TokenType.GREATER_EQUALS, '>=', start)
            return self._make_token(TokenType.GREATER_THAN, '>', start)

        if not has_equals:
            raise self._error("Expected '=' after '!'")
        return self._make_token(TokenType.NOT_EQUALS, '!=', start)

    def next_token(self) -> Token:
        """
        Consume and return the next token.

        Returns an EOF token once the input is exhausted, on every call.

        Raises:
            LexError: If the next characters do not form a valid token
        """
        self._skip_whitespace()

        start = (self.line, self.column, self.pos)
        char = self._current_char()

        if char is None:
            return self._make_token(TokenType.EOF, None, start)

        if _is_digit(char):
            return self._read_number(start)

        if _is_identifier_start(char):
            return self._read_identifier(start)

        if char in '"\'':
            return self._read_string(char, start)

        if char in '<>!':
            return self._read_comparison(char, start)

        if char in self.SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(self.SINGLE_CHAR_TOKENS[char], char, start)

        raise self._error(f"Unexpected character: '{char}'")

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF"""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def tokenize(self) -> List[Token]:
        """Tokenize the entire input"""
        return list(self)
