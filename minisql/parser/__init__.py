"""Parser module - Lexer, AST nodes and Parser"""

from .errors import ParseError, LexError, SQLSyntaxError, UnexpectedEndOfInput
from .lexer import Lexer, Token, TokenType, Keyword
from .nodes import (
    Number, String, Bool, Identifier, UnaryOperation, BinaryOperation,
    UnaryOperator, BinaryOperator, PrimaryKey, NotNull, Check, TableColumn,
    SelectStatement, CreateTableStatement,
)
from .parser import Parser, Precedence, parse_sql, DEFAULT_MAX_DEPTH

__all__ = [
    'ParseError', 'LexError', 'SQLSyntaxError', 'UnexpectedEndOfInput',
    'Lexer', 'Token', 'TokenType', 'Keyword',
    'Number', 'String', 'Bool', 'Identifier', 'UnaryOperation', 'BinaryOperation',
    'UnaryOperator', 'BinaryOperator', 'PrimaryKey', 'NotNull', 'Check', 'TableColumn',
    'SelectStatement', 'CreateTableStatement',
    'Parser', 'Precedence', 'parse_sql', 'DEFAULT_MAX_DEPTH',
]
