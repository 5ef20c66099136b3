"""
SQL Parser - Converts tokens into an Abstract Syntax Tree (AST)

Uses recursive descent for statements and column definitions, and
precedence climbing for expressions. The parser keeps a single token of
lookahead and pulls tokens from the lexer on demand.
"""

import logging
from enum import IntEnum
from typing import List, Optional, Tuple

from ..core.types import ColumnType, DataType
from .errors import ParseError, SQLSyntaxError, UnexpectedEndOfInput
from .lexer import Keyword, Lexer, Token, TokenType
from .nodes import (
    BinaryOperation, BinaryOperator, Bool, Check, Constraint,
    CreateTableStatement, Expression, Identifier, NotNull, Number,
    PrimaryKey, SelectStatement, Statement, String, TableColumn,
    UnaryOperation, UnaryOperator,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 128


class Precedence(IntEnum):
    """Binding strength of expression operators, lowest first"""
    NONE = 0
    OR = 1
    AND = 2
    EQUALITY = 3     # =, !=
    COMPARISON = 4   # <, <=, >, >=
    TERM = 5         # +, -
    FACTOR = 6       # *, /
    UNARY = 7        # -, +, NOT
    PRIMARY = 8      # literals, identifiers, parentheses


INFIX_OPERATORS = {
    TokenType.PLUS: (BinaryOperator.PLUS, Precedence.TERM),
    TokenType.MINUS: (BinaryOperator.MINUS, Precedence.TERM),
    TokenType.STAR: (BinaryOperator.MULTIPLY, Precedence.FACTOR),
    TokenType.DIVIDE: (BinaryOperator.DIVIDE, Precedence.FACTOR),
    TokenType.EQUALS: (BinaryOperator.EQUAL, Precedence.EQUALITY),
    TokenType.NOT_EQUALS: (BinaryOperator.NOT_EQUAL, Precedence.EQUALITY),
    TokenType.GREATER_THAN: (BinaryOperator.GREATER_THAN, Precedence.COMPARISON),
    TokenType.GREATER_EQUALS: (BinaryOperator.GREATER_THAN_OR_EQUAL, Precedence.COMPARISON),
    TokenType.LESS_THAN: (BinaryOperator.LESS_THAN, Precedence.COMPARISON),
    TokenType.LESS_EQUALS: (BinaryOperator.LESS_THAN_OR_EQUAL, Precedence.COMPARISON),
}

KEYWORD_OPERATORS = {
    Keyword.AND: (BinaryOperator.AND, Precedence.AND),
    Keyword.OR: (BinaryOperator.OR, Precedence.OR),
}

PREFIX_OPERATORS = {
    TokenType.MINUS: UnaryOperator.MINUS,
    TokenType.PLUS: UnaryOperator.PLUS,
}


class Parser:
    """
    Recursive descent SQL parser.

    Parses a single SELECT or CREATE TABLE statement into AST nodes.
    """

    def __init__(self, lexer: Lexer, max_depth: int = DEFAULT_MAX_DEPTH):
        self.lexer = lexer
        self.max_depth = max_depth
        self._depth = 0
        self.current = lexer.next_token()

    def _advance(self) -> Token:
        """Advance and return the token that was current"""
        token = self.current
        self.current = self.lexer.next_token()
        return token

    def _match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the types"""
        return self.current.type in types

    def _match_keyword(self, *keywords: Keyword) -> bool:
        """Check if current token is any of the keywords"""
        return self.current.type == TokenType.KEYWORD and self.current.value in keywords

    def _consume_if(self, token_type: TokenType) -> bool:
        """Consume token if it matches"""
        if self._match(token_type):
            self._advance()
            return True
        return False

    def _consume_keyword(self, keyword: Keyword) -> bool:
        """Consume keyword if it matches"""
        if self._match_keyword(keyword):
            self._advance()
            return True
        return False

    def _error(self, expected: str) -> SQLSyntaxError:
        """Build an error for the current token not being what was expected"""
        token = self.current
        if token.type == TokenType.EOF:
            return UnexpectedEndOfInput(
                f"Unexpected end of input, {expected[0].lower()}{expected[1:]}", token)
        return SQLSyntaxError(f"{expected}, got {token.describe()}", token)

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        """Expect a specific token type"""
        if not self._match(token_type):
            raise self._error(expected)
        return self._advance()

    def _expect_keyword(self, keyword: Keyword, expected: Optional[str] = None) -> Token:
        """Expect a specific keyword"""
        if not self._match_keyword(keyword):
            raise self._error(expected or f"Expected keyword {keyword.name}")
        return self._advance()

    def _expect_terminator(self) -> None:
        """Expect the closing semicolon; nothing after it is tokenized"""
        if not self._match(TokenType.SEMICOLON):
            raise self._error("Expected ';'")

    def parse_statement(self) -> Statement:
        """Parse a single statement"""
        if self._match_keyword(Keyword.SELECT):
            stmt = self._parse_select()
        elif self._match_keyword(Keyword.CREATE):
            stmt = self._parse_create_table()
        else:
            raise self._error("Expected SELECT or CREATE")

        logger.debug("Parsed %s", type(stmt).__name__)
        return stmt

    # ------------------------------------------------------------------
    # SELECT
    # ------------------------------------------------------------------

    def _parse_select(self) -> SelectStatement:
        """Parse SELECT statement"""
        self._expect_keyword(Keyword.SELECT)

        columns = self._parse_select_columns()

        self._expect_keyword(Keyword.FROM)
        from_table = self._expect(TokenType.IDENTIFIER, "Expected table name").value

        # WHERE clause
        where = None
        if self._consume_keyword(Keyword.WHERE):
            where = self.parse_expression()

        # ORDER BY clause
        order_by = []
        if self._consume_keyword(Keyword.ORDER):
            self._expect_keyword(Keyword.BY)
            order_by = self._parse_order_by()

        self._expect_terminator()

        return SelectStatement(columns=columns, from_table=from_table,
                               where=where, order_by=order_by)

    def _parse_select_columns(self) -> List[Expression]:
        """Parse SELECT column list up to (not including) FROM"""
        if self._consume_if(TokenType.STAR):
            return [Identifier('*')]

        columns = []
        while True:
            columns.append(self.parse_expression())

            if self._consume_if(TokenType.COMMA):
                continue
            if self._match_keyword(Keyword.FROM):
                break
            raise self._error("Expected FROM or comma")

        return columns

    def _parse_order_by(self) -> List[Expression]:
        """Parse ORDER BY items up to (not including) the semicolon"""
        items = []

        while True:
            items.append(self._parse_order_by_item())

            if self._consume_if(TokenType.COMMA):
                continue
            if self._match(TokenType.SEMICOLON):
                break
            raise self._error("Expected semicolon or comma")

        return items

    def _parse_order_by_item(self) -> Expression:
        """Parse an expression with an optional ASC / DESC suffix"""
        expr = self.parse_expression()

        if self._consume_keyword(Keyword.ASC):
            return UnaryOperation(UnaryOperator.ASC, expr)
        if self._consume_keyword(Keyword.DESC):
            return UnaryOperation(UnaryOperator.DESC, expr)
        return expr

    # ------------------------------------------------------------------
    # CREATE TABLE
    # ------------------------------------------------------------------

    def _parse_create_table(self) -> CreateTableStatement:
        """Parse CREATE TABLE statement"""
        self._expect_keyword(Keyword.CREATE)
        self._expect_keyword(Keyword.TABLE)

        table_name = self._expect(TokenType.IDENTIFIER, "Expected table name").value

        self._expect(TokenType.LPAREN, "Expected '('")

        columns = []
        while True:
            columns.append(self._parse_column_definition())

            if self._consume_if(TokenType.COMMA):
                continue
            if self._match(TokenType.RPAREN):
                break
            raise self._error("Expected comma or closing parenthesis")

        self._expect(TokenType.RPAREN, "Expected ')'")
        self._expect_terminator()

        return CreateTableStatement(table_name=table_name, columns=columns)

    def _parse_column_definition(self) -> TableColumn:
        """Parse column definition"""
        name = self._expect(TokenType.IDENTIFIER, "Expected column name").value
        column_type = self._parse_column_type()

        constraints: List[Constraint] = []
        while True:
            if self._consume_keyword(Keyword.PRIMARY):
                self._expect_keyword(Keyword.KEY, "Expected KEY after PRIMARY")
                constraints.append(PrimaryKey())
            elif self._consume_keyword(Keyword.NOT):
                self._expect_keyword(Keyword.NULL, "Expected NULL after NOT")
                constraints.append(NotNull())
            elif self._consume_keyword(Keyword.CHECK):
                self._expect(TokenType.LPAREN, "Expected '(' after CHECK")
                expr = self.parse_expression()
                self._expect(TokenType.RPAREN, "Expected ')' after CHECK expression")
                constraints.append(Check(expr))
            else:
                break

        return TableColumn(name=name, column_type=column_type, constraints=constraints)

    def _parse_column_type(self) -> ColumnType:
        """Parse INT, BOOL, or VARCHAR(n)"""
        if self._consume_keyword(Keyword.INT):
            return ColumnType(DataType.INT)
        if self._consume_keyword(Keyword.BOOL):
            return ColumnType(DataType.BOOL)
        if self._consume_keyword(Keyword.VARCHAR):
            self._expect(TokenType.LPAREN, "Expected '(' after VARCHAR")
            length = self._expect(TokenType.INTEGER, "Expected number for VARCHAR length").value
            self._expect(TokenType.RPAREN, "Expected ')' after VARCHAR length")
            return ColumnType(DataType.VARCHAR, length)

        raise self._error("Expected column type (INT, BOOL, or VARCHAR)")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        """Parse expression (entry point)"""
        return self._parse_expression_with_precedence(Precedence.NONE)

    def _infix_operator(self, token: Token) -> Optional[Tuple[BinaryOperator, Precedence]]:
        if token.type == TokenType.KEYWORD:
            return KEYWORD_OPERATORS.get(token.value)
        return INFIX_OPERATORS.get(token.type)

    def _parse_expression_with_precedence(self, precedence: Precedence) -> Expression:
        """
        Parse an expression whose infix operators all bind tighter than
        ``precedence``.

        The right operand of each infix operator is parsed with that
        operator's own precedence, so chains of equal precedence group to
        the left: ``10 - 3 - 2`` is ``(10 - 3) - 2``.
        """
        self._depth += 1
        try:
            if self._depth > self.max_depth:
                raise SQLSyntaxError(
                    f"Expression nesting exceeds maximum depth of {self.max_depth}",
                    self.current)

            left = self._parse_prefix()

            while True:
                operator = self._infix_operator(self.current)
                if operator is None or precedence >= operator[1]:
                    break
                left = self._parse_infix(left)

            return left
        finally:
            self._depth -= 1

    def _parse_prefix(self) -> Expression:
        """Parse a literal, identifier, parenthesized or prefix expression"""
        token = self.current

        if token.type == TokenType.INTEGER:
            self._advance()
            return Number(token.value)

        if token.type == TokenType.STRING:
            self._advance()
            return String(token.value)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(token.value)

        if token.is_keyword(Keyword.TRUE):
            self._advance()
            return Bool(True)

        if token.is_keyword(Keyword.FALSE):
            self._advance()
            return Bool(False)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self.parse_expression()
            self._expect(TokenType.RPAREN, "Expected closing parenthesis")
            return expr

        if token.type in PREFIX_OPERATORS or token.is_keyword(Keyword.NOT):
            self._advance()
            operator = PREFIX_OPERATORS.get(token.type, UnaryOperator.NOT)
            operand = self._parse_expression_with_precedence(Precedence.UNARY)
            return UnaryOperation(operator, operand)

        if token.type == TokenType.EOF:
            raise UnexpectedEndOfInput("Unexpected end of input", token)

        raise SQLSyntaxError(f"Unexpected token in prefix position: {token.describe()}", token)

    def _parse_infix(self, left: Expression) -> Expression:
        """Parse the operator at the current token and its right operand"""
        token = self._advance()
        operator, precedence = self._infix_operator(token)
        right = self._parse_expression_with_precedence(precedence)
        return BinaryOperation(operator, left, right)


def parse_sql(sql: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Statement:
    """
    Parse a SQL string into an AST.

    Args:
        sql: One SELECT or CREATE TABLE statement, including its semicolon
        max_depth: Maximum expression nesting depth

    Returns:
        SelectStatement or CreateTableStatement

    Raises:
        LexError: If the text cannot be tokenized
        SQLSyntaxError: If the tokens do not form a valid statement
    """
    try:
        parser = Parser(Lexer(sql), max_depth=max_depth)
        return parser.parse_statement()
    except ParseError as e:
        logger.debug("Failed to parse %r: %s", sql, e)
        raise
