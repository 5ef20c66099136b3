"""
MiniSQL - A hand-written lexer and parser for a small SQL subset

Parses SELECT queries and CREATE TABLE definitions into an AST.
"""

__version__ = "1.0.0"

from .parser import parse_sql, ParseError, LexError, SQLSyntaxError
from .core.repl import REPL

__all__ = ["parse_sql", "ParseError", "LexError", "SQLSyntaxError", "REPL"]
