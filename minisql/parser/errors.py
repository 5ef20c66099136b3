"""
Parser Errors - Exceptions raised while tokenizing and parsing SQL

Every error carries the source position where it was detected so that
callers can point at the offending text.
"""

from typing import Any, Dict, Optional


class ParseError(Exception):
    """Base class for lexical and syntax errors, with position information"""

    kind = "parse"

    def __init__(self, message: str, line: int = 1, column: int = 1, offset: int = 0):
        self.message = message
        self.line = line
        self.column = column
        self.offset = offset
        super().__init__(f"{message} at line {line}, column {column}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a JSON-compatible dictionary"""
        return {
            'kind': self.kind,
            'message': self.message,
            'line': self.line,
            'column': self.column,
            'offset': self.offset,
        }


class LexError(ParseError):
    """Tokenization error (bad character, unterminated string, bad number)"""

    kind = "lexical"


class SQLSyntaxError(ParseError):
    """Grammar error at a specific token"""

    kind = "syntax"

    def __init__(self, message: str, token: Optional[Any] = None):
        self.token = token
        if token is None:
            super().__init__(message)
        else:
            super().__init__(message, token.line, token.column, token.offset)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        if self.token is not None:
            result['token'] = self.token.describe()
        return result


class UnexpectedEndOfInput(SQLSyntaxError):
    """Input ended where more tokens were required"""
