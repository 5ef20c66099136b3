"""Core module - Column types and the interactive REPL"""

from .types import DataType, ColumnType

__all__ = ['DataType', 'ColumnType']
