"""
AST Nodes - Expression and statement trees produced by the parser

All nodes are frozen dataclasses. ``to_dict`` renders a node as plain
JSON-compatible data tagged with a ``type`` key.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..core.types import ColumnType


# ============================================================================
# Operators
# ============================================================================

class UnaryOperator(Enum):
    MINUS = '-'
    PLUS = '+'
    NOT = 'NOT'
    # Sort direction wrappers for ORDER BY items
    ASC = 'ASC'
    DESC = 'DESC'


class BinaryOperator(Enum):
    PLUS = '+'
    MINUS = '-'
    MULTIPLY = '*'
    DIVIDE = '/'
    EQUAL = '='
    NOT_EQUAL = '!='
    GREATER_THAN = '>'
    GREATER_THAN_OR_EQUAL = '>='
    LESS_THAN = '<'
    LESS_THAN_OR_EQUAL = '<='
    AND = 'AND'
    OR = 'OR'


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Number:
    """Unsigned integer literal"""
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'Number', 'value': self.value}


@dataclass(frozen=True)
class String:
    """String literal"""
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'String', 'value': self.value}


@dataclass(frozen=True)
class Bool:
    """TRUE / FALSE literal"""
    value: bool

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'Bool', 'value': self.value}


@dataclass(frozen=True)
class Identifier:
    """Column or table name, or '*' for SELECT *"""
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'Identifier', 'name': self.name}


@dataclass(frozen=True)
class UnaryOperation:
    """Prefix operation (e.g., -x, NOT x) or an ORDER BY direction"""
    operator: UnaryOperator
    operand: 'Expression'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'UnaryOperation',
            'operator': self.operator.name,
            'operand': self.operand.to_dict(),
        }


@dataclass(frozen=True)
class BinaryOperation:
    """Infix operation (e.g., a = b, a AND b)"""
    operator: BinaryOperator
    left: 'Expression'
    right: 'Expression'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'BinaryOperation',
            'operator': self.operator.name,
            'left': self.left.to_dict(),
            'right': self.right.to_dict(),
        }


Expression = Union[Number, String, Bool, Identifier, UnaryOperation, BinaryOperation]


# ============================================================================
# Column definitions
# ============================================================================

@dataclass(frozen=True)
class PrimaryKey:
    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'PrimaryKey'}


@dataclass(frozen=True)
class NotNull:
    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'NotNull'}


@dataclass(frozen=True)
class Check:
    expression: Expression

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'Check', 'expression': self.expression.to_dict()}


Constraint = Union[PrimaryKey, NotNull, Check]


@dataclass(frozen=True)
class TableColumn:
    """Column definition for CREATE TABLE"""
    name: str
    column_type: ColumnType
    constraints: List[Constraint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'column_type': self.column_type.to_dict(),
            'constraints': [c.to_dict() for c in self.constraints],
        }


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class SelectStatement:
    """SELECT statement"""
    columns: List[Expression]
    from_table: str
    where: Optional[Expression] = None
    order_by: List[Expression] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'Select',
            'columns': [c.to_dict() for c in self.columns],
            'from': self.from_table,
            'where': self.where.to_dict() if self.where is not None else None,
            'order_by': [o.to_dict() for o in self.order_by],
        }


@dataclass(frozen=True)
class CreateTableStatement:
    """CREATE TABLE statement"""
    table_name: str
    columns: List[TableColumn] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'CreateTable',
            'table_name': self.table_name,
            'columns': [c.to_dict() for c in self.columns],
        }


Statement = Union[SelectStatement, CreateTableStatement]
