"""
Column Types Module - Defines the column data types accepted by CREATE TABLE

Supports: INT, BOOL, VARCHAR(n)
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Dict, Optional


class DataType(Enum):
    """Column data types in MiniSQL"""
    INT = auto()
    BOOL = auto()
    VARCHAR = auto()


@dataclass(frozen=True)
class ColumnType:
    """Column type with a length (only for VARCHAR)"""
    dtype: DataType
    length: Optional[int] = None  # For VARCHAR(n)
    
    def __post_init__(self):
        if self.dtype == DataType.VARCHAR and self.length is None:
            raise ValueError("VARCHAR requires a length")
        if self.dtype != DataType.VARCHAR and self.length is not None:
            raise ValueError(f"{self.dtype.name} does not take a length")
    
    def __str__(self) -> str:
        if self.dtype == DataType.VARCHAR:
            return f"VARCHAR({self.length})"
        return self.dtype.name
    
    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'type': self.dtype.name}
        if self.length is not None:
            result['length'] = self.length
        return result
