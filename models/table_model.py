"""
Column and table models describing the shape of rows handed to the diff engine.

A TableModel is an ordered, immutable list of ColumnModels plus the indices of
the columns that form the row key. Each column knows how to turn raw cell text
into a typed value.

Functions:
    create_generic_string_model: Build an all-text model from header names
"""

import datetime
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Sequence, Tuple

_TRUE_STRINGS = {'true', 't', 'yes', 'y', '1'}
_FALSE_STRINGS = {'false', 'f', 'no', 'n', '0'}


def _parse_decimal(text):
    try:
        return Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"not a decimal: '{text}'")


def _parse_integer(text):
    # Float cells render as '42.0', so integral decimals are accepted
    value = _parse_decimal(text)
    if value != value.to_integral_value():
        raise ValueError(f"not an integer: '{text}'")
    return int(value)


def _parse_boolean(text):
    lowered = text.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise ValueError(f"not a boolean: '{text}'")


def _parse_date(text):
    # Date cells are rendered as 'yyyy-mm-dd HH:MM:SS'
    return datetime.date.fromisoformat(text.strip()[:10])


class ColumnType(Enum):
    STRING = 'string'
    INTEGER = 'integer'
    DECIMAL = 'decimal'
    REAL = 'real'
    BOOLEAN = 'boolean'
    DATE = 'date'

    def parse(self, text):
        if self is ColumnType.STRING:
            return text
        if not text.strip():
            return None
        if self is ColumnType.INTEGER:
            return _parse_integer(text)
        if self is ColumnType.DECIMAL:
            return _parse_decimal(text)
        if self is ColumnType.REAL:
            return float(text)
        if self is ColumnType.BOOLEAN:
            return _parse_boolean(text)
        return _parse_date(text)


@dataclass(frozen=True)
class ColumnModel:
    """
    One column of a table.

    Attributes:
        name: Column name as it appears in the header row
        index: 0-based ordinal position in the row
        type: ColumnType used to parse raw text

    Examples:
        >>> ColumnModel('amount', 2, ColumnType.INTEGER).parse('42.0')
        42
        >>> ColumnModel('name', 1).parse(None) is None
        True
    """
    name: str
    index: int
    type: ColumnType = ColumnType.STRING

    def parse(self, text: Optional[str]):
        """Parse raw cell text; raises ValueError when the text doesn't fit the type."""
        if text is None:
            return None
        return self.type.parse(text)


@dataclass(frozen=True)
class TableModel:
    """
    Ordered, immutable schema: columns in read order plus the key column indices.

    Invariants (checked on construction):
        - columns[i].index == i
        - non-empty column names are unique
        - key_indices is non-empty and every index points at a column
    """
    columns: Tuple[ColumnModel, ...]
    key_indices: Tuple[int, ...]
    name: Optional[str] = None
    _by_name: dict = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        # Normalise list arguments so the model stays hashable and immutable
        object.__setattr__(self, 'columns', tuple(self.columns))
        object.__setattr__(self, 'key_indices', tuple(self.key_indices))

        by_name = {}
        for position, column in enumerate(self.columns):
            if column.index != position:
                raise ValueError(
                    f"column '{column.name}' has index {column.index} but sits at position {position}"
                )
            if not column.name:
                continue
            if column.name in by_name:
                raise ValueError(f"duplicate column name '{column.name}'")
            by_name[column.name] = column

        if not self.key_indices:
            raise ValueError("a table model needs at least one key column")
        for key_index in self.key_indices:
            if not 0 <= key_index < len(self.columns):
                raise ValueError(
                    f"key index {key_index} is outside 0..{len(self.columns) - 1}"
                )
        object.__setattr__(self, '_by_name', by_name)

    @property
    def column_count(self):
        return len(self.columns)

    @property
    def column_names(self):
        return [column.name for column in self.columns]

    @property
    def key_columns(self):
        return [self.columns[i] for i in self.key_indices]

    @property
    def key_column_names(self):
        return [column.name for column in self.key_columns]

    def get_column(self, name):
        return self._by_name.get(name)

    def get_column_index(self, name):
        column = self._by_name.get(name)
        return column.index if column is not None else -1


def create_generic_string_model(column_names: Sequence[str], key_indices: Sequence[int], name=None):
    """
    Build a model where every column is plain text.

    Args:
        column_names: Header names in read order
        key_indices: Indices of the key columns
        name: Optional table name used in diagnostics

    Returns:
        TableModel

    Examples:
        >>> model = create_generic_string_model(['id', 'name'], [0])
        >>> model.key_column_names
        ['id']
    """
    columns = [
        ColumnModel(column_name, position, ColumnType.STRING)
        for position, column_name in enumerate(column_names)
    ]
    return TableModel(columns, key_indices, name=name)
