"""
Table models and the error taxonomy shared by row sources.

Modules:
    table_model: ColumnModel / TableModel definitions
    errors: Exception hierarchy
"""

from .table_model import ColumnModel, ColumnType, TableModel, create_generic_string_model
from .errors import (
    RowSourceError,
    ConfigurationError,
    UnsupportedConfigurationError,
    RowShapeError,
    KeyResolutionError,
    ResourceError,
    WorkbookOpenError,
    SheetNotFoundError,
    MissingHeaderError,
    SourceStateError,
    CellParseError,
)

__all__ = [
    'ColumnModel', 'ColumnType', 'TableModel', 'create_generic_string_model',
    'RowSourceError', 'ConfigurationError', 'UnsupportedConfigurationError',
    'RowShapeError', 'KeyResolutionError', 'ResourceError', 'WorkbookOpenError',
    'SheetNotFoundError', 'MissingHeaderError', 'SourceStateError', 'CellParseError',
]
