"""
Row sources feeding the tabular diff engine.

Every source follows the same pull contract: open(), get_next_row() until it
returns None, close().

Architecture:
    resources → header_reader → spreadsheet_source (RowSource)

Modules:
    config: Configuration constants
    base: RowSource contract and lifecycle states
    resources: Resource path resolution and validation
    header_reader: Header parsing, key resolution, cell conversion
    spreadsheet_source: Excel sheet row source
"""

from .base import RowSource, SourceKind, SourceState
from .spreadsheet_source import SpreadsheetRowSource

__all__ = ['RowSource', 'SourceKind', 'SourceState', 'SpreadsheetRowSource']
