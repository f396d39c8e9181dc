"""
Relational helpers for draining query results into rows.

Stateless functions over an already-open SQLAlchemy connection, which they
borrow for a single call and never close.

Modules:
    kinds: ReadKind / WriteKind tags
    materializer: Query execution and row extraction
    formatting: SQL literal formatting
    lifecycle: Best-effort close helpers and updates
"""

from .kinds import ReadKind, WriteKind
from .materializer import (
    execute_query,
    read_rows,
    read_result_rows,
    read_row,
    get_row_map,
    get_column_names,
)
from .formatting import format_for_sql, quote_sql_string
from .lifecycle import (
    UpdateResult,
    close_statement,
    close_result,
    close_connection,
    execute_update,
)

__all__ = [
    'ReadKind', 'WriteKind',
    'execute_query', 'read_rows', 'read_result_rows', 'read_row', 'get_row_map', 'get_column_names',
    'format_for_sql', 'quote_sql_string',
    'UpdateResult', 'close_statement', 'close_result', 'close_connection', 'execute_update',
]
