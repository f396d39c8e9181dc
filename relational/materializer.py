"""
Turning relational query results into rows.

Every function borrows the connection it is given and never closes it.
Rows come out in one of two shapes, both built by the same extraction
primitive:
    - sequence: positional list driven by column names + ReadKinds
    - mapping: dict of column name -> raw value

Functions:
    execute_query: Run a query and return the raw result
    read_rows: Run a query and materialize every row as a dict
    read_result_rows: Materialize an existing result as dicts
    read_row: Extract one row into a fixed-width list
    get_row_map: Extract one row into a dict
    get_column_names: Column names of a result
"""

import logging
import warnings

from models.errors import ConfigurationError
from .kinds import ReadKind, coerce_kind
from .lifecycle import close_result

logger = logging.getLogger(__name__)

SEQUENCE = 'sequence'
MAPPING = 'mapping'


def _column_value(row, column_name):
    # SQLAlchemy Row exposes name access through _mapping; plain dicts work directly
    mapping = getattr(row, '_mapping', row)
    return mapping[column_name]


def _read_value(row, column_name, read_kind):
    value = _column_value(row, column_name)
    if read_kind is ReadKind.OBJECT or value is None:
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode('utf-8')
    return str(value)


def _extract(row, column_names, read_kinds, shape):
    values = [
        _read_value(row, column_name, read_kind)
        for column_name, read_kind in zip(column_names, read_kinds)
    ]
    if shape == MAPPING:
        return dict(zip(column_names, values))
    return values


def execute_query(sql, connection):
    """
    Execute a query and return the raw result (None-safe).

    Args:
        sql: Query text, passed to the driver as is
        connection: Open SQLAlchemy Connection

    Returns:
        CursorResult or None
    """
    logger.debug(f"sql -> {sql}")
    if sql is None or connection is None:
        return None
    return connection.exec_driver_sql(sql)


def get_column_names(result):
    """Return the result's column names, or None when it has none."""
    if result is None:
        return None
    column_names = list(result.keys())
    if not column_names:
        return None
    return column_names


def get_row_map(column_names, row):
    if column_names is None or row is None:
        return None
    read_kinds = [ReadKind.OBJECT] * len(column_names)
    return _extract(row, column_names, read_kinds, MAPPING)


def read_row(row, column_names, read_kinds):
    """
    Extract one row into a positional list, reading each column by kind.

    Args:
        row: Result row (SQLAlchemy Row or mapping)
        column_names: Columns to read, in output order
        read_kinds: ReadKind (or value string) per column

    Returns:
        list or None (when any input is missing or column_names is empty)

    Raises:
        ConfigurationError: On an unrecognized kind or mismatched lengths

    Examples:
        >>> read_row(row, ['id', 'name'], [ReadKind.OBJECT, ReadKind.STRING])
        [1, 'Alice']
    """
    if row is None or not column_names or read_kinds is None:
        return None
    if len(read_kinds) != len(column_names):
        raise ConfigurationError(
            f"{len(column_names)} column names but {len(read_kinds)} read kinds"
        )
    kinds = [coerce_kind(ReadKind, kind) for kind in read_kinds]
    return _extract(row, column_names, kinds, SEQUENCE)


def read_result_rows(result):
    """
    Materialize every row of a result as a dict.

    Refuses to materialize when warnings are raised while fetching, since
    the data can't be trusted. Does not close the result.

    Returns:
        list of dict, or None when there are no rows, no columns or warnings
    """
    if result is None:
        return None
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter('always')
        column_names = get_column_names(result)
        if column_names is None:
            logger.warning(f"no column names for result {result!r}")
            return None
        rows = [get_row_map(column_names, row) for row in result]
    if caught:
        for warning in caught:
            logger.warning(f"result carries warning: {warning.message}")
        return None
    for row_map in rows:
        logger.debug(f"row map -> {row_map}")
    if not rows:
        return None
    return rows


def read_rows(sql, connection):
    """
    Run a query and materialize all of its rows as dicts.

    Args:
        sql: Query text
        connection: Open SQLAlchemy Connection (not closed here)

    Returns:
        list of dict or None (no rows, missing inputs, or warnings)

    Examples:
        >>> read_rows("SELECT id, name FROM accounts ORDER BY id", conn)
        [{'id': 1, 'name': 'Alice'}, {'id': 2, 'name': 'Bob'}]
    """
    logger.debug(f"sql -> {sql}, connection -> {connection}")
    if sql is None or connection is None:
        return None
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter('always')
        result = execute_query(sql, connection)
    if caught:
        for warning in caught:
            logger.warning(f"query raised warning: {warning.message}")
        close_result(result)
        return None
    try:
        return read_result_rows(result)
    finally:
        close_result(result)
