"""
SQL literal formatting for values written back into generated statements.

Functions:
    format_for_sql: Render a value as a SQL literal for a given WriteKind
    quote_sql_string: Single-quote a string, doubling embedded quotes
"""

import datetime

from .kinds import WriteKind, coerce_kind

SQL_NULL = 'NULL'
DEFAULT_DATE_PATTERN = '%Y-%m-%d'
DEFAULT_TIME_PATTERN = '%Y-%m-%d %H:%M:%S'


def quote_sql_string(text):
    """
    Examples:
        >>> quote_sql_string("O'Brien")
        "'O''Brien'"
    """
    return "'" + text.replace("'", "''") + "'"


def _format_temporal(value, pattern, write_kind):
    if not isinstance(value, datetime.date):
        raise TypeError(
            f"{write_kind.name} literal needs a date or datetime, got {type(value).__name__}"
        )
    return quote_sql_string(value.strftime(pattern))


def format_for_sql(value, write_kind):
    """
    Format a value as a SQL literal.

    None always formats to NULL, whatever the kind.

    Args:
        value: Value to render
        write_kind: WriteKind (or its string value)

    Returns:
        str: SQL literal

    Raises:
        ConfigurationError: If write_kind is not recognized
        TypeError: If a DATE/TIME value isn't a date

    Examples:
        >>> format_for_sql(None, WriteKind.STRING)
        'NULL'
        >>> format_for_sql(42, WriteKind.NUMBER)
        '42'
        >>> format_for_sql(datetime.date(2024, 3, 9), 'date')
        "'2024-03-09'"
    """
    if value is None:
        return SQL_NULL
    write_kind = coerce_kind(WriteKind, write_kind)
    if write_kind is WriteKind.NUMBER:
        if isinstance(value, bool):
            return '1' if value else '0'
        return str(value)
    if write_kind is WriteKind.STRING:
        return quote_sql_string(str(value))
    if write_kind is WriteKind.DATE:
        return _format_temporal(value, DEFAULT_DATE_PATTERN, write_kind)
    return _format_temporal(value, DEFAULT_TIME_PATTERN, write_kind)
