"""Tests for relational materialization, SQL formatting and best-effort helpers."""

import pytest
import sys
import os
import datetime
import warnings
from decimal import Decimal
from unittest.mock import MagicMock

from sqlalchemy import create_engine

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from relational import (
    ReadKind,
    WriteKind,
    UpdateResult,
    execute_query,
    read_rows,
    read_result_rows,
    read_row,
    get_row_map,
    get_column_names,
    format_for_sql,
    close_statement,
    close_result,
    close_connection,
    execute_update,
)
from models import ConfigurationError


@pytest.fixture
def connection():
    """In-memory SQLite connection with a small accounts table."""
    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        conn.exec_driver_sql("CREATE TABLE accounts (id INTEGER PRIMARY KEY, name TEXT, payload BLOB)")
        conn.exec_driver_sql("INSERT INTO accounts VALUES (1, 'Alice', X'6869')")
        conn.exec_driver_sql("INSERT INTO accounts VALUES (2, 'Bob', NULL)")
        conn.commit()
        yield conn
    engine.dispose()


class WarningResult:
    """Result stand-in that raises a driver warning while rows are fetched."""

    def __init__(self):
        self.closed = False

    def keys(self):
        return ['id']

    def __iter__(self):
        warnings.warn("data truncated", UserWarning)
        yield {'id': 1}

    def close(self):
        self.closed = True


class TestReadRows:
    """Bulk materialization into name-keyed maps."""

    def test_rows_become_maps(self, connection):
        rows = read_rows("SELECT id, name FROM accounts ORDER BY id", connection)
        assert rows == [{'id': 1, 'name': 'Alice'}, {'id': 2, 'name': 'Bob'}]

    def test_no_rows_returns_none(self, connection):
        assert read_rows("SELECT id FROM accounts WHERE id > 100", connection) is None

    def test_missing_inputs_return_none(self, connection):
        assert read_rows(None, connection) is None
        assert read_rows("SELECT 1", None) is None

    def test_connection_stays_open(self, connection):
        read_rows("SELECT id FROM accounts", connection)
        assert not connection.closed
        assert read_rows("SELECT COUNT(*) AS n FROM accounts", connection) == [{'n': 2}]

    def test_warnings_while_fetching_refuse_materialization(self, caplog):
        result = WarningResult()
        assert read_result_rows(result) is None
        assert "data truncated" in caplog.text
        # read_result_rows leaves closing to the caller
        assert not result.closed

    def test_warnings_while_executing_refuse_materialization(self, caplog):
        result = MagicMock()

        def exec_driver_sql(sql):
            warnings.warn("implicit conversion", UserWarning)
            return result

        conn = MagicMock()
        conn.exec_driver_sql.side_effect = exec_driver_sql

        assert read_rows("SELECT 1", conn) is None
        assert "implicit conversion" in caplog.text
        result.close.assert_called_once()

    def test_result_without_columns(self):
        result = MagicMock()
        result.keys.return_value = []
        assert read_result_rows(result) is None

    def test_execute_query_returns_result(self, connection):
        result = execute_query("SELECT id, name FROM accounts ORDER BY id", connection)
        assert get_column_names(result) == ['id', 'name']
        assert len(result.fetchall()) == 2
        close_result(result)

    def test_execute_query_none_safe(self, connection):
        assert execute_query(None, connection) is None
        assert get_column_names(None) is None


class TestReadRow:
    """Positional extraction dispatched by read kind."""

    def test_kinds_dispatch(self, connection):
        row = execute_query("SELECT id, name, payload FROM accounts WHERE id = 1", connection).fetchone()
        values = read_row(row, ['id', 'name', 'payload', 'id'],
                          [ReadKind.OBJECT, ReadKind.STRING, ReadKind.TEXT, ReadKind.STRING])
        assert values == [1, 'Alice', 'hi', '1']

    def test_width_follows_column_names(self, connection):
        row = execute_query("SELECT id, name FROM accounts WHERE id = 2", connection).fetchone()
        assert read_row(row, ['name'], ['object']) == ['Bob']

    def test_string_decodes_bytes(self):
        assert read_row({'payload': b'hi'}, ['payload'], [ReadKind.STRING]) == ['hi']
        assert read_row({'payload': memoryview(b'hi')}, ['payload'], [ReadKind.TEXT]) == ['hi']

    def test_string_decodes_blob_column(self, connection):
        row = execute_query("SELECT payload FROM accounts WHERE id = 1", connection).fetchone()
        assert read_row(row, ['payload'], [ReadKind.STRING]) == ['hi']

    def test_null_passes_through(self):
        assert read_row({'payload': None}, ['payload'], [ReadKind.TEXT]) == [None]

    def test_kinds_as_strings(self):
        assert read_row({'a': 5}, ['a'], ['STRING']) == ['5']

    def test_unrecognized_kind_is_fatal(self):
        with pytest.raises(ConfigurationError):
            read_row({'a': 1}, ['a'], ['blob'])

    def test_mismatched_lengths_are_fatal(self):
        with pytest.raises(ConfigurationError):
            read_row({'a': 1, 'b': 2}, ['a', 'b'], [ReadKind.OBJECT])

    def test_missing_inputs_return_none(self):
        assert read_row(None, ['a'], [ReadKind.OBJECT]) is None
        assert read_row({'a': 1}, [], []) is None
        assert read_row({'a': 1}, ['a'], None) is None

    def test_row_map(self, connection):
        row = execute_query("SELECT id, name FROM accounts WHERE id = 1", connection).fetchone()
        assert get_row_map(['id', 'name'], row) == {'id': 1, 'name': 'Alice'}
        assert get_row_map(None, row) is None


class TestFormatForSql:
    """SQL literal formatting."""

    @pytest.mark.parametrize("kind", list(WriteKind))
    def test_none_is_null_for_every_kind(self, kind):
        assert format_for_sql(None, kind) == 'NULL'

    def test_number(self):
        assert format_for_sql(42, WriteKind.NUMBER) == '42'
        assert format_for_sql(Decimal('10.50'), WriteKind.NUMBER) == '10.50'

    def test_boolean_number_is_one_or_zero(self):
        assert format_for_sql(True, WriteKind.NUMBER) == '1'
        assert format_for_sql(False, 'number') == '0'

    def test_string_is_quoted_and_escaped(self):
        assert format_for_sql("O'Brien", WriteKind.STRING) == "'O''Brien'"
        assert format_for_sql("plain", 'string') == "'plain'"

    def test_date(self):
        assert format_for_sql(datetime.date(2024, 3, 9), WriteKind.DATE) == "'2024-03-09'"
        assert format_for_sql(datetime.datetime(2024, 3, 9, 14, 5), WriteKind.DATE) == "'2024-03-09'"

    def test_time(self):
        value = datetime.datetime(2024, 3, 9, 14, 5, 7)
        assert format_for_sql(value, WriteKind.TIME) == "'2024-03-09 14:05:07'"

    def test_date_needs_a_date(self):
        with pytest.raises(TypeError):
            format_for_sql("2024-03-09", WriteKind.DATE)

    def test_unrecognized_kind(self):
        with pytest.raises(ConfigurationError):
            format_for_sql(1, 'blob')


class TestCloseHelpers:
    """Close helpers never propagate failures."""

    @pytest.mark.parametrize("close_helper", [close_statement, close_result, close_connection])
    def test_failing_close_is_swallowed(self, close_helper, caplog):
        resource = MagicMock()
        resource.close.side_effect = RuntimeError("socket gone")

        close_helper(resource)

        resource.close.assert_called_once()
        assert "socket gone" in caplog.text

    @pytest.mark.parametrize("close_helper", [close_statement, close_result, close_connection])
    def test_none_is_ignored(self, close_helper):
        close_helper(None)

    def test_closes_real_cursor(self, connection):
        cursor = connection.connection.cursor()
        close_statement(cursor)
        with pytest.raises(Exception):
            cursor.execute("SELECT 1")


class TestExecuteUpdate:
    """Best-effort update with a distinguishable result."""

    def test_success_commits(self, connection):
        result = execute_update("INSERT INTO accounts (id, name) VALUES (3, 'Carol')", connection)
        assert result
        assert result == UpdateResult(True)
        assert read_rows("SELECT name FROM accounts WHERE id = 3", connection) == [{'name': 'Carol'}]

    def test_failure_is_reported_not_raised(self, connection, caplog):
        result = execute_update("INSERT INTO missing_table VALUES (1)", connection)
        assert not result
        assert result.success is False
        assert result.error is not None
        assert "missing_table" in result.message
        assert "update failed" in caplog.text
        # Connection is still usable
        assert read_rows("SELECT COUNT(*) AS n FROM accounts", connection) == [{'n': 2}]

    def test_missing_inputs(self, connection):
        result = execute_update(None, connection)
        assert not result
        assert result.error is None
        assert not execute_update("DELETE FROM accounts", None)

    def test_failing_rollback_still_returns(self):
        conn = MagicMock()
        conn.exec_driver_sql.side_effect = RuntimeError("boom")
        conn.rollback.side_effect = RuntimeError("also boom")

        result = execute_update("DELETE FROM x", conn)

        assert not result
        assert isinstance(result.error, RuntimeError)
        conn.commit.assert_not_called()
