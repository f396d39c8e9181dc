"""
Best-effort resource handling for borrowed database connections.

Nothing here propagates an exception: close failures are logged and
swallowed so they never mask a caller's primary error, and update failures
come back as a failed UpdateResult.

Functions:
    close_statement: Close a DB-API cursor
    close_result: Close a SQLAlchemy result
    close_connection: Close a connection
    execute_update: Execute and commit a statement, reporting success
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateResult:
    """
    Outcome of execute_update. Truthy only on success.

    Attributes:
        success: Whether the statement executed and committed
        error: Exception that caused the failure, if any
        message: Short description of the failure
    """
    success: bool
    error: Optional[BaseException] = None
    message: str = ''

    def __bool__(self):
        return self.success


def _safe_close(resource, label):
    if resource is None:
        return
    try:
        resource.close()
    except Exception as e:
        logger.warning(f"failed to close {label} {resource!r}: {e}", exc_info=True)


def close_statement(statement):
    """Close a DB-API cursor; None and exception safe."""
    _safe_close(statement, 'statement')


def close_result(result):
    """Close a result; None and exception safe."""
    _safe_close(result, 'result')


def close_connection(connection):
    """Close a connection; None and exception safe."""
    _safe_close(connection, 'connection')


def execute_update(sql, connection):
    """
    Execute a statement and commit it.

    Args:
        sql: Statement text, passed to the driver as is
        connection: Open SQLAlchemy Connection (not closed here)

    Returns:
        UpdateResult: success flag plus the cause of any failure

    Examples:
        >>> execute_update("DELETE FROM accounts", conn)
        UpdateResult(success=True, error=None, message='')
    """
    logger.debug(f"sql -> {sql}")
    if sql is None or connection is None:
        return UpdateResult(False, message='no sql or no connection')
    try:
        connection.exec_driver_sql(sql)
        connection.commit()
        return UpdateResult(True)
    except Exception as e:
        logger.error(f"update failed: {sql}: {e}", exc_info=True)
        try:
            connection.rollback()
        except Exception as rollback_error:
            logger.warning(f"rollback after failed update also failed: {rollback_error}")
        return UpdateResult(False, error=e, message=str(e))
