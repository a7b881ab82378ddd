"""Ad-hoc filtered query execution."""

import logging
import time

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from schema_console.core.connection import DatabaseConnection
from schema_console.models.query import QueryResult

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Builds and runs ``SELECT * FROM <table> WHERE "<column>" <predicate>``.

    Table and column names come from the reflected catalog. The predicate is
    operator-supplied SQL and is sent verbatim, without escaping.
    """

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize query executor.

        Args:
            connection: Open database connection
        """
        self.connection = connection

    def build_query(self, table: str, column: str, predicate: str) -> str:
        """Assemble the filtered SELECT statement."""
        return f'SELECT * FROM {table} WHERE "{column}" {predicate}'

    async def execute(self, table: str, column: str, predicate: str) -> QueryResult:
        """
        Execute the filtered query.

        Database errors are reported in the result instead of raised.

        Args:
            table: Catalog table name
            column: Column of ``table``
            predicate: SQL fragment appended after the column reference

        Returns:
            Query result with rows, or with ``error`` set
        """
        query = self.build_query(table, column, predicate)
        start_time = time.time()

        try:
            rows = await self.connection.execute(query)
        except SQLAlchemyError as e:
            message = self._error_message(e)
            logger.warning(f"Query failed: {message}")
            return QueryResult(
                query=query,
                execution_time_ms=(time.time() - start_time) * 1000,
                error=message,
            )

        execution_time = (time.time() - start_time) * 1000  # Convert to ms
        columns = list(rows[0].keys()) if rows else []
        logger.debug(f"{len(rows)} rows in {execution_time:.1f} ms")

        return QueryResult(
            query=query,
            rows=rows,
            columns=columns,
            row_count=len(rows),
            execution_time_ms=execution_time,
        )

    def _error_message(self, error: SQLAlchemyError) -> str:
        """Prefer the driver's own message over SQLAlchemy's wrapper text."""
        if isinstance(error, DBAPIError) and error.orig is not None:
            return str(error.orig).strip()
        return str(error).strip()
