"""Single live database connection with SQLAlchemy."""

import asyncio
import logging
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from schema_console.errors import ConnectionNotOpenError
from schema_console.models.config import DatabaseConfig

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Owns the one connection the console reads through.

    The connection runs in autocommit mode, so each statement stands alone and
    a failed query never leaves an aborted transaction behind. Statements are
    serialized: asyncpg cannot run two statements on one connection at once,
    and reflection issues column and relation queries concurrently.
    """

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database connection.

        Args:
            config: Database configuration
        """
        self.config = config
        self.engine: Optional[AsyncEngine] = None
        self._conn: Optional[AsyncConnection] = None
        self._lock = asyncio.Lock()
        self._closed = False

    async def open(self) -> None:
        """Create the engine and open the connection."""
        if self._conn is not None:
            return  # Already open
        if self._closed:
            raise ConnectionNotOpenError("Connection has already been closed")

        # NullPool: the console holds exactly one connection, never pooled
        self.engine = create_async_engine(
            self.config.url,
            poolclass=NullPool,
            echo=self.config.echo_sql,
        )
        conn = await self.engine.connect()
        self._conn = await conn.execution_options(isolation_level="AUTOCOMMIT")

        if self.config.read_only:
            await self._set_readonly(self._conn)
        await self._set_search_path(self._conn)

        logger.info(f"Connected to {self.config.safe_url}")

    async def _set_readonly(self, conn: AsyncConnection) -> None:
        await conn.exec_driver_sql(
            "SET SESSION CHARACTERISTICS AS TRANSACTION READ ONLY"
        )

    async def _set_search_path(self, conn: AsyncConnection) -> None:
        """Resolve unqualified table names in the configured schema."""
        schema = self.config.schema_name.replace('"', '""')
        await conn.execute(
            text("SELECT set_config('search_path', :schema, false)"),
            {"schema": f'"{schema}"'},
        )

    async def execute(
        self, sql: str, params: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        """
        Execute one statement and return its rows.

        Args:
            sql: SQL text. With ``params`` it may use ``:name`` bind markers;
                without, it is sent to the driver exactly as given.
            params: Bound parameter values

        Returns:
            Rows as column -> value dicts (empty if the statement returns none)

        Raises:
            ConnectionNotOpenError: If the connection is not open
            sqlalchemy.exc.SQLAlchemyError: If the statement fails
        """
        async with self._lock:
            conn = self._require_open()
            if params is None:
                result = await conn.exec_driver_sql(sql)
            else:
                result = await conn.execute(text(sql), params)

            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings().all()]

    def _require_open(self) -> AsyncConnection:
        if self._conn is None:
            raise ConnectionNotOpenError(
                "DatabaseConnection is not open. Call open() first."
            )
        return self._conn

    async def close(self) -> None:
        """Close the connection and dispose of the engine. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        if self._conn is not None:
            await self._conn.close()
            self._conn = None
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
        logger.info("Database connection closed")

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def __aenter__(self) -> "DatabaseConnection":
        """Async context manager entry."""
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
