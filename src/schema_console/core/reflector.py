"""Schema reflection from the PostgreSQL system catalog."""

import asyncio
import logging
from typing import Any

from schema_console.core.connection import DatabaseConnection
from schema_console.models.catalog import SchemaCatalog
from schema_console.models.table import (
    Column,
    Relation,
    RelationKind,
    TableDefinition,
)

logger = logging.getLogger(__name__)

LIST_TABLES_QUERY = """
    SELECT c.relname AS table_name
    FROM pg_catalog.pg_class c
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    WHERE c.relkind = 'r'
      AND n.nspname = :schema_name
    ORDER BY c.relname
"""

# Primary key membership is a structural match of attnum against conkey
TABLE_COLUMNS_QUERY = """
    SELECT
        a.attname AS name,
        pg_catalog.format_type(a.atttypid, a.atttypmod) AS type,
        CASE WHEN a.atthasdef THEN (
            SELECT pg_catalog.pg_get_expr(d.adbin, d.adrelid, true)
            FROM pg_catalog.pg_attrdef d
            WHERE d.adrelid = a.attrelid
              AND d.adnum = a.attnum
        ) END AS "default",
        NOT a.attnotnull AS nullable,
        EXISTS (
            SELECT 1
            FROM pg_catalog.pg_constraint pgc
            WHERE pgc.conrelid = a.attrelid
              AND pgc.contype = 'p'
              AND a.attnum = ANY (pgc.conkey)
        ) AS "primary"
    FROM pg_catalog.pg_class c
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    JOIN pg_catalog.pg_attribute a ON a.attrelid = c.oid
    WHERE c.relname = :table_name
      AND n.nspname = :schema_name
      AND a.attnum > 0
      AND NOT a.attisdropped
    ORDER BY a.attnum
"""

# Only the leading key column of each constraint is reported
TABLE_RELATIONS_QUERY = """
    SELECT
        o.contype AS kind,
        m.relname AS source_table,
        (
            SELECT a.attname
            FROM pg_catalog.pg_attribute a
            WHERE a.attrelid = m.oid
              AND a.attnum = o.conkey[1]
              AND NOT a.attisdropped
        ) AS source_column,
        f.relname AS target_table,
        (
            SELECT a.attname
            FROM pg_catalog.pg_attribute a
            WHERE a.attrelid = f.oid
              AND a.attnum = o.confkey[1]
              AND NOT a.attisdropped
        ) AS target_column
    FROM pg_catalog.pg_constraint o
    JOIN pg_catalog.pg_class m ON m.oid = o.conrelid
    JOIN pg_catalog.pg_namespace n ON n.oid = m.relnamespace
    LEFT JOIN pg_catalog.pg_class f ON f.oid = o.confrelid
    WHERE o.contype IN ('f', 'u')
      AND m.relkind = 'r'
      AND m.relname = :table_name
      AND n.nspname = :schema_name
    ORDER BY o.conname
"""


class CatalogReflector:
    """Reads tables, columns and relations out of the system catalog."""

    def __init__(self, connection: DatabaseConnection, schema: str = "public"):
        """
        Initialize catalog reflector.

        Args:
            connection: Open database connection
            schema: Schema (namespace) whose base tables are reflected
        """
        self.connection = connection
        self.schema = schema

    async def list_tables(self) -> list[str]:
        """
        List base tables in the schema.

        Returns:
            Table names
        """
        rows = await self.connection.execute(
            LIST_TABLES_QUERY, {"schema_name": self.schema}
        )
        return [row["table_name"] for row in rows]

    async def columns_of(self, table: str) -> list[Column]:
        """
        Get the columns of a table in attribute order.

        Args:
            table: Table name (sent as a bound parameter)

        Returns:
            Columns ordered by attnum
        """
        rows = await self.connection.execute(
            TABLE_COLUMNS_QUERY, {"table_name": table, "schema_name": self.schema}
        )
        return [self._column_from_row(row) for row in rows]

    async def relations_of(self, table: str) -> set[Relation]:
        """
        Get the foreign-key and unique constraints owned by a table.

        Args:
            table: Table name (sent as a bound parameter)

        Returns:
            One relation per constraint
        """
        rows = await self.connection.execute(
            TABLE_RELATIONS_QUERY, {"table_name": table, "schema_name": self.schema}
        )
        return {self._relation_from_row(row) for row in rows}

    async def describe_table(self, table: str) -> TableDefinition:
        """Fetch columns and relations of one table concurrently."""
        columns, relations = await asyncio.gather(
            self.columns_of(table), self.relations_of(table)
        )
        return TableDefinition(
            name=table, columns=tuple(columns), relations=frozenset(relations)
        )

    def _column_from_row(self, row: dict[str, Any]) -> Column:
        """Convert a catalog row to Column."""
        return Column(
            name=row["name"],
            type=row["type"],
            default=row["default"],
            nullable=bool(row["nullable"]),
            primary=bool(row["primary"]),
        )

    def _relation_from_row(self, row: dict[str, Any]) -> Relation:
        """Convert a pg_constraint row to Relation."""
        return Relation(
            kind=RelationKind(row["kind"]),
            source_table=row["source_table"],
            source_column=row["source_column"],
            target_table=row["target_table"],
            target_column=row["target_column"],
        )


async def build_catalog(reflector: CatalogReflector) -> SchemaCatalog:
    """
    Reflect every listed table into a frozen catalog.

    Tables are fetched one after another; for each table the column and
    relation queries run concurrently. Any failure propagates and no catalog
    is returned.

    Args:
        reflector: Catalog reflector bound to an open connection

    Returns:
        Frozen schema catalog, in listing order
    """
    catalog = SchemaCatalog()
    tables = await reflector.list_tables()
    logger.info(f"Reflecting {len(tables)} tables from schema '{reflector.schema}'")

    for table in tables:
        definition = await reflector.describe_table(table)
        logger.debug(
            f"Reflected {table}: {len(definition.columns)} columns, "
            f"{len(definition.relations)} relations"
        )
        catalog.add(definition)

    return catalog.freeze()
