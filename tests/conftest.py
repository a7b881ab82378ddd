"""Pytest configuration and shared fixtures for schema-console tests"""

import os
from typing import AsyncGenerator, Optional

import pytest
from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url

from schema_console.core import DatabaseConnection
from schema_console.models import (
    Column,
    DatabaseConfig,
    Relation,
    RelationKind,
    SchemaCatalog,
    TableDefinition,
)

# Load environment variables
load_dotenv()


# ==================== Catalog Fixtures ====================


@pytest.fixture
def users_table() -> TableDefinition:
    return TableDefinition(
        name="users",
        columns=(
            Column(
                name="id",
                type="integer",
                default="nextval('users_id_seq'::regclass)",
                nullable=False,
                primary=True,
            ),
            Column(name="name", type="text", nullable=True),
            Column(name="email", type="character varying(255)", nullable=False),
        ),
        relations=frozenset(
            {
                Relation(
                    kind=RelationKind.UNIQUE,
                    source_table="users",
                    source_column="email",
                )
            }
        ),
    )


@pytest.fixture
def orders_table() -> TableDefinition:
    return TableDefinition(
        name="orders",
        columns=(
            Column(name="id", type="integer", nullable=False, primary=True),
            Column(name="user_id", type="integer", nullable=False),
            Column(name="total", type="numeric(10,2)", default="0", nullable=False),
        ),
        relations=frozenset(
            {
                Relation(
                    kind=RelationKind.FOREIGN,
                    source_table="orders",
                    source_column="user_id",
                    target_table="users",
                    target_column="id",
                )
            }
        ),
    )


@pytest.fixture
def catalog(
    users_table: TableDefinition, orders_table: TableDefinition
) -> SchemaCatalog:
    catalog = SchemaCatalog()
    catalog.add(users_table)
    catalog.add(orders_table)
    return catalog.freeze()


@pytest.fixture
def echoed() -> list[str]:
    """Collects session output lines"""
    return []


# ==================== PostgreSQL Fixtures ====================


@pytest.fixture(scope="session")
def pg_database_url() -> Optional[str]:
    """PostgreSQL test database URL from environment"""
    return os.getenv("PG_TEST_DATABASE_URL")


@pytest.fixture
async def pg_config(pg_database_url: Optional[str]) -> DatabaseConfig:
    """PostgreSQL database configuration"""
    if not pg_database_url:
        pytest.skip("PG_TEST_DATABASE_URL not set in environment")
    url = make_url(pg_database_url)
    return DatabaseConfig(
        host=url.host or "localhost",
        port=url.port or 5432,
        user=url.username or "postgres",
        password=url.password or "",
        database=url.database or "postgres",
    )


@pytest.fixture
async def pg_connection(
    pg_config: DatabaseConfig,
) -> AsyncGenerator[DatabaseConnection, None]:
    """PostgreSQL database connection with proper cleanup"""
    connection = DatabaseConnection(pg_config)
    await connection.open()
    try:
        yield connection
    finally:
        await connection.close()


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "postgresql: PostgreSQL-specific tests")
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring database"
    )
