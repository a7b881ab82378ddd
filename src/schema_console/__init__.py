"""
schema_console - Interactive schema explorer for PostgreSQL

Reflects tables, columns and constraints of a live database, then lets an
operator narrow down table -> column -> predicate and run the resulting query.
"""

__version__ = "1.0.0"

from .core import CatalogReflector, DatabaseConnection, QueryExecutor, SessionController
from .models import (
    Column,
    DatabaseConfig,
    QueryResult,
    Relation,
    RelationKind,
    SchemaCatalog,
    TableDefinition,
)

__all__ = [
    "DatabaseConfig",
    "DatabaseConnection",
    "CatalogReflector",
    "QueryExecutor",
    "SessionController",
    "SchemaCatalog",
    "TableDefinition",
    "Column",
    "Relation",
    "RelationKind",
    "QueryResult",
]
