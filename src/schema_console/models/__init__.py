"""Pydantic models for configuration, schema metadata and results."""

from .catalog import SchemaCatalog
from .config import DatabaseConfig
from .query import QueryResult
from .table import Column, Relation, RelationKind, TableDefinition

__all__ = [
    "DatabaseConfig",
    "SchemaCatalog",
    "TableDefinition",
    "Column",
    "Relation",
    "RelationKind",
    "QueryResult",
]
