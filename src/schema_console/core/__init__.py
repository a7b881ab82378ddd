"""Core database and session layer."""

from .cancellation import CancellationScope
from .connection import DatabaseConnection
from .executor import QueryExecutor
from .reflector import CatalogReflector, build_catalog
from .session import (
    IterationOutcome,
    Prompter,
    SessionController,
    SessionState,
    Suggestion,
)

__all__ = [
    "DatabaseConnection",
    "CatalogReflector",
    "build_catalog",
    "QueryExecutor",
    "CancellationScope",
    "SessionController",
    "SessionState",
    "IterationOutcome",
    "Prompter",
    "Suggestion",
]
