"""Exception types raised by schema-console."""


class SchemaConsoleError(Exception):
    """Base class for schema-console errors."""


class ConnectionNotOpenError(SchemaConsoleError, RuntimeError):
    """Raised when a statement is issued before open() or after close()."""


class CatalogFrozenError(SchemaConsoleError, RuntimeError):
    """Raised when a frozen SchemaCatalog is modified."""


class CatalogInvariantError(SchemaConsoleError, RuntimeError):
    """Raised when a selection no longer resolves against the catalog.

    Selections are only ever offered from the catalog itself, so this indicates
    a defect rather than bad operator input.
    """


class IterationCancelled(SchemaConsoleError):
    """Raised when the cancellation scope of a session iteration is triggered."""

    def __init__(self, reason: str = "user requested"):
        super().__init__(reason)
        self.reason = reason
