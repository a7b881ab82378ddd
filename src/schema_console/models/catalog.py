"""In-memory schema catalog."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Optional

from schema_console.errors import CatalogFrozenError
from schema_console.models.table import TableDefinition


class SchemaCatalog(Mapping[str, TableDefinition]):
    """Table definitions keyed by name.

    The catalog is append-only while it is being built and read-only once
    ``freeze()`` has been called. Iteration follows insertion order, which is
    the order in which tables were listed by the reflector.
    """

    def __init__(self) -> None:
        self._tables: dict[str, TableDefinition] = {}
        self._frozen = False

    def add(self, table: TableDefinition) -> None:
        """Append a table definition.

        Raises:
            CatalogFrozenError: If the catalog has been frozen
            ValueError: If a table with the same name was already added
        """
        if self._frozen:
            raise CatalogFrozenError(
                f"Cannot add table '{table.name}' to a frozen catalog"
            )
        if table.name in self._tables:
            raise ValueError(f"Table '{table.name}' is already in the catalog")
        self._tables[table.name] = table

    def freeze(self) -> "SchemaCatalog":
        """Make the catalog read-only and return it."""
        if not self._frozen:
            self._tables = MappingProxyType(self._tables)  # type: ignore[assignment]
            self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, name: str) -> Optional[TableDefinition]:
        """Return the table definition for ``name``, or None if absent."""
        return self._tables.get(name)

    @property
    def table_names(self) -> list[str]:
        return list(self._tables)

    def __getitem__(self, name: str) -> TableDefinition:
        return self._tables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "building"
        return f"SchemaCatalog({len(self)} tables, {state})"
