"""Column, relation and table definition models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Column(BaseModel):
    """A table column as reflected from the system catalog."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Column name")
    type: str = Field(..., description="Database-reported type (format_type)")
    default: Optional[str] = Field(
        None, description="Default value expression, None when there is no default"
    )
    nullable: bool = Field(..., description="Whether column allows NULL")
    primary: bool = Field(
        default=False, description="Whether column is part of primary key"
    )


class RelationKind(str, Enum):
    """Constraint category, using the pg_constraint.contype codes."""

    FOREIGN = "f"
    UNIQUE = "u"


class Relation(BaseModel):
    """One foreign-key or unique constraint edge owned by a table.

    Multi-column constraints are represented by their leading column only.
    """

    model_config = ConfigDict(frozen=True)

    kind: RelationKind = Field(..., description="Constraint category")
    source_table: str = Field(..., description="Owning table name")
    source_column: str = Field(..., description="Leading constrained column")
    target_table: Optional[str] = Field(
        None, description="Referenced table (foreign keys only)"
    )
    target_column: Optional[str] = Field(
        None, description="Leading referenced column (foreign keys only)"
    )


class TableDefinition(BaseModel):
    """A reflected table: ordered columns plus the constraints it owns."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Table name")
    columns: tuple[Column, ...] = Field(
        default=(), description="Columns in physical attribute order"
    )
    relations: frozenset[Relation] = Field(
        default_factory=frozenset, description="Constraints with this table as source"
    )

    @model_validator(mode="after")
    def check_consistency(self) -> "TableDefinition":
        """Reject duplicate column names and foreign-owned relations."""
        seen: set[str] = set()
        for column in self.columns:
            if column.name in seen:
                raise ValueError(
                    f"Duplicate column '{column.name}' in table '{self.name}'"
                )
            seen.add(column.name)

        for relation in self.relations:
            if relation.source_table != self.name:
                raise ValueError(
                    f"Relation owned by '{relation.source_table}' "
                    f"cannot be attached to table '{self.name}'"
                )
        return self

    @property
    def column_names(self) -> list[str]:
        """Column names in attribute order."""
        return [column.name for column in self.columns]

    @property
    def primary_key(self) -> list[str]:
        """Names of the primary key columns."""
        return [column.name for column in self.columns if column.primary]

    def get_column(self, column_name: str) -> Optional[Column]:
        """Get column by name."""
        for column in self.columns:
            if column.name == column_name:
                return column
        return None
