"""Query result model."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class QueryResult(BaseModel):
    """Outcome of one ad-hoc query, successful or not."""

    query: str = Field(..., description="SQL text that was sent")
    rows: list[dict[str, Any]] = Field(
        default_factory=list, description="Result rows as column -> value mappings"
    )
    columns: list[str] = Field(default_factory=list, description="Result column names")
    row_count: int = Field(default=0, ge=0, description="Number of rows returned")
    execution_time_ms: Optional[float] = Field(
        None, description="Wall-clock execution time in milliseconds"
    )
    error: Optional[str] = Field(None, description="Error message if the query failed")

    @property
    def succeeded(self) -> bool:
        return self.error is None
