"""Result presentation helpers."""

from schema_console.utils.serialization import (
    convert_value_to_json_safe,
    format_cell,
)
from schema_console.utils.table_format import render_result, render_rows

__all__ = [
    "convert_value_to_json_safe",
    "format_cell",
    "render_rows",
    "render_result",
]
