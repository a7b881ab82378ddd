"""Plain-text table rendering for query results."""

from typing import Any

from schema_console.models.query import QueryResult
from schema_console.utils.serialization import format_cell

INDEX_HEADER = "(index)"


def _single_line(text: str) -> str:
    return text.replace("\r", "\\r").replace("\n", "\\n")


def render_rows(rows: list[dict[str, Any]], columns: list[str]) -> str:
    """
    Render rows as an aligned text table with a leading index column.

    Args:
        rows: Row mappings
        columns: Column order; keys missing from a row render as empty

    Returns:
        Table text, ending with a row-count footer
    """
    header = [INDEX_HEADER, *columns]
    body = [
        [str(index)]
        + [
            _single_line(format_cell(row[column])) if column in row else ""
            for column in columns
        ]
        for index, row in enumerate(rows)
    ]

    widths = [len(cell) for cell in header]
    for line in body:
        widths = [max(width, len(cell)) for width, cell in zip(widths, line)]

    def format_line(cells: list[str]) -> str:
        return " | ".join(cell.ljust(width) for cell, width in zip(cells, widths))

    lines = [format_line(header), "-+-".join("-" * width for width in widths)]
    lines.extend(format_line(line) for line in body)

    noun = "row" if len(rows) == 1 else "rows"
    lines.append(f"({len(rows)} {noun})")
    return "\n".join(line.rstrip() for line in lines)


def render_result(result: QueryResult) -> str:
    """Render a successful query result."""
    return render_rows(result.rows, result.columns)
