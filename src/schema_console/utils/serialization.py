"""Display conversion for result cells using orjson.

orjson renders most driver types the way an operator expects to read them:
- datetime, date, time → ISO format
- UUID → string
- dict/list (json, jsonb, arrays) → compact JSON

The handler below covers the asyncpg types orjson does not know about.
"""

import base64
import datetime
import decimal
import ipaddress
import math
from typing import Any

import orjson
from asyncpg import Range


def _default_handler(obj: Any) -> Any:
    """
    Custom default handler for types orjson doesn't handle natively.

    Raises:
        TypeError: If object cannot be serialized
    """
    # numeric
    if isinstance(obj, decimal.Decimal):
        return str(obj)

    # interval
    if isinstance(obj, datetime.timedelta):
        return str(obj)

    # bytea - try UTF-8 decode, fall back to base64
    if isinstance(obj, (bytes, bytearray, memoryview)):
        data = bytes(obj)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(data).decode("ascii")

    if isinstance(obj, (set, frozenset)):
        return list(obj)

    # inet, cidr
    if isinstance(
        obj,
        (
            ipaddress.IPv4Address,
            ipaddress.IPv6Address,
            ipaddress.IPv4Network,
            ipaddress.IPv6Network,
            ipaddress.IPv4Interface,
            ipaddress.IPv6Interface,
        ),
    ):
        return str(obj)

    if isinstance(obj, Range):
        return _format_range(obj)

    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def _format_range(value: Range) -> str:
    if value.isempty:
        return "empty"
    lower = "" if value.lower_inf else str(value.lower)
    upper = "" if value.upper_inf else str(value.upper)
    left = "[" if value.lower_inc else "("
    right = "]" if value.upper_inc else ")"
    return f"{left}{lower},{upper}{right}"


def _format_non_finite(value: float) -> str:
    # orjson writes these as null; use the PostgreSQL spelling instead
    if math.isnan(value):
        return "NaN"
    return "Infinity" if value > 0 else "-Infinity"


def convert_value_to_json_safe(value: Any) -> Any:
    """
    Convert a value to JSON-serializable format.

    Uses orjson's serialization and decodes back to Python objects.
    """
    try:
        json_bytes = orjson.dumps(value, default=_default_handler)
        return orjson.loads(json_bytes)
    except TypeError:
        # If orjson can't handle it, convert to string as fallback
        return str(value)


def format_cell(value: Any) -> str:
    """
    Render one result value as display text.

    Args:
        value: Value as returned by the driver

    Returns:
        ``NULL`` for None, strings unchanged, everything else via orjson
    """
    if value is None:
        return "NULL"
    if isinstance(value, str):
        return value
    if isinstance(value, float) and not math.isfinite(value):
        return _format_non_finite(value)

    safe = convert_value_to_json_safe(value)
    if isinstance(safe, str):
        return safe
    return orjson.dumps(safe).decode("utf-8")
