"""Casing-tolerant field access for upstream JSON records."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(name: str) -> str:
    """Convert a camelCase name to snake_case."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def to_pascal(name: str) -> str:
    """Convert a camelCase name to PascalCase."""
    return name[:1].upper() + name[1:]


def pick(record: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    """Return the first non-null value among names.

    Each name is given in camelCase and is tried as camelCase, then
    snake_case, then PascalCase, then all-lowercase before moving on to the
    next name.
    """
    for name in names:
        for key in (name, to_snake(name), to_pascal(name), name.lower()):
            value = record.get(key)
            if value is not None:
                return value
    return default


def unwrap_items(payload: Any) -> list[Any]:
    """Accept a bare list or an ``{"items": [...]}`` envelope."""
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        items = pick(payload, "items")
        if isinstance(items, list):
            return items
    return []


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO 8601 value into an aware datetime, None when unparsable.

    Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def as_number(value: Any, default: float = 0.0) -> float:
    """Coerce to float, returning default for missing or non-numeric values."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def as_int(value: Any, default: int = 0) -> int:
    """Coerce to int, returning default for missing or non-numeric values."""
    return int(as_number(value, float(default)))


def as_bool(value: Any) -> bool:
    """Interpret JSON-ish truthy values ("true", 1, True)."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def as_ident(value: Any) -> str | None:
    """Normalize an identifier to a string; None stays None."""
    if value is None or value == "":
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def as_text(value: Any) -> str | None:
    """Stringify a value, None stays None."""
    if value is None:
        return None
    return str(value)
