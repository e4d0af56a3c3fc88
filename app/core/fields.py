"""
Field access helpers shared by the derivation functions
Records may be pydantic models, plain objects or mappings
"""

from collections.abc import Mapping
from typing import Any, Optional

def field_value(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an object without raising"""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)

def coerce_id(value: Any) -> Optional[int]:
    """Normalize an identifier to int; numeric strings are accepted, anything else is None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if value.lstrip("-").isdigit():
            return int(value)
    return None

def number(value: Any) -> float:
    """Absent or non-numeric amounts count as 0"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value
