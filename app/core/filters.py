"""
Client-side search and filtering over fetched collections
"""

from typing import Any, Iterable, Optional, Sequence

from app.core.fields import field_value

ALL = "All"
ALL_STATUSES = "All Statuses"

def _matches(item: Any, needle: str, fields: Sequence[str]) -> bool:
    for name in fields:
        value = field_value(item, name)
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False

def search(items: Iterable[Any], query: Optional[str], fields: Sequence[str]) -> list:
    """Keep items where any of the named fields contains the query, ignoring case.

    A blank query keeps everything.
    """
    items = list(items)
    if not query or not query.strip():
        return items
    needle = query.lower()
    return [item for item in items if _matches(item, needle, fields)]

def filter_exact(items: Iterable[Any], field: str, selector: Any, all_value: Any = ALL) -> list:
    """Keep items whose field equals the selector; the "all" sentinel keeps everything"""
    items = list(items)
    if selector is None or selector == all_value:
        return items
    return [item for item in items if field_value(item, field) == selector]

def apply_filters(
    items: Iterable[Any],
    query: Optional[str],
    fields: Sequence[str],
    field: Optional[str] = None,
    selector: Any = ALL,
    all_value: Any = ALL,
) -> list:
    """Search and exact filter combined with AND"""
    result = search(items, query, fields)
    if field is not None:
        result = filter_exact(result, field, selector, all_value)
    return result
