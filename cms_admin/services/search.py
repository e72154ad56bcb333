from __future__ import annotations

from typing import Any, Sequence


def record_matches(record: Any, needle: str) -> bool:
    """
    needle must already be lower-cased. Only str values are searched; numbers,
    lists and nested objects never match.
    """
    if not isinstance(record, dict):
        return False
    return any(isinstance(v, str) and needle in v.lower() for v in record.values())


def filter_records(records: Sequence[dict[str, Any]], query: str | None) -> Sequence[dict[str, Any]]:
    """
    Case-insensitive substring search over every string value of each record.
    A blank query returns the input unchanged; otherwise order is preserved.
    """
    if query is None or not query.strip():
        return records
    needle = query.lower()
    return [r for r in records if record_matches(r, needle)]
