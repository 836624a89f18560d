"""Utility helpers for merging backend output into the current result set."""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Tuple

from .models import BusinessRecord, Coordinates


def _normalise_contact(kind: str, value: str) -> str:
    value = value.strip()
    if kind == "email":
        return value.lower()
    if kind == "phone":
        digits = [c for c in value if c.isdigit()]
        return "".join(digits) or value
    return value.rstrip("/").lower()


def unique_values(values: Iterable[Any], kind: str) -> Tuple[str, ...]:
    """Return non-empty string values with duplicates removed, keeping first-seen order."""

    seen: set[str] = set()
    ordered: List[str] = []
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        if not text:
            continue
        key = _normalise_contact(kind, text)
        if key in seen:
            continue
        seen.add(key)
        ordered.append(text)
    return tuple(ordered)


def merge_coordinates(
    records: Iterable[BusinessRecord], resolved: Mapping[str, Coordinates]
) -> List[BusinessRecord]:
    """Attach resolved coordinates to the matching records by id.

    Records whose id is absent from ``resolved`` are returned unchanged.
    """

    merged: List[BusinessRecord] = []
    for record in records:
        coordinates = resolved.get(record.id)
        if coordinates is None:
            merged.append(record)
        else:
            merged.append(record.with_coordinates(coordinates))
    return merged
