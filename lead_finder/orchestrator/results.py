"""Owner of the current search result set."""
from __future__ import annotations

import threading
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from ..models import BusinessRecord


class ResultSet:
    """Ordered, id-indexed collection of business records.

    All writes go through :meth:`replace`, :meth:`clear` and :meth:`update`, so the
    orchestrators remain the only writers while GUI threads read snapshots.
    """

    def __init__(self, records: Iterable[BusinessRecord] = ()) -> None:
        self._lock = threading.RLock()
        self._records: List[BusinessRecord] = []
        self._positions: Dict[str, int] = {}
        self.replace(records)

    def replace(self, records: Iterable[BusinessRecord]) -> None:
        new_records = list(records)
        positions: Dict[str, int] = {}
        for index, record in enumerate(new_records):
            if record.id in positions:
                raise ValueError(f"Duplicate record id '{record.id}' in result set")
            positions[record.id] = index
        with self._lock:
            self._records = new_records
            self._positions = positions

    def clear(self) -> None:
        self.replace(())

    def snapshot(self) -> List[BusinessRecord]:
        with self._lock:
            return list(self._records)

    def get(self, record_id: str) -> Optional[BusinessRecord]:
        with self._lock:
            position = self._positions.get(record_id)
            return self._records[position] if position is not None else None

    def index_of(self, record_id: str) -> int:
        with self._lock:
            return self._positions.get(record_id, -1)

    def update(
        self, record_id: str, change: Callable[[BusinessRecord], BusinessRecord]
    ) -> BusinessRecord:
        """Replace the record stored under ``record_id`` with ``change(record)``."""

        with self._lock:
            position = self._positions.get(record_id)
            if position is None:
                raise KeyError(record_id)
            updated = change(self._records[position])
            if updated.id != record_id:
                raise ValueError("Record updates must not change the record id")
            self._records[position] = updated
            return updated

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[BusinessRecord]:
        return iter(self.snapshot())
