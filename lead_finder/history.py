"""Persistent, bounded log of completed searches."""
from __future__ import annotations

import json
import logging
import time
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .models import SearchHistoryEntry

LOGGER = logging.getLogger(__name__)

HISTORY_KEY = "leadFinderHistory"
MAX_HISTORY_ENTRIES = 20


class JsonHistoryStore:
    """Key-value JSON file holding the serialised history log under one fixed key."""

    def __init__(self, path: str | Path, key: str = HISTORY_KEY) -> None:
        self.path = Path(path).expanduser()
        self.key = key

    def load(self) -> List[Dict[str, Any]]:
        """Return the stored entries, or an empty list when nothing usable is stored."""

        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            LOGGER.warning("Could not read search history from %s; starting empty", self.path, exc_info=True)
            return []

        entries = data.get(self.key) if isinstance(data, dict) else None
        if not isinstance(entries, list):
            LOGGER.warning("Search history in %s has an unexpected shape; starting empty", self.path)
            return []
        return entries

    def save(self, entries: List[Dict[str, Any]]) -> None:
        data: Dict[str, Any] = {}
        if self.path.exists():
            try:
                existing = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                existing = None
            if isinstance(existing, dict):
                data = existing
        data[self.key] = entries
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


class SearchHistory:
    """Most-recent-first search log, de-duplicated by exact query text."""

    def __init__(
        self,
        store: Optional[JsonHistoryStore] = None,
        *,
        max_entries: int = MAX_HISTORY_ENTRIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._max_entries = max_entries
        self._clock = clock
        self._entries: List[SearchHistoryEntry] = self._load()

    @property
    def entries(self) -> List[SearchHistoryEntry]:
        return list(self._entries)

    def find(self, query: str) -> Optional[SearchHistoryEntry]:
        for entry in self._entries:
            if entry.query == query:
                return entry
        return None

    def record(self, query: str, result_count: int) -> SearchHistoryEntry:
        """Prepend a completed search, replacing any earlier entry for the same query."""

        entry = SearchHistoryEntry(
            id=uuid.uuid4().hex,
            query=query,
            timestamp=self._clock(),
            result_count=result_count,
        )
        remaining = [existing for existing in self._entries if existing.query != query]
        self._entries = [entry, *remaining][: self._max_entries]
        self._persist()
        return entry

    def clear(self) -> None:
        self._entries = []
        self._persist()

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    def _load(self) -> List[SearchHistoryEntry]:
        if self._store is None:
            return []
        entries: List[SearchHistoryEntry] = []
        for item in self._store.load():
            try:
                entries.append(SearchHistoryEntry.from_dict(item))
            except ValueError:
                LOGGER.warning("Skipping malformed search history entry %r", item)
        return entries[: self._max_entries]

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            self._store.save([entry.as_dict() for entry in self._entries])
        except OSError:
            LOGGER.warning("Could not save search history to %s", self._store.path, exc_info=True)


__all__ = ["HISTORY_KEY", "MAX_HISTORY_ENTRIES", "JsonHistoryStore", "SearchHistory"]
