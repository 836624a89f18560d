"""Search orchestrator: query -> listing -> geocode fallback -> merged results."""
from __future__ import annotations

import enum
import logging
from typing import Callable, List, Optional

from ..backend.base import LeadBackend
from ..errors import SearchError
from ..geocoding import BatchGeocoder, geocode_requests_for
from ..history import SearchHistory
from ..merge import merge_coordinates
from ..models import BusinessRecord, Coordinates
from ..parsing import parse_leads
from .results import ResultSet

LOGGER = logging.getLogger(__name__)

RESULTS_PER_PAGE = 10
PLACEHOLDER_TEXT = "Get your next client."


class SearchState(str, enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RECONCILING = "reconciling"


StateCallback = Callable[[SearchState], None]


def fetch_leads(
    backend: LeadBackend, query: str, location: Optional[Coordinates] = None
) -> List[BusinessRecord]:
    """Ask the backend for businesses matching ``query`` and parse the listing."""

    try:
        markdown = backend.find_businesses(query, location)
    except Exception as exc:
        LOGGER.exception("Lead search failed for %r", query)
        raise SearchError(query) from exc
    return parse_leads(markdown)


class SearchOrchestrator:
    """Drives one search lifecycle and owns the resulting record set.

    Besides the search itself the orchestrator tracks the presentation state
    that a search resets: the selected record and the pagination window.
    """

    def __init__(
        self,
        backend: LeadBackend,
        *,
        history: Optional[SearchHistory] = None,
        geocoder: Optional[BatchGeocoder] = None,
        results: Optional[ResultSet] = None,
        location: Optional[Coordinates] = None,
        page_size: int = RESULTS_PER_PAGE,
        placeholder: str = PLACEHOLDER_TEXT,
        state_callback: Optional[StateCallback] = None,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._backend = backend
        self._geocoder = geocoder or BatchGeocoder(backend)
        self._history = history
        self._state_callback = state_callback
        self.results = results if results is not None else ResultSet()
        self.location = location
        self.page_size = page_size
        self.placeholder = placeholder
        self.state = SearchState.IDLE
        self.error: Optional[str] = None
        self.selected_id: Optional[str] = None
        self.visible_count = page_size

    @property
    def history(self) -> Optional[SearchHistory]:
        return self._history

    # ------------------------------------------------------------------
    # Search lifecycle
    # ------------------------------------------------------------------
    def search(self, query: Optional[str]) -> List[BusinessRecord]:
        """Run a complete search and return the merged results.

        Blank input and the placeholder text are ignored without touching any
        state. Backend failures leave an empty result set and set :attr:`error`.
        """

        text = (query or "").strip()
        if not text or text == self.placeholder:
            LOGGER.debug("Ignoring empty search query")
            return []

        self._set_state(SearchState.SEARCHING)
        self.results.clear()
        self.selected_id = None
        self.visible_count = self.page_size
        self.error = None

        try:
            initial_results = fetch_leads(self._backend, text, self.location)
        except SearchError as exc:
            self.error = str(exc)
            self._set_state(SearchState.IDLE)
            return []

        self._set_state(SearchState.RECONCILING)
        pending = geocode_requests_for(initial_results)
        if pending:
            LOGGER.info("Geocoding %s of %s results without coordinates", len(pending), len(initial_results))
            final_results = merge_coordinates(initial_results, self._geocoder.geocode_batch(pending))
        else:
            final_results = initial_results

        self.results.replace(final_results)
        if self._history is not None:
            self._history.record(text, len(initial_results))
        LOGGER.info("Search for %r returned %s results", text, len(initial_results))
        self._set_state(SearchState.IDLE)
        return list(final_results)

    def rerun(self, query: str) -> List[BusinessRecord]:
        """Repeat a search taken from the history log."""

        return self.search(query)

    # ------------------------------------------------------------------
    # Selection and pagination
    # ------------------------------------------------------------------
    def select(self, record_id: Optional[str]) -> Optional[str]:
        """Toggle the selection and widen the visible window to include the record."""

        if record_id is None or record_id == self.selected_id:
            self.selected_id = None
            return None

        index = self.results.index_of(record_id)
        if index < 0:
            LOGGER.debug("Ignoring selection of unknown record %s", record_id)
            return self.selected_id

        self.selected_id = record_id
        if index >= self.visible_count:
            self.visible_count = index + 1
        return record_id

    def load_more(self) -> int:
        self.visible_count += self.page_size
        return self.visible_count

    def visible_results(self) -> List[BusinessRecord]:
        return self.results.snapshot()[: self.visible_count]

    def has_more(self) -> bool:
        return self.visible_count < len(self.results)

    # ------------------------------------------------------------------
    def _set_state(self, state: SearchState) -> None:
        self.state = state
        if self._state_callback:
            self._state_callback(state)
