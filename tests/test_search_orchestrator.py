"""Tests for the search lifecycle, selection and pagination."""
from __future__ import annotations

import json

from lead_finder.history import JsonHistoryStore, SearchHistory
from lead_finder.models import Coordinates
from lead_finder.orchestrator import PLACEHOLDER_TEXT, SearchOrchestrator, SearchState

LISTING = """**Acme Plumbing**
- Address: 1 Main St, Springfield
- Coordinates: 39.78, -89.65
---
**Pipe Works**
- Address: 22 Elm Ave, Springfield
---
**Drain Kings**
- Address: 9 Oak Rd, Springfield
---
"""


class DummyBackend:
    name = "dummy"

    def __init__(self, listing: str = LISTING, geocode: dict | None = None) -> None:
        self.listing = listing
        self.geocode = geocode or {}
        self.search_error: Exception | None = None
        self.geocode_error: Exception | None = None
        self.queries: list[tuple] = []
        self.geocode_calls: list[dict] = []

    def find_businesses(self, query, location=None) -> str:
        self.queries.append((query, location))
        if self.search_error is not None:
            raise self.search_error
        return self.listing

    def geocode_batch(self, addresses) -> str:
        self.geocode_calls.append(dict(addresses))
        if self.geocode_error is not None:
            raise self.geocode_error
        resolved = {}
        for record_id, address in addresses.items():
            if address in self.geocode:
                latitude, longitude = self.geocode[address]
                resolved[record_id] = {"latitude": latitude, "longitude": longitude}
        return json.dumps(resolved)


def _orchestrator(backend: DummyBackend, **kwargs) -> tuple[SearchOrchestrator, list]:
    states: list = []
    orchestrator = SearchOrchestrator(backend, state_callback=states.append, **kwargs)
    return orchestrator, states


def test_search_merges_geocoded_coordinates() -> None:
    backend = DummyBackend(geocode={"22 Elm Ave, Springfield": (39.79, -89.64)})
    history = SearchHistory()
    orchestrator, states = _orchestrator(backend, history=history)

    results = orchestrator.search("  plumbers  ")

    assert backend.queries == [("plumbers", None)]
    assert [record.name for record in results] == ["Acme Plumbing", "Pipe Works", "Drain Kings"]
    assert results[0].coordinates == Coordinates(39.78, -89.65)
    assert results[1].coordinates == Coordinates(39.79, -89.64)
    assert results[2].coordinates is None
    assert list(backend.geocode_calls[0].values()) == ["22 Elm Ave, Springfield", "9 Oak Rd, Springfield"]
    assert states == [SearchState.SEARCHING, SearchState.RECONCILING, SearchState.IDLE]
    assert orchestrator.state is SearchState.IDLE
    assert orchestrator.results.snapshot() == results
    assert history.entries[0].query == "plumbers"
    assert history.entries[0].result_count == 3


def test_search_without_missing_coordinates_skips_geocoding() -> None:
    listing = "**Acme**\n- Address: 1 Main St\n- Coordinates: 1, 2\n---"
    backend = DummyBackend(listing=listing)
    orchestrator, _ = _orchestrator(backend)

    orchestrator.search("acme")

    assert backend.geocode_calls == []


def test_geocode_failure_still_shows_results() -> None:
    backend = DummyBackend()
    backend.geocode_error = RuntimeError("geocoder offline")
    orchestrator, states = _orchestrator(backend)

    results = orchestrator.search("plumbers")

    assert len(results) == 3
    assert orchestrator.error is None
    assert states[-1] is SearchState.IDLE


def test_blank_and_placeholder_queries_are_ignored() -> None:
    backend = DummyBackend()
    orchestrator, states = _orchestrator(backend)

    assert orchestrator.search("   ") == []
    assert orchestrator.search(None) == []
    assert orchestrator.search(PLACEHOLDER_TEXT) == []

    assert backend.queries == []
    assert states == []


def test_search_failure_clears_results_and_sets_error() -> None:
    backend = DummyBackend()
    history = SearchHistory()
    orchestrator, states = _orchestrator(backend, history=history)
    orchestrator.search("plumbers")

    backend.search_error = RuntimeError("quota")
    results = orchestrator.search("electricians")

    assert results == []
    assert len(orchestrator.results) == 0
    assert orchestrator.error == "Failed to fetch leads for 'electricians'."
    assert orchestrator.state is SearchState.IDLE
    assert states[-2:] == [SearchState.SEARCHING, SearchState.IDLE]
    assert [entry.query for entry in history.entries] == ["plumbers"]


def test_new_search_resets_selection_and_window() -> None:
    orchestrator, _ = _orchestrator(DummyBackend(), page_size=1)
    first = orchestrator.search("plumbers")
    orchestrator.select(first[2].id)
    assert orchestrator.visible_count == 3

    orchestrator.search("plumbers")

    assert orchestrator.selected_id is None
    assert orchestrator.visible_count == 1
    assert orchestrator.error is None


def test_location_is_passed_to_backend() -> None:
    backend = DummyBackend()
    location = Coordinates(40.0, -75.0)
    orchestrator, _ = _orchestrator(backend, location=location)

    orchestrator.search("cafes")

    assert backend.queries == [("cafes", location)]


def test_selection_toggles_and_expands_window() -> None:
    orchestrator, _ = _orchestrator(DummyBackend(), page_size=1)
    records = orchestrator.search("plumbers")

    assert [record.name for record in orchestrator.visible_results()] == ["Acme Plumbing"]
    assert orchestrator.has_more()

    assert orchestrator.select(records[1].id) == records[1].id
    assert orchestrator.visible_count == 2
    assert orchestrator.select(records[1].id) is None
    assert orchestrator.selected_id is None

    orchestrator.select("missing")
    assert orchestrator.selected_id is None


def test_load_more_grows_window_by_page_size() -> None:
    orchestrator, _ = _orchestrator(DummyBackend(), page_size=2)
    orchestrator.search("plumbers")

    assert len(orchestrator.visible_results()) == 2
    assert orchestrator.load_more() == 4
    assert len(orchestrator.visible_results()) == 3
    assert not orchestrator.has_more()


def test_rerun_repeats_query_and_moves_history_entry_to_front() -> None:
    history = SearchHistory()
    orchestrator, _ = _orchestrator(DummyBackend(), history=history)
    orchestrator.search("plumbers")
    orchestrator.search("roofers")

    orchestrator.rerun("plumbers")

    assert [entry.query for entry in history.entries] == ["plumbers", "roofers"]


def test_history_save_failure_does_not_abort_search(tmp_path) -> None:
    class FailingStore(JsonHistoryStore):
        def save(self, entries) -> None:
            raise OSError("disk full")

    history = SearchHistory(FailingStore(tmp_path / "history.json"))
    orchestrator, states = _orchestrator(DummyBackend(), history=history)

    results = orchestrator.search("plumbers")

    assert len(results) == 3
    assert orchestrator.error is None
    assert orchestrator.state is SearchState.IDLE
    assert states[-1] is SearchState.IDLE
    assert history.entries[0].query == "plumbers"
