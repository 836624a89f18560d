"""Factory helpers for constructing the backend and orchestrators from settings."""
from __future__ import annotations

import importlib
from typing import Optional, Tuple

from .backend.base import LeadBackend
from .config import ConfigurationError, Settings
from .contacts import ContactExtractor
from .history import JsonHistoryStore, SearchHistory
from .orchestrator import ScrapeOrchestrator, SearchOrchestrator
from .orchestrator.scrape import ResultCallback
from .orchestrator.search import StateCallback


def _load_class(path: str):
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ConfigurationError(f"Invalid backend class path '{path}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Backend module '{module_name}' could not be imported") from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ConfigurationError(f"Module '{module_name}' does not define '{attr}'") from exc


def build_backend(settings: Settings) -> LeadBackend:
    """Instantiate the backend class named in the settings."""

    backend_cls = _load_class(settings.backend_class)
    try:
        return backend_cls(**settings.backend_options)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Backend '{settings.backend_class}' could not be created: {exc}") from exc


def build_history(settings: Settings) -> SearchHistory:
    """Open the persisted search history without touching the backend."""

    return SearchHistory(JsonHistoryStore(settings.history_path))


def build_orchestrators(
    settings: Settings,
    *,
    backend: Optional[LeadBackend] = None,
    state_callback: Optional[StateCallback] = None,
    result_callback: Optional[ResultCallback] = None,
) -> Tuple[SearchOrchestrator, ScrapeOrchestrator]:
    """Wire backend, history, and both orchestrators around one shared result set."""

    backend = backend or build_backend(settings)
    history = build_history(settings)
    search = SearchOrchestrator(
        backend,
        history=history,
        location=settings.location,
        page_size=settings.page_size,
        state_callback=state_callback,
    )
    scrape = ScrapeOrchestrator(
        search.results,
        ContactExtractor(backend),
        result_callback=result_callback,
    )
    return search, scrape
