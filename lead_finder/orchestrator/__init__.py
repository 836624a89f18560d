"""Workflow orchestration for searching, reconciling, and enriching leads."""

from .results import ResultSet
from .scrape import ScrapeOrchestrator
from .search import PLACEHOLDER_TEXT, RESULTS_PER_PAGE, SearchOrchestrator, SearchState

__all__ = [
    "PLACEHOLDER_TEXT",
    "RESULTS_PER_PAGE",
    "ResultSet",
    "ScrapeOrchestrator",
    "SearchOrchestrator",
    "SearchState",
]
