"""Exception hierarchy shared by the lead finder components."""
from __future__ import annotations

from typing import Optional


class LeadFinderError(Exception):
    """Base class for all errors raised by the lead finder package."""


class InvalidInputError(LeadFinderError, ValueError):
    """Raised for caller errors detected before any backend call is made."""


class BackendError(LeadFinderError, RuntimeError):
    """Raised when the AI backend errors or returns content of the wrong shape."""


class SearchError(BackendError):
    """Raised when the business search call cannot produce a listing."""

    def __init__(self, query: str, message: Optional[str] = None) -> None:
        self.query = query
        super().__init__(message or f"Failed to fetch leads for '{query}'.")


class ExtractionError(BackendError):
    """Raised when contact extraction fails for a website."""

    def __init__(self, url: str, message: Optional[str] = None) -> None:
        self.url = url
        super().__init__(message or f"Failed to scrape contacts for {url}.")


class EmptyExportError(LeadFinderError):
    """Raised when an export is requested for an empty result set."""

    def __init__(self, message: str = "No leads to export.") -> None:
        super().__init__(message)


__all__ = [
    "LeadFinderError",
    "InvalidInputError",
    "BackendError",
    "SearchError",
    "ExtractionError",
    "EmptyExportError",
]
