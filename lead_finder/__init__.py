"""Top-level package for the AI assisted local lead finder."""

from . import models  # noqa: F401
from .errors import (  # noqa: F401
    BackendError,
    EmptyExportError,
    ExtractionError,
    InvalidInputError,
    LeadFinderError,
    SearchError,
)
from .models import (  # noqa: F401
    BusinessRecord,
    ContactBundle,
    Coordinates,
    GeocodeRequest,
    ScrapeFailed,
    ScrapeInProgress,
    ScrapeNotStarted,
    ScrapeSucceeded,
    SearchHistoryEntry,
)
from .parsing import parse_leads  # noqa: F401

__all__ = [
    "BackendError",
    "BusinessRecord",
    "ContactBundle",
    "Coordinates",
    "EmptyExportError",
    "ExtractionError",
    "GeocodeRequest",
    "InvalidInputError",
    "LeadFinderError",
    "ScrapeFailed",
    "ScrapeInProgress",
    "ScrapeNotStarted",
    "ScrapeSucceeded",
    "SearchError",
    "SearchHistoryEntry",
    "parse_leads",
]
