"""Data models shared by the parser, orchestrators, exporters, and GUI."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple, Union


# --- Location Models ---

_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _parse_number(value: Any) -> float:
    """Parse a plain decimal number, raising ``ValueError`` for anything else."""

    text = str(value).strip()
    if not _NUMBER_PATTERN.fullmatch(text):
        raise ValueError(f"Not a number: {value!r}")
    return float(text)


@dataclass(frozen=True, slots=True)
class Coordinates:
    """A latitude/longitude pair. Records only ever hold complete pairs."""

    latitude: float
    longitude: float

    @classmethod
    def from_values(cls, latitude: Any, longitude: Any) -> Optional["Coordinates"]:
        """Build a pair from loosely typed values, or return ``None`` if either is unusable."""

        try:
            lat = _parse_number(latitude)
            lng = _parse_number(longitude)
        except ValueError:
            return None
        if not (math.isfinite(lat) and math.isfinite(lng)):
            return None
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            return None
        return cls(latitude=lat, longitude=lng)

    def as_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True, slots=True)
class GeocodeRequest:
    """Address lookup for a single record in a batch geocode call."""

    id: str
    address: str


# --- Scraped Contact Models ---

@dataclass(frozen=True, slots=True)
class ContactBundle:
    """Contact details extracted from a business website."""

    emails: Tuple[str, ...] = ()
    phones: Tuple[str, ...] = ()
    socials: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (self.emails or self.phones or self.socials)


# --- Scrape State Variants ---

@dataclass(frozen=True, slots=True)
class ScrapeNotStarted:
    """No scrape has been attempted for the record."""


@dataclass(frozen=True, slots=True)
class ScrapeInProgress:
    """A scrape request for the record is currently running."""


@dataclass(frozen=True, slots=True)
class ScrapeSucceeded:
    """The record's website was scraped successfully."""

    contact_info: ContactBundle


@dataclass(frozen=True, slots=True)
class ScrapeFailed:
    """The last scrape attempt failed with a user-facing message."""

    message: str


ScrapeState = Union[ScrapeNotStarted, ScrapeInProgress, ScrapeSucceeded, ScrapeFailed]

NOT_STARTED = ScrapeNotStarted()
IN_PROGRESS = ScrapeInProgress()


# --- Business Records ---

@dataclass(frozen=True, slots=True)
class BusinessRecord:
    """One discovered lead."""

    id: str
    name: str
    address: str
    category: str = ""
    phone: Optional[str] = None
    website_url: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    coordinates: Optional[Coordinates] = None
    scrape_state: ScrapeState = NOT_STARTED

    @property
    def latitude(self) -> Optional[float]:
        return self.coordinates.latitude if self.coordinates else None

    @property
    def longitude(self) -> Optional[float]:
        return self.coordinates.longitude if self.coordinates else None

    @property
    def contact_info(self) -> Optional[ContactBundle]:
        if isinstance(self.scrape_state, ScrapeSucceeded):
            return self.scrape_state.contact_info
        return None

    @property
    def scrape_error(self) -> Optional[str]:
        if isinstance(self.scrape_state, ScrapeFailed):
            return self.scrape_state.message
        return None

    @property
    def is_scraping(self) -> bool:
        return isinstance(self.scrape_state, ScrapeInProgress)

    def with_coordinates(self, coordinates: Optional[Coordinates]) -> "BusinessRecord":
        return replace(self, coordinates=coordinates)

    def with_scrape_state(self, state: ScrapeState) -> "BusinessRecord":
        return replace(self, scrape_state=state)


# --- Search History ---

@dataclass(slots=True)
class SearchHistoryEntry:
    """A completed search remembered across sessions."""

    id: str
    query: str
    timestamp: float
    result_count: int

    def as_dict(self) -> Dict[str, Any]:
        """Return the JSON-serialisable form used by the history store."""

        return {
            "id": self.id,
            "query": self.query,
            "timestamp": self.timestamp,
            "result_count": self.result_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchHistoryEntry":
        """Rebuild an entry from stored data, raising ``ValueError`` if it is malformed."""

        try:
            query = data["query"]
            entry_id = str(data["id"])
            timestamp = float(data["timestamp"])
            result_count = int(data.get("result_count", data.get("resultCount", 0)))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed history entry: {data!r}") from exc
        if not isinstance(query, str) or not query:
            raise ValueError(f"Malformed history entry: {data!r}")
        return cls(id=entry_id, query=query, timestamp=timestamp, result_count=result_count)
