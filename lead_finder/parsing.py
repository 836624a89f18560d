"""Parse the backend's markdown business listing into :class:`BusinessRecord` objects.

The backend is asked to emit one business per block, blocks separated by a
line of ``---``::

    **Acme Plumbing**
    - Address: 1 Main St, Springfield
    - Category: Plumber
    - Phone: 555-1111
    - Rating: 4.5 (123 reviews)
    - Website: https://acme.example
    - Coordinates: 39.78, -89.65

Parsing is deliberately lenient: unknown lines are ignored, malformed values
are skipped, and blocks without a name and address are dropped silently.
"""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .models import BusinessRecord, Coordinates

LOGGER = logging.getLogger(__name__)

LEAD_DELIMITER = "---"

_RATING_PATTERN = re.compile(r"\d{1,2}(?:\.\d)?")
_REVIEW_COUNT_PATTERN = re.compile(r"\((\d[\d,]*)")
_NAME_PREFIX_PATTERN = re.compile(r"^[#\-*\s]+")
_EMPHASIS_MARKERS = ("**", "__")

FieldParser = Callable[[str], Dict[str, Any]]


def _text_field(name: str) -> FieldParser:
    def parse(value: str) -> Dict[str, Any]:
        return {name: value} if value else {}

    return parse


def _parse_coordinates(value: str) -> Dict[str, Any]:
    parts = value.split(",")
    if len(parts) < 2:
        return {}
    coordinates = Coordinates.from_values(parts[0], parts[1])
    if coordinates is None:
        LOGGER.debug("Ignoring unparsable coordinates %r", value)
        return {}
    return {"coordinates": coordinates}


def _parse_rating(value: str) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    # The star rating precedes the parenthesised review count.
    rating_match = _RATING_PATTERN.search(value.split("(", 1)[0])
    if rating_match:
        fields["rating"] = float(rating_match.group(0))
    reviews_match = _REVIEW_COUNT_PATTERN.search(value)
    if reviews_match:
        fields["review_count"] = int(reviews_match.group(1).replace(",", ""))
    return fields


@dataclass(frozen=True)
class FieldRule:
    """Maps one or more case-insensitive line labels onto record fields."""

    labels: Tuple[str, ...]
    parse: FieldParser

    def matches(self, lowered_line: str) -> bool:
        return any(label in lowered_line for label in self.labels)


# Consulted in order; the first rule whose label appears in a line claims it.
FIELD_RULES: Sequence[FieldRule] = (
    FieldRule(("address:",), _text_field("address")),
    FieldRule(("type:", "category:"), _text_field("category")),
    FieldRule(("phone:",), _text_field("phone")),
    FieldRule(("website:",), _text_field("website_url")),
    FieldRule(("coordinates:",), _parse_coordinates),
    FieldRule(("rating:",), _parse_rating),
)


def clean_business_name(line: str) -> str:
    """Strip markdown emphasis, heading and bullet markers from a name line."""

    name = line.strip()
    for marker in _EMPHASIS_MARKERS:
        name = name.replace(marker, "")
    name = _NAME_PREFIX_PATTERN.sub("", name)
    return name.strip().strip("*_").strip()


def classify_line(line: str, rules: Sequence[FieldRule] = FIELD_RULES) -> Dict[str, Any]:
    """Return the record fields carried by ``line``, or an empty dict if it is unrecognised."""

    lowered = line.lower()
    for rule in rules:
        if rule.matches(lowered):
            value = line[line.index(":") + 1 :].strip()
            return rule.parse(value)
    return {}


def parse_segment(segment: str, record_id: str) -> Optional[BusinessRecord]:
    """Parse a single delimited block, returning ``None`` when it lacks a name or address."""

    lines = [line for line in segment.strip().splitlines() if line.strip()]
    if not lines:
        return None

    fields: Dict[str, Any] = {"name": clean_business_name(lines[0])}
    for line in lines[1:]:
        fields.update(classify_line(line))

    if not fields.get("name") or not fields.get("address"):
        LOGGER.debug("Dropping listing entry without name/address: %r", lines[0])
        return None
    return BusinessRecord(id=record_id, **fields)


def parse_leads(markdown: Optional[str], *, id_prefix: Optional[str] = None) -> List[BusinessRecord]:
    """Convert a delimited markdown listing into business records.

    Parameters
    ----------
    markdown:
        Raw text returned by the backend. ``None`` or empty text yields no records.
    id_prefix:
        Prefix for the generated record ids. A random token is used when omitted;
        ids are ``<prefix>-<segment index>`` and therefore unique per call.
    """

    if not markdown:
        return []

    prefix = id_prefix or uuid.uuid4().hex[:8]
    records: List[BusinessRecord] = []
    for index, segment in enumerate(markdown.split(LEAD_DELIMITER)):
        if not segment.strip():
            continue
        record = parse_segment(segment, f"{prefix}-{index}")
        if record is not None:
            records.append(record)

    LOGGER.debug("Parsed %s business records from listing", len(records))
    return records


__all__ = [
    "FIELD_RULES",
    "FieldRule",
    "LEAD_DELIMITER",
    "classify_line",
    "clean_business_name",
    "parse_leads",
    "parse_segment",
]
