"""Resolve missing coordinates for a batch of records with a single backend call."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .backend.base import LeadBackend, decode_json_payload
from .models import BusinessRecord, Coordinates, GeocodeRequest

LOGGER = logging.getLogger(__name__)


def coerce_coordinates(value: Any) -> Optional[Coordinates]:
    """Interpret a geocode entry as a coordinate pair, returning ``None`` when it is unusable."""

    if isinstance(value, dict):
        latitude = value.get("latitude", value.get("lat"))
        longitude = value.get("longitude", value.get("lng"))
        if latitude is None or longitude is None:
            return None
        return Coordinates.from_values(latitude, longitude)
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return Coordinates.from_values(value[0], value[1])
    return None


def geocode_requests_for(records: Iterable[BusinessRecord]) -> List[GeocodeRequest]:
    """Select the records that have an address but no coordinates yet."""

    return [
        GeocodeRequest(id=record.id, address=record.address)
        for record in records
        if record.address and record.coordinates is None
    ]


class BatchGeocoder:
    """Fail-soft batch geocoder backed by the AI backend.

    A failure of the whole batch yields an empty mapping; individual ids the
    backend could not resolve are simply absent from the result.
    """

    def __init__(self, backend: LeadBackend) -> None:
        self._backend = backend

    def geocode_batch(self, requests: Sequence[GeocodeRequest]) -> Dict[str, Coordinates]:
        if not requests:
            return {}

        addresses = {request.id: request.address for request in requests}
        try:
            payload = decode_json_payload(self._backend.geocode_batch(addresses))
        except Exception:
            LOGGER.warning("Batch geocoding of %s addresses failed", len(addresses), exc_info=True)
            return {}

        if not isinstance(payload, dict):
            LOGGER.warning("Ignoring geocode response of type %s", type(payload).__name__)
            return {}

        resolved: Dict[str, Coordinates] = {}
        for record_id, value in payload.items():
            if record_id not in addresses:
                LOGGER.debug("Ignoring coordinates for unknown id %s", record_id)
                continue
            coordinates = coerce_coordinates(value)
            if coordinates is None:
                LOGGER.debug("Dropping invalid coordinates for %s: %r", record_id, value)
                continue
            resolved[record_id] = coordinates

        LOGGER.info("Geocoded %s of %s addresses", len(resolved), len(addresses))
        return resolved


__all__ = ["BatchGeocoder", "coerce_coordinates", "geocode_requests_for"]
