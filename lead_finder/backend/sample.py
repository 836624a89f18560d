"""Backend implementation that answers from local data."""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Sequence

from ..models import Coordinates

SAMPLE_LISTING = """**Acme Plumbing**
- Address: 1 Main St, Springfield
- Category: Plumber
- Phone: 555-1111
- Rating: 4.6 (212 reviews)
- Website: https://acme-plumbing.example
- Coordinates: 39.7817, -89.6501
---
**Springfield Pipe Works**
- Address: 22 Elm Ave, Springfield
- Category: Plumber
- Phone: 555-2222
- Rating: 4.1 (38 reviews)
- Website: https://pipeworks.example
---
"""

SAMPLE_CONTACTS: Dict[str, Dict[str, Sequence[str]]] = {
    "https://acme-plumbing.example": {
        "emails": ["info@acme-plumbing.example"],
        "phones": ["555-1111"],
        "socials": ["https://facebook.com/acmeplumbing"],
    },
}

SAMPLE_COORDINATES: Dict[str, Sequence[float]] = {
    "22 Elm Ave, Springfield": (39.7990, -89.6440),
}


class StaticBackend:
    """Backend that returns canned responses instead of calling a remote model.

    Useful for demonstrations, offline development, and smoke tests.
    """

    name = "static"

    def __init__(
        self,
        listing: str = SAMPLE_LISTING,
        contacts: Optional[Mapping[str, Mapping[str, Sequence[str]]]] = None,
        coordinates: Optional[Mapping[str, Sequence[float]]] = None,
    ) -> None:
        self._listing = listing
        self._contacts = dict(SAMPLE_CONTACTS if contacts is None else contacts)
        self._coordinates = dict(SAMPLE_COORDINATES if coordinates is None else coordinates)

    def find_businesses(self, query: str, location: Optional[Coordinates] = None) -> str:
        return self._listing

    def extract_contacts(self, url: str) -> str:
        payload = self._contacts.get(url.rstrip("/"), {})
        return json.dumps(
            {
                "emails": list(payload.get("emails", [])),
                "phones": list(payload.get("phones", [])),
                "socials": list(payload.get("socials", [])),
            }
        )

    def geocode_batch(self, addresses: Mapping[str, str]) -> str:
        resolved: Dict[str, Any] = {}
        for record_id, address in addresses.items():
            pair = self._coordinates.get(address)
            if pair is not None:
                resolved[record_id] = {"latitude": pair[0], "longitude": pair[1]}
        return json.dumps(resolved)
