"""Interface shared by generative-AI backends."""
from __future__ import annotations

import json
import re
from typing import Any, Mapping, Optional, Protocol

from ..models import Coordinates

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


class LeadBackend(Protocol):
    """Protocol defining the three calls the lead finder makes to its AI backend.

    Every method returns the backend's raw text; parsing and validation belong to
    the calling component.
    """

    name: str

    def find_businesses(self, query: str, location: Optional[Coordinates] = None) -> str:  # pragma: no cover - runtime protocol
        """Return a ``---`` delimited markdown listing of businesses matching ``query``."""

    def extract_contacts(self, url: str) -> str:  # pragma: no cover - runtime protocol
        """Return a JSON object with ``emails``, ``phones`` and ``socials`` arrays."""

    def geocode_batch(self, addresses: Mapping[str, str]) -> str:  # pragma: no cover - runtime protocol
        """Return a JSON object mapping ids to ``{"latitude", "longitude"}`` objects."""


def decode_json_payload(text: Optional[str]) -> Any:
    """Decode a JSON response, tolerating a surrounding markdown code fence.

    Raises :class:`ValueError` (``json.JSONDecodeError``) when the text is empty
    or not valid JSON.
    """

    if text is None:
        raise ValueError("Backend returned no content")
    cleaned = _CODE_FENCE.sub("", text.strip())
    return json.loads(cleaned)
