"""Backend implementation for the Google Gemini API."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from google import genai
from google.genai import types

from ..models import Coordinates

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

SEARCH_PROMPT = """Find businesses matching '{query}'. For each business, provide its name, full address, \
category/type, main phone number, average star rating, number of reviews, official website URL, and \
geographic coordinates (latitude, longitude). Format each business entry clearly, separated by '---'. Example:
**Business Name**
- Address: 123 Main St, City, State, ZIP
- Category: Category Type
- Phone: (555) 555-5555
- Rating: 4.5 (123 reviews)
- Website: https://example.com
- Coordinates: 40.7128, -74.0060
---
"""

CONTACTS_PROMPT = """Analyze the content of the website {url} and extract contact information. \
Return all unique email addresses, phone numbers, and social media profile links (specifically \
Facebook, Instagram, LinkedIn, and Twitter). Respond strictly with a JSON object that has three keys: \
"emails", "phones", and "socials", each holding an array of unique strings. Use an empty array when \
nothing is found for a key."""

GEOCODE_PROMPT = """Provide the geographic coordinates (latitude and longitude) for the following businesses.
Input lines have the form "ID: Address".
Respond with a JSON object whose keys are the business IDs and whose values are objects with \
"latitude" and "longitude" properties. Omit any ID you cannot locate.

Businesses:
{lines}
"""

_STRING_ARRAY = types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING))

CONTACTS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "emails": _STRING_ARRAY,
        "phones": _STRING_ARRAY,
        "socials": _STRING_ARRAY,
    },
)


@dataclass
class GeminiConfig:
    """Configuration parameters for :class:`GeminiBackend`."""

    model: str = DEFAULT_MODEL
    temperature: Optional[float] = None


def resolve_api_key(api_key: Optional[str] = None) -> Optional[str]:
    """Return the explicit key or the first one found in the environment."""

    if api_key:
        return api_key
    for variable in API_KEY_ENV_VARS:
        value = os.environ.get(variable)
        if value:
            return value
    return None


class GeminiBackend:
    """Issue lead searches, contact extraction, and geocoding through Gemini."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: str = DEFAULT_MODEL,
        temperature: Optional[float] = None,
        config: Optional[GeminiConfig] = None,
        client: Any = None,
    ) -> None:
        self.config = config or GeminiConfig(model=model, temperature=temperature)
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> Any:
        """The SDK client, created on first use so a missing API key only fails backend calls."""

        if self._client is None:
            self._client = genai.Client(api_key=resolve_api_key(self._api_key))
        return self._client

    def _generate(self, prompt: str, config: types.GenerateContentConfig) -> str:
        LOGGER.debug("Calling %s (%s characters of prompt)", self.config.model, len(prompt))
        response = self.client.models.generate_content(
            model=self.config.model,
            contents=prompt,
            config=config,
        )
        return response.text or ""

    def find_businesses(self, query: str, location: Optional[Coordinates] = None) -> str:
        tool_config = None
        if location is not None:
            tool_config = types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(latitude=location.latitude, longitude=location.longitude)
                )
            )
        config = types.GenerateContentConfig(
            temperature=self.config.temperature,
            tools=[types.Tool(google_maps=types.GoogleMaps())],
            tool_config=tool_config,
        )
        return self._generate(SEARCH_PROMPT.format(query=query), config)

    def extract_contacts(self, url: str) -> str:
        config = types.GenerateContentConfig(
            temperature=self.config.temperature,
            response_mime_type="application/json",
            response_schema=CONTACTS_SCHEMA,
        )
        return self._generate(CONTACTS_PROMPT.format(url=url), config)

    def geocode_batch(self, addresses: Mapping[str, str]) -> str:
        lines = "\n".join(f"{record_id}: {address}" for record_id, address in addresses.items())
        config = types.GenerateContentConfig(
            temperature=self.config.temperature,
            response_mime_type="application/json",
        )
        return self._generate(GEOCODE_PROMPT.format(lines=lines), config)
