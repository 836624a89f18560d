"""Extract contact details for a business website through the AI backend."""
from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlparse

from .backend.base import LeadBackend, decode_json_payload
from .errors import ExtractionError, InvalidInputError
from .merge import unique_values
from .models import ContactBundle

LOGGER = logging.getLogger(__name__)

_HTTP_SCHEMES = {"http", "https"}


def validate_website_url(url: Optional[str]) -> str:
    """Return the trimmed URL or raise :class:`InvalidInputError` if it is not an HTTP(S) address."""

    text = (url or "").strip()
    if not text:
        raise InvalidInputError("Invalid or missing website URL.")
    parsed = urlparse(text)
    if parsed.scheme.lower() not in _HTTP_SCHEMES or not parsed.netloc:
        raise InvalidInputError(f"Invalid or missing website URL: {text}")
    return text


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def parse_contact_payload(text: Optional[str], url: str) -> ContactBundle:
    """Normalise the backend's JSON reply into a :class:`ContactBundle`."""

    try:
        data = decode_json_payload(text)
    except ValueError as exc:
        raise ExtractionError(url) from exc
    if not isinstance(data, dict):
        raise ExtractionError(url, f"Failed to scrape contacts for {url}: unexpected response shape.")

    return ContactBundle(
        emails=unique_values(_as_list(data.get("emails")), "email"),
        phones=unique_values(_as_list(data.get("phones")), "phone"),
        socials=unique_values(_as_list(data.get("socials")), "social"),
    )


class ContactExtractor:
    """Validate website URLs and ask the backend for the contacts published there."""

    def __init__(self, backend: LeadBackend) -> None:
        self._backend = backend

    def scrape(self, url: Optional[str]) -> ContactBundle:
        website = validate_website_url(url)
        LOGGER.info("Extracting contacts from %s", website)
        try:
            raw = self._backend.extract_contacts(website)
        except Exception as exc:
            LOGGER.exception("Contact extraction failed for %s", website)
            raise ExtractionError(website) from exc

        bundle = parse_contact_payload(raw, website)
        LOGGER.debug(
            "Found %s emails, %s phones, %s social links on %s",
            len(bundle.emails),
            len(bundle.phones),
            len(bundle.socials),
            website,
        )
        return bundle


__all__ = ["ContactExtractor", "parse_contact_payload", "validate_website_url"]
