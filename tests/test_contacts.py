"""Tests for website contact extraction."""
from __future__ import annotations

import json

import pytest

from lead_finder.contacts import ContactExtractor, parse_contact_payload, validate_website_url
from lead_finder.errors import ExtractionError, InvalidInputError
from lead_finder.models import ContactBundle


class DummyBackend:
    name = "dummy"

    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.urls: list[str] = []

    def extract_contacts(self, url: str) -> str | None:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.mark.parametrize("url", [None, "", "   ", "ftp://example.com", "example.com", "https://"])
def test_validate_website_url_rejects_non_http_urls(url) -> None:
    with pytest.raises(InvalidInputError):
        validate_website_url(url)


def test_validate_website_url_trims_whitespace() -> None:
    assert validate_website_url("  https://acme.example  ") == "https://acme.example"


def test_scrape_invalid_url_never_calls_backend() -> None:
    backend = DummyBackend(reply="{}")

    with pytest.raises(InvalidInputError):
        ContactExtractor(backend).scrape("not a url")

    assert backend.urls == []


def test_scrape_returns_deduplicated_bundle() -> None:
    reply = json.dumps(
        {
            "emails": ["info@acme.example", "INFO@acme.example", ""],
            "phones": ["555-1111", "(555) 1111"],
            "socials": ["https://facebook.com/acme"],
        }
    )
    backend = DummyBackend(reply=reply)

    bundle = ContactExtractor(backend).scrape("https://acme.example")

    assert bundle == ContactBundle(
        emails=("info@acme.example",),
        phones=("555-1111",),
        socials=("https://facebook.com/acme",),
    )
    assert backend.urls == ["https://acme.example"]


def test_missing_fields_default_to_empty() -> None:
    bundle = parse_contact_payload('```json\n{"emails": ["a@b.example"]}\n```', "https://b.example")

    assert bundle.emails == ("a@b.example",)
    assert bundle.phones == ()
    assert bundle.socials == ()


@pytest.mark.parametrize("reply", ["not json", "[1, 2]", None])
def test_malformed_reply_raises_extraction_error(reply) -> None:
    with pytest.raises(ExtractionError) as excinfo:
        ContactExtractor(DummyBackend(reply=reply)).scrape("https://acme.example")

    assert excinfo.value.url == "https://acme.example"


def test_backend_failure_is_wrapped() -> None:
    backend = DummyBackend(error=RuntimeError("quota exceeded"))

    with pytest.raises(ExtractionError) as excinfo:
        ContactExtractor(backend).scrape("https://acme.example")

    assert str(excinfo.value) == "Failed to scrape contacts for https://acme.example."
    assert isinstance(excinfo.value.__cause__, RuntimeError)
