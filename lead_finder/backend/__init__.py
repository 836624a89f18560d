"""Generative-AI backends that search, scrape, and geocode on the lead finder's behalf."""

from .base import LeadBackend, decode_json_payload  # noqa: F401
from .gemini import GeminiBackend, GeminiConfig  # noqa: F401
from .sample import StaticBackend  # noqa: F401

__all__ = [
    "LeadBackend",
    "GeminiBackend",
    "GeminiConfig",
    "StaticBackend",
    "decode_json_payload",
]
