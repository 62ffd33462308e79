"""Exception types shared across the pipeline."""

from __future__ import annotations


class LLMServiceError(RuntimeError):
    """Raised when the generation service cannot be used."""


class MissingCredentialError(LLMServiceError):
    """Raised before any call when the generation API key is not configured."""


class IntentParseError(ValueError):
    """Raised when an intent-extraction response is not a usable intent record."""


class NDLSearchError(RuntimeError):
    """Raised when an NDL Lab search request fails or returns garbage."""
