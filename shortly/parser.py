"""Decoding of the shortening request body."""

from __future__ import annotations

import json
from typing import Any, Mapping

from .exceptions import ValidationError
from .types import ProviderType
from .validation import JsonValidator


def provider_type_from_name(name: str) -> ProviderType:
    """Map a provider name to its type; unknown names mean Bitly."""
    return ProviderType.TINYURL if name == "tinyurl" else ProviderType.BITLY


def _string_field(obj: Mapping[str, Any], key: str) -> str:
    try:
        value = obj[key]
    except KeyError:
        raise ValidationError(f"JSON must contain key {key}") from None
    if not isinstance(value, str):
        raise ValidationError(f"Value of key {key} is not a string")
    return value


class JsonParser:
    """Parses a JSON body into the URL to shorten and the chosen provider."""

    def __init__(self, validator: JsonValidator) -> None:
        self.validator = validator

    def parse(self, text: str) -> tuple[str, ProviderType]:
        """Return (url, provider); raise ValidationError on any problem."""
        try:
            document = json.loads(text)
        except (ValueError, TypeError):
            raise ValidationError("Invalid JSON format") from None

        if not isinstance(document, dict):
            raise ValidationError("JSON is not an object")

        self.validator.validate(document)

        url = _string_field(document, "url")
        provider = ProviderType.BITLY
        if "provider" in document:
            provider = provider_type_from_name(_string_field(document, "provider"))
        return url, provider