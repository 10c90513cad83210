"""Upstream URL shortening providers and the factory that picks one."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from .exceptions import ProviderError
from .ports import CacheClient, EnvReader, HttpClientPort
from .types import HttpStatus, ProviderType, RequestInfo

log = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"

_ENV_KEYS = {
    ProviderType.BITLY: "API_KEY_BITLY",
    ProviderType.TINYURL: "API_KEY_TINYURL",
}
_DEFAULT_ENV_KEY = _ENV_KEYS[ProviderType.BITLY]


def _env_key_for(provider_type: ProviderType) -> str:
    """Name of the environment variable holding the provider's key."""
    return _ENV_KEYS.get(provider_type, _DEFAULT_ENV_KEY)


def _bearer(credential: str) -> str:
    """An Authorization value of the bearer scheme."""
    return "Bearer " + credential


def _internal_error() -> ProviderError:
    return ProviderError("Internal Server Error", HttpStatus.INTERNAL_SERVER_ERROR)


def _decode_object(payload: str) -> Optional[dict[str, Any]]:
    """Decode payload as a JSON object; None if it is not one."""
    try:
        document = json.loads(payload)
    except (ValueError, TypeError):
        return None
    return document if isinstance(document, dict) else None


def _require_object(payload: str) -> dict[str, Any]:
    document = _decode_object(payload)
    if document is None:
        log.warning("Provider response is not a JSON object")
        raise _internal_error()
    return document


class Provider(ABC):
    """Shortens a URL through an upstream API, consulting a cache first."""

    request_info: RequestInfo

    def __init__(
        self,
        http_client: HttpClientPort,
        provider_type: ProviderType,
        env: EnvReader,
        json_key: str,
        cache: CacheClient,
    ) -> None:
        self.http_client = http_client
        self.provider_type = provider_type
        self.json_key = json_key
        self.cache = cache
        self.api_key = env.get(_env_key_for(provider_type))
        if not self.api_key:
            log.error("API key is empty in the environment")
            raise _internal_error()

    async def shorten(self, url: str) -> str:
        """Return the short form of url; raise ProviderError on failure."""
        if not url:
            raise ProviderError("url value can not be empty", HttpStatus.BAD_REQUEST)

        cached = await self.cache.get(url)
        if cached is not None:
            log.info("Cache hit for %s", url)
            return cached

        response = await self.http_client.post(
            self.create_request_body(url), self.request_info
        )
        if response.status != HttpStatus.OK or not response.body:
            raise ProviderError(
                self.get_error_message(response.body), response.status
            )

        shortened = self.get_short_url(response.body)
        await self.cache.set(url, shortened)
        return shortened

    def create_request_body(self, url: str) -> str:
        """The JSON body sent upstream for url."""
        return json.dumps(
            {self.json_key: url}, separators=(",", ":"), ensure_ascii=False
        )

    @abstractmethod
    def get_short_url(self, payload: str) -> str:
        """Extract the short URL from a successful upstream response."""

    @abstractmethod
    def get_error_message(self, payload: str) -> str:
        """Extract a readable message from a failed upstream response."""


class Bitly(Provider):
    """The Bitly v4 API."""

    def __init__(
        self, http_client: HttpClientPort, env: EnvReader, cache: CacheClient
    ) -> None:
        super().__init__(http_client, ProviderType.BITLY, env, "long_url", cache)
        self.request_info = RequestInfo(
            host="api-ssl.bitly.com",
            endpoint="/v4/shorten",
            port="https",
            authorization_token=_bearer(self.api_key),
        )

    def get_short_url(self, payload: str) -> str:
        link = _require_object(payload).get("link")
        if not isinstance(link, str):
            log.warning("Bitly response does not contain a 'link' key")
            raise _internal_error()
        return link

    def get_error_message(self, payload: str) -> str:
        document = _decode_object(payload)
        if document is None:
            return UNKNOWN_ERROR
        for key in ("description", "message"):
            value = document.get(key)
            if isinstance(value, str):
                return value
        return UNKNOWN_ERROR


class TinyURL(Provider):
    """The TinyURL API."""

    def __init__(
        self, http_client: HttpClientPort, env: EnvReader, cache: CacheClient
    ) -> None:
        super().__init__(http_client, ProviderType.TINYURL, env, "url", cache)
        self.request_info = RequestInfo(
            host="api.tinyurl.com",
            endpoint="/create",
            port="https",
            authorization_token=_bearer(self.api_key),
        )

    def get_short_url(self, payload: str) -> str:
        data = _require_object(payload).get("data")
        if not isinstance(data, dict):
            raise _internal_error()
        tiny_url = data.get("tiny_url")
        if not isinstance(tiny_url, str):
            raise _internal_error()
        return tiny_url

    def get_error_message(self, payload: str) -> str:
        document = _decode_object(payload)
        if document is None:
            return UNKNOWN_ERROR
        errors = document.get("errors")
        if not isinstance(errors, list):
            return UNKNOWN_ERROR
        message = ",".join(error for error in errors if isinstance(error, str))
        return message or UNKNOWN_ERROR


class ProviderFactory:
    """Builds the provider matching a provider type."""

    def __init__(
        self, http_client: HttpClientPort, env: EnvReader, cache: CacheClient
    ) -> None:
        self.http_client = http_client
        self.env = env
        self.cache = cache

    def create_provider(self, provider_type: ProviderType) -> Provider:
        """TinyURL for TINYURL, Bitly for anything else."""
        if provider_type is ProviderType.TINYURL:
            return TinyURL(self.http_client, self.env, self.cache)
        return Bitly(self.http_client, self.env, self.cache)