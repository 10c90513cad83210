"""Interfaces between the core use case and its collaborators."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from .types import Request, RequestInfo, Response


@runtime_checkable
class CacheClient(Protocol):
    """Key/value cache for already shortened URLs."""

    async def get(self, key: str) -> Optional[str]:
        """Return the cached value, or None on a miss."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int = 3600) -> None:
        """Store a value for ttl_seconds."""
        ...


@runtime_checkable
class HttpClientPort(Protocol):
    """Sends a JSON body to an upstream API."""

    async def post(self, body: str, info: RequestInfo) -> Response:
        """POST body to the endpoint described by info."""
        ...


@runtime_checkable
class EnvReader(Protocol):
    """Reads configuration values."""

    def get(self, key: str) -> str:
        """Return the value for key, or an empty string if unset."""
        ...


@runtime_checkable
class ValidationRule(Protocol):
    """One check applied to a decoded JSON object."""

    def check(self, obj: Mapping[str, Any]) -> Optional[str]:
        """Return an error message if obj breaks the rule, otherwise None."""
        ...


@runtime_checkable
class Handler(Protocol):
    """Turns a request into a response."""

    async def handle(self, request: Request) -> Response:
        """Handle one request."""
        ...