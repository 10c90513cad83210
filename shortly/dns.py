"""Name resolution and a cache of resolved endpoints."""

from __future__ import annotations

import asyncio
import logging
import socket
import threading
from typing import Iterable

from .types import Endpoint

log = logging.getLogger(__name__)


class DnsCache:
    """Thread-safe map from (domain, port) to resolved endpoints."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, list[Endpoint]] = {}

    @staticmethod
    def _key(domain: str, port: str) -> str:
        return f"{domain}:{port}"

    def find_entry(self, domain: str, port: str) -> list[Endpoint]:
        """Return the cached endpoints, or an empty list."""
        with self._lock:
            return list(self._entries.get(self._key(domain, port), ()))

    def update_or_add_entry(
        self, domain: str, port: str, endpoints: Iterable[Endpoint]
    ) -> None:
        """Store endpoints for (domain, port), replacing any earlier entry."""
        with self._lock:
            self._entries[self._key(domain, port)] = list(endpoints)


class DnsResolver:
    """Resolves host and port (or service name) to TCP endpoints."""

    async def resolve(self, host: str, port: str) -> list[Endpoint]:
        """Return the endpoints for host:port; an empty list on failure."""
        loop = asyncio.get_running_loop()
        try:
            results = await loop.getaddrinfo(
                host, port, type=socket.SOCK_STREAM, proto=socket.IPPROTO_TCP
            )
        except OSError as exc:
            log.warning(
                "DNS resolve failed: host=%s port=%s code=%s message=%s",
                host,
                port,
                getattr(exc, "errno", None),
                exc,
            )
            return []
        return [
            Endpoint(address=sockaddr[0], port=int(sockaddr[1]))
            for _family, _type, _proto, _canon, sockaddr in results
        ]