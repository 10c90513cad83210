"""HTTPS client that posts JSON bodies to upstream APIs."""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import ssl
from typing import Optional

from .dns import DnsCache, DnsResolver
from .types import Endpoint, HttpStatus, Method, Request, RequestInfo, Response
from .wire import ProtocolError, read_response, serialize_request

log = logging.getLogger(__name__)

USER_AGENT = "shortly"


def _bad_response(message: str, status: int) -> Response:
    return Response(
        status=status, headers={"Content-Type": "text/plain"}, body=message
    )


def _is_ip_address(address: str) -> bool:
    try:
        ipaddress.ip_address(address)
    except ValueError:
        return False
    return True


async def _close(writer: asyncio.StreamWriter) -> None:
    writer.close()
    try:
        await writer.wait_closed()
    except (OSError, ssl.SSLError):
        pass


class HttpClient:
    """Posts over TLS, resolving hosts through a cache first."""

    def __init__(
        self,
        dns_cache: DnsCache,
        dns_resolver: DnsResolver,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self.dns_cache = dns_cache
        self.dns_resolver = dns_resolver
        self.ssl_context = ssl_context or ssl.create_default_context()

    async def _lookup_or_resolve(self, host: str, port: str) -> list[Endpoint]:
        endpoints = self.dns_cache.find_entry(host, port)
        if endpoints:
            return endpoints
        endpoints = await self.dns_resolver.resolve(host, port)
        if endpoints:
            self.dns_cache.update_or_add_entry(host, port, endpoints)
        return endpoints

    async def _connect(
        self, endpoints: list[Endpoint], host: str
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        """Try each endpoint in turn; a TLS failure ends the attempt at once."""
        last_error: Optional[OSError] = None
        for endpoint in endpoints:
            try:
                return await asyncio.open_connection(
                    endpoint.address,
                    endpoint.port,
                    ssl=self.ssl_context,
                    server_hostname=host,
                )
            except ssl.SSLError:
                raise
            except OSError as exc:
                last_error = exc
        assert last_error is not None
        raise last_error

    async def post(self, payload: str, info: RequestInfo) -> Response:
        """POST payload as JSON; failures come back as plain-text responses."""
        endpoints = await self._lookup_or_resolve(info.host, info.port)
        if not endpoints:
            return _bad_response("DNS resolve failed", HttpStatus.SERVICE_UNAVAILABLE)

        usable = [ep for ep in endpoints if _is_ip_address(ep.address)]
        if not usable:
            return _bad_response("No valid IPs", HttpStatus.SERVICE_UNAVAILABLE)

        try:
            reader, writer = await self._connect(usable, info.host)
        except ssl.SSLError as exc:
            log.warning("Handshake failed: %s", exc)
            return _bad_response(str(exc), HttpStatus.BAD_GATEWAY)
        except OSError as exc:
            log.warning("Connecting failed: %s", exc)
            return _bad_response(str(exc), HttpStatus.SERVICE_UNAVAILABLE)

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if info.authorization_token:
            headers["Authorization"] = info.authorization_token
        request = Request(
            method=Method.POST, target=info.endpoint, headers=headers, body=payload
        )

        try:
            writer.write(serialize_request(request, info.host))
            await writer.drain()
        except OSError as exc:
            log.warning("Could not write: %s", exc)
            await _close(writer)
            return _bad_response(str(exc), HttpStatus.BAD_GATEWAY)

        try:
            response = await read_response(reader)
        except (ProtocolError, OSError) as exc:
            log.warning("Could not read: %s", exc)
            await _close(writer)
            return _bad_response(str(exc), HttpStatus.BAD_GATEWAY)

        writer.close()
        try:
            await writer.wait_closed()
        except (ssl.SSLEOFError, ConnectionError):
            pass
        except OSError as exc:
            log.warning("Could not shut down: %s", exc)
            return _bad_response(response.body, response.status)
        return response