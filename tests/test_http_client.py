import asyncio
import socket
import ssl

import pytest

from shortly.dns import DnsCache
from shortly.http_client import HttpClient
from shortly.types import Endpoint, HttpStatus, RequestInfo


class FakeResolver:
    def __init__(self, endpoints):
        self.endpoints = endpoints
        self.calls = []

    async def resolve(self, host, port):
        self.calls.append((host, port))
        return list(self.endpoints)


def _info():
    return RequestInfo(
        host="localhost",
        endpoint="/create",
        port="https",
        authorization_token="Bearer token",
    )


@pytest.fixture
def closed_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.mark.asyncio
async def test_dns_failure_gives_service_unavailable():
    cache = DnsCache()
    client = HttpClient(cache, FakeResolver([]), ssl.create_default_context())
    response = await client.post("{}", _info())
    assert response.status == HttpStatus.SERVICE_UNAVAILABLE
    assert response.body == "DNS resolve failed"
    assert response.headers == {"Content-Type": "text/plain"}
    assert cache.find_entry("localhost", "https") == []


@pytest.mark.asyncio
async def test_no_valid_ip_addresses():
    client = HttpClient(DnsCache(), FakeResolver([Endpoint("not-an-ip", 443)]))
    response = await client.post("{}", _info())
    assert response.status == HttpStatus.SERVICE_UNAVAILABLE
    assert response.body == "No valid IPs"


@pytest.mark.asyncio
async def test_resolved_endpoints_are_cached(closed_port):
    endpoint = Endpoint("127.0.0.1", closed_port)
    cache = DnsCache()
    resolver = FakeResolver([endpoint])
    client = HttpClient(cache, resolver)
    response = await client.post("{}", _info())
    assert response.status == HttpStatus.SERVICE_UNAVAILABLE
    assert resolver.calls == [("localhost", "https")]
    assert cache.find_entry("localhost", "https") == [endpoint]


@pytest.mark.asyncio
async def test_cached_entry_skips_resolver(closed_port):
    cache = DnsCache()
    cache.update_or_add_entry("localhost", "https", [Endpoint("127.0.0.1", closed_port)])
    resolver = FakeResolver([])
    client = HttpClient(cache, resolver)
    response = await client.post("{}", _info())
    assert resolver.calls == []
    assert response.status == HttpStatus.SERVICE_UNAVAILABLE
    assert response.headers == {"Content-Type": "text/plain"}


@pytest.mark.asyncio
async def test_failed_handshake_gives_bad_gateway():
    async def not_tls(reader, writer):
        await reader.read(1)
        writer.write(b"HTTP/1.1 400 Bad Request\r\n\r\n")
        await writer.drain()
        writer.close()

    server = await asyncio.start_server(not_tls, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        client = HttpClient(
            DnsCache(),
            FakeResolver([Endpoint("127.0.0.1", port)]),
            ssl.create_default_context(),
        )
        response = await asyncio.wait_for(client.post("{}", _info()), 10)
    finally:
        server.close()
        await server.wait_closed()
    assert response.status == HttpStatus.BAD_GATEWAY
    assert response.headers == {"Content-Type": "text/plain"}