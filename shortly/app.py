"""Composition root and command-line entry point of the service."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import ssl
from typing import Optional, Sequence

from .dns import DnsCache, DnsResolver
from .handler import ShortlyHandler
from .http_client import HttpClient
from .parser import JsonParser
from .ports import CacheClient, EnvReader
from .providers import ProviderFactory
from .redis_cache import RedisCache
from .router import Router
from .server import Server, ServerSettings
from .types import Method
from .validation import JsonValidator, KeyCountRule, KeyRule

log = logging.getLogger(__name__)


class _OsEnvironment:
    """Reads configuration from process environment variables."""

    def get(self, key: str) -> str:
        return os.environ.get(key, "")


def _tls_client_context() -> ssl.SSLContext:
    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
    context.minimum_version = ssl.TLSVersion.TLSv1_3
    return context


class Application:
    """Wires parser, validator, providers, cache and router together."""

    def __init__(
        self,
        env: Optional[EnvReader] = None,
        cache: Optional[CacheClient] = None,
    ) -> None:
        self.env: EnvReader = env if env is not None else _OsEnvironment()
        self.validator = JsonValidator(
            [KeyCountRule(1, 2), KeyRule(["url"], {"provider"})]
        )
        self.parser = JsonParser(self.validator)
        self.http_client = HttpClient(DnsCache(), DnsResolver(), _tls_client_context())

        if cache is None:
            host = self.env.get("REDIS_HOST")
            port = self.env.get("REDIS_PORT")
            log.info("Redis host is %s", host)
            log.info("Redis port is %s", port)
            cache = RedisCache(host, port)
        self.cache: CacheClient = cache

        self.provider_factory = ProviderFactory(self.http_client, self.env, self.cache)
        self.router = Router()
        self.router.add_route(
            Method.POST, "/shortly", ShortlyHandler(self.parser, self.provider_factory)
        )


async def _serve(app: Application, settings: ServerSettings) -> None:
    server = Server(settings, app.router)
    try:
        await server.serve()
    finally:
        if isinstance(app.cache, RedisCache):
            await app.cache.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the URL shortening service until interrupted."""
    parser = argparse.ArgumentParser(
        prog="shortly", description="HTTP service that shortens URLs."
    )
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=8080, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    try:
        app = Application()
        asyncio.run(_serve(app, ServerSettings(port=args.port, host=args.host)))
    except Exception as exc:
        print(f"Server error: {exc}")
    return 0