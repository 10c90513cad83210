"""The listening HTTP server and its per-connection sessions."""

from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass
from typing import Optional

from .router import Router
from .wire import ProtocolError, read_request, serialize_response

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerSettings:
    """Where the server listens."""

    port: int = 8080
    host: str = "0.0.0.0"


class Session:
    """Serves one request on one connection, then closes it."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        router: Router,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.router = router

    async def run(self) -> None:
        """Read a request, route it and write the response back."""
        try:
            try:
                request = await read_request(self.reader)
            except (ProtocolError, OSError) as exc:
                log.info("Could not read request: %s", exc)
                return
            response = await self.router.route(request)
            try:
                self.writer.write(serialize_response(response))
                await self.writer.drain()
                if self.writer.can_write_eof():
                    self.writer.write_eof()
            except OSError as exc:
                log.info("Could not write response: %s", exc)
        finally:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except OSError:
                pass


class Server:
    """Accepts connections and hands each to a Session until stopped."""

    def __init__(self, settings: ServerSettings, router: Router) -> None:
        self.settings = settings
        self.router = router
        self.port: Optional[int] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._stop_requested = False

    async def _on_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        try:
            await Session(reader, writer, self.router).run()
        except Exception:
            log.exception("Session failed")

    def _on_signal(self, signum: int) -> None:
        log.info("Received signal %d", signum)
        self.stop()

    def _install_signal_handlers(self) -> list[int]:
        assert self._loop is not None
        installed = []
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                self._loop.add_signal_handler(signum, self._on_signal, signum)
            except (NotImplementedError, RuntimeError, ValueError):
                continue
            installed.append(signum)
        return installed

    async def serve(self) -> None:
        """Listen and serve until stop() is called or a signal arrives."""
        self._loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        if self._stop_requested:
            self._stop_event.set()
        server = await asyncio.start_server(
            self._on_connection, self.settings.host, self.settings.port
        )
        self.port = server.sockets[0].getsockname()[1]
        log.info("HTTP Server running on port %d...", self.port)
        installed = self._install_signal_handlers()
        try:
            async with server:
                await self._stop_event.wait()
        finally:
            for signum in installed:
                self._loop.remove_signal_handler(signum)

    def start(self) -> None:
        """Run the server in a fresh event loop until it stops."""
        asyncio.run(self.serve())

    def stop(self) -> None:
        """Ask the server to stop accepting and shut down."""
        log.info("Shutting down server...")
        self._stop_requested = True
        if self._loop is not None and self._stop_event is not None:
            self._loop.call_soon_threadsafe(self._stop_event.set)