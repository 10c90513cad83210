"""Dispatch of requests to handlers by method and path."""

from __future__ import annotations

import logging
from typing import Optional

from .ports import Handler
from .types import HttpStatus, Method, Request, Response

log = logging.getLogger(__name__)

_ROUTABLE = frozenset({Method.GET, Method.POST, Method.DELETE, Method.PUT})


class Router:
    """Maps (method, path) pairs to handlers; unknown routes get 404."""

    def __init__(self) -> None:
        self._routes: dict[Method, dict[str, Handler]] = {}

    def add_route(self, method: Method, path: str, handler: Optional[Handler]) -> None:
        """Register handler; an empty path, no handler or unknown method is ignored."""
        if not path or handler is None:
            return
        if method not in _ROUTABLE:
            log.warning("Unsupported method %s", method)
            return
        self._routes.setdefault(method, {})[path] = handler

    async def route(self, request: Request) -> Response:
        """Run the matching handler, or answer 404 Not Found."""
        handler = self._routes.get(request.method, {}).get(request.target)
        if handler is not None:
            return await handler.handle(request)
        return Response(
            status=HttpStatus.NOT_FOUND,
            headers={"Content-Type": "text/plain"},
            body="Not Found",
        )