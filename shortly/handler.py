"""The shortening use case: request body in, JSON result out."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .exceptions import ProviderError, ValidationError
from .parser import JsonParser
from .providers import ProviderFactory
from .types import HttpStatus, Request, Response

log = logging.getLogger(__name__)


def _json_response(
    result: int,
    reason: str,
    status: HttpStatus,
    data: Optional[dict[str, Any]] = None,
) -> Response:
    document: dict[str, Any] = {"result": result, "reason": reason}
    if data:
        document["data"] = data
    return Response(
        status=status,
        headers={"Content-Type": "application/json"},
        body=json.dumps(document, separators=(",", ":"), ensure_ascii=False),
    )


class ShortlyHandler:
    """Handles POST /shortly requests."""

    def __init__(self, parser: JsonParser, provider_factory: ProviderFactory) -> None:
        self.parser = parser
        self.provider_factory = provider_factory

    async def handle(self, request: Request) -> Response:
        """Shorten the URL in the request body and describe the outcome."""
        try:
            if not request.body:
                raise ValidationError("Request body is empty")

            url, provider_type = self.parser.parse(request.body)
            provider = self.provider_factory.create_provider(provider_type)
            shortened = await provider.shorten(url)
            return _json_response(
                0, "", HttpStatus.OK, {"url": url, "shortened": shortened}
            )
        except ValidationError as exc:
            log.info("Validation error: %s", exc)
            return _json_response(1, str(exc), HttpStatus.BAD_REQUEST)
        except ProviderError as exc:
            log.info("Provider error: %s, status: %d", exc, int(exc.code))
            return _json_response(1, str(exc), exc.code)
        except OSError as exc:
            log.warning("System error: %s", exc)
            return _json_response(1, str(exc), HttpStatus.INTERNAL_SERVER_ERROR)