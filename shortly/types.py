"""Domain types shared by every layer of the service."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from http import HTTPStatus


class ProviderType(Enum):
    """Upstream URL shortening services."""

    BITLY = 0
    TINYURL = 1


class HttpStatus(IntEnum):
    """HTTP status codes the service produces or understands."""

    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    MOVED_PERMANENTLY = 301
    FOUND = 302
    NOT_MODIFIED = 304

    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    CONFLICT = 409
    PAYLOAD_TOO_LARGE = 413
    UNSUPPORTED_MEDIA_TYPE = 415

    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504

    @property
    def phrase(self) -> str:
        """The standard reason phrase for this status."""
        return HTTPStatus(int(self)).phrase


class Method(Enum):
    """HTTP request methods; UNKNOWN stands for anything else."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"
    PUT = "PUT"
    UNKNOWN = "UNKNOWN"


@dataclass
class Request:
    """An incoming HTTP request."""

    method: Method = Method.GET
    target: str = "/"
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


@dataclass
class Response:
    """An HTTP response, either produced by the service or received upstream."""

    status: HttpStatus = HttpStatus.OK
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


@dataclass
class RequestInfo:
    """Where and how to send an upstream request."""

    host: str
    endpoint: str
    port: str
    authorization_token: str = ""


@dataclass(frozen=True)
class Endpoint:
    """A resolved network address."""

    address: str
    port: int