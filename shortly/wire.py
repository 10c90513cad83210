"""HTTP/1.1 message framing for requests and responses."""

from __future__ import annotations

import asyncio
from http import HTTPStatus
from typing import Mapping, Optional, Union

from .types import HttpStatus, Method, Request, Response

MAX_REQUEST_BODY = 1024 * 1024
MAX_RESPONSE_BODY = 8 * 1024 * 1024
_MAX_HEADER_LINES = 100

_METHODS = {method.value: method for method in Method if method is not Method.UNKNOWN}
_FRAMING_HEADERS = frozenset({"content-length", "transfer-encoding"})
_BODYLESS_STATUSES = frozenset({204, 304})


class ProtocolError(Exception):
    """A malformed, oversized or truncated HTTP message."""


def _status_from_code(code: int) -> Union[HttpStatus, int]:
    try:
        return HttpStatus(code)
    except ValueError:
        return code


def _reason_phrase(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def _header_block(headers: Mapping[str, str], body: bytes) -> list[str]:
    lines = [
        f"{name}: {value}"
        for name, value in headers.items()
        if name.lower() not in _FRAMING_HEADERS
    ]
    lines.append(f"Content-Length: {len(body)}")
    return lines


def _assemble(start_line: str, header_lines: list[str], body: bytes) -> bytes:
    head = "\r\n".join([start_line, *header_lines]) + "\r\n\r\n"
    return head.encode("latin-1") + body


def serialize_request(request: Request, host: Optional[str] = None) -> bytes:
    """Encode request as HTTP/1.1 bytes; host adds a Host header if none is set."""
    if request.method is Method.UNKNOWN:
        raise ValueError("cannot serialize a request with an unknown method")
    body = request.body.encode("utf-8")
    lines: list[str] = []
    if host and not any(name.lower() == "host" for name in request.headers):
        lines.append(f"Host: {host}")
    lines.extend(_header_block(request.headers, body))
    start = f"{request.method.value} {request.target or '/'} HTTP/1.1"
    return _assemble(start, lines, body)


def serialize_response(response: Response) -> bytes:
    """Encode response as HTTP/1.1 bytes with a matching Content-Length."""
    body = response.body.encode("utf-8")
    code = int(response.status)
    start = f"HTTP/1.1 {code} {_reason_phrase(code)}".rstrip()
    return _assemble(start, _header_block(response.headers, body), body)


async def _read_line(reader: asyncio.StreamReader) -> bytes:
    try:
        line = await reader.readuntil(b"\n")
    except asyncio.IncompleteReadError as exc:
        if not exc.partial:
            raise ProtocolError("connection closed before the message ended") from None
        raise ProtocolError("connection closed mid-line") from None
    except asyncio.LimitOverrunError:
        raise ProtocolError("header line too long") from None
    return line.rstrip(b"\r\n")


async def _read_exactly(reader: asyncio.StreamReader, size: int) -> bytes:
    try:
        return await reader.readexactly(size)
    except asyncio.IncompleteReadError:
        raise ProtocolError("connection closed before the body ended") from None


async def _read_head(reader: asyncio.StreamReader) -> tuple[str, dict[str, str]]:
    start = (await _read_line(reader)).decode("latin-1")
    headers: dict[str, str] = {}
    for _ in range(_MAX_HEADER_LINES):
        line = await _read_line(reader)
        if not line:
            return start, headers
        name, colon, value = line.decode("latin-1").partition(":")
        if not colon or not name.strip():
            raise ProtocolError(f"malformed header line: {line!r}")
        headers.setdefault(name.strip(), value.strip())
    raise ProtocolError("too many header lines")


def _find_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    wanted = name.lower()
    return next(
        (value for key, value in headers.items() if key.lower() == wanted), None
    )


async def _read_chunked(reader: asyncio.StreamReader, limit: int) -> bytes:
    parts: list[bytes] = []
    total = 0
    while True:
        size_text = (await _read_line(reader)).split(b";", 1)[0].strip()
        try:
            size = int(size_text, 16)
        except ValueError:
            raise ProtocolError(f"malformed chunk size: {size_text!r}") from None
        if size < 0:
            raise ProtocolError("negative chunk size")
        if size == 0:
            break
        total += size
        if total > limit:
            raise ProtocolError("body too large")
        parts.append(await _read_exactly(reader, size))
        if await _read_line(reader):
            raise ProtocolError("malformed chunk terminator")
    while await _read_line(reader):
        pass
    return b"".join(parts)


async def _read_to_eof(reader: asyncio.StreamReader, limit: int) -> bytes:
    parts: list[bytes] = []
    total = 0
    while chunk := await reader.read(65536):
        total += len(chunk)
        if total > limit:
            raise ProtocolError("body too large")
        parts.append(chunk)
    return b"".join(parts)


async def _read_body(
    reader: asyncio.StreamReader,
    headers: Mapping[str, str],
    limit: int,
    until_eof: bool,
) -> str:
    encoding = _find_header(headers, "Transfer-Encoding")
    length_text = _find_header(headers, "Content-Length")
    if encoding is not None and "chunked" in encoding.lower():
        data = await _read_chunked(reader, limit)
    elif length_text is not None:
        try:
            length = int(length_text)
        except ValueError:
            raise ProtocolError(f"invalid Content-Length: {length_text!r}") from None
        if length < 0:
            raise ProtocolError("negative Content-Length")
        if length > limit:
            raise ProtocolError("body too large")
        data = await _read_exactly(reader, length)
    elif until_eof:
        data = await _read_to_eof(reader, limit)
    else:
        data = b""
    return data.decode("utf-8", errors="replace")


async def read_request(reader: asyncio.StreamReader) -> Request:
    """Read one HTTP request; raise ProtocolError if it is malformed."""
    start, headers = await _read_head(reader)
    parts = start.split(" ")
    if len(parts) != 3 or not parts[2].startswith("HTTP/"):
        raise ProtocolError(f"malformed request line: {start!r}")
    method_name, target, _version = parts
    body = await _read_body(reader, headers, MAX_REQUEST_BODY, until_eof=False)
    return Request(
        method=_METHODS.get(method_name, Method.UNKNOWN),
        target=target,
        headers=headers,
        body=body,
    )


async def read_response(reader: asyncio.StreamReader) -> Response:
    """Read one HTTP response; raise ProtocolError if it is malformed."""
    start, headers = await _read_head(reader)
    parts = start.split(" ", 2)
    if len(parts) < 2 or not parts[0].startswith("HTTP/"):
        raise ProtocolError(f"malformed status line: {start!r}")
    try:
        code = int(parts[1])
    except ValueError:
        raise ProtocolError(f"malformed status code: {parts[1]!r}") from None
    if code < 200 or code in _BODYLESS_STATUSES:
        body = ""
    else:
        body = await _read_body(reader, headers, MAX_RESPONSE_BODY, until_eof=True)
    return Response(status=_status_from_code(code), headers=headers, body=body)