"""Errors raised while handling a shortening request."""

from __future__ import annotations

from .types import HttpStatus


class ValidationError(Exception):
    """The client's request is malformed or breaks a rule."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    def __str__(self) -> str:
        return self.reason


class ProviderError(Exception):
    """An upstream provider failed; carries the status to report."""

    def __init__(self, reason: str, code: HttpStatus) -> None:
        super().__init__(reason)
        self.reason = reason
        self.code = code

    def __str__(self) -> str:
        return self.reason