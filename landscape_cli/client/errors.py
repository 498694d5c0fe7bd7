from __future__ import annotations

from typing import Any


class LandscapeClientError(Exception):
    pass


class TransportError(LandscapeClientError):
    """Raised when the request never produced an HTTP response."""


class AuthError(LandscapeClientError):
    """Raised when a credential exchange fails."""


class DecodeError(LandscapeClientError):
    """Raised when a payload cannot be read as the requested shape.

    ``raw`` keeps the undecoded body so callers can still report it.
    """

    def __init__(self, message: str, *, raw: bytes = b"", response: Any = None) -> None:
        super().__init__(message)
        self.raw = raw
        self.response = response
