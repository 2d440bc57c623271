"""Error taxonomy shared by the credential, REST and WebSocket layers."""

from __future__ import annotations

from typing import Any


class DecagonError(Exception):
    """Base class for every error raised by the SDK."""


class InvalidInputError(DecagonError, ValueError):
    """Raised when a required argument is missing or empty."""


class ConfigurationError(DecagonError, ValueError):
    """Raised when the client is configured without a usable secret or endpoint."""


class NotConnectedError(DecagonError):
    """Raised when a frame is sent while the connection is not open."""


class ProtocolError(DecagonError, ValueError):
    """Raised on malformed frames or messages that cannot be serialized."""

    def __init__(self, message: str, *, raw: bytes | str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class TransportError(DecagonError):
    """Raised on network or socket failures."""


class APIError(TransportError):
    """Raised when the service answers with an HTTP error status."""

    def __init__(self, status_code: int, message: str, *, payload: Any = None) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.payload = payload
