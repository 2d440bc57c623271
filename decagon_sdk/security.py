"""Credential derivation for per-user authentication."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from cryptography.hazmat.primitives import hashes, hmac

from .constants import (
    HEADER_EPOCH,
    HEADER_SIGNATURE,
    HEADER_TEAM_ID,
    HEADER_USER_ID,
    TOKEN_TTL_SECONDS,
    WS_PARAM_EPOCH,
    WS_PARAM_SIGNATURE,
    WS_PARAM_TEAM_ID,
    WS_PARAM_USER_ID,
)
from .errors import ConfigurationError, InvalidInputError


@dataclass(frozen=True, slots=True)
class Credential:
    """Signed, time-bounded proof of identity for one request or connection."""

    subject_id: str
    expiry: int
    signature: str

    def as_headers(self, team_id: str) -> dict[str, str]:
        return {
            HEADER_USER_ID: self.subject_id,
            HEADER_TEAM_ID: team_id,
            HEADER_SIGNATURE: self.signature,
            HEADER_EPOCH: str(self.expiry),
        }

    def as_query_params(self, team_id: str) -> dict[str, str]:
        return {
            WS_PARAM_USER_ID: self.subject_id,
            WS_PARAM_TEAM_ID: team_id,
            WS_PARAM_SIGNATURE: self.signature,
            WS_PARAM_EPOCH: str(self.expiry),
        }


def compute_signature(shared_secret: str, subject_id: str, expiry: int) -> str:
    """Lowercase hex HMAC-SHA256 of ``subject_id`` immediately followed by ``expiry``."""
    mac = hmac.HMAC(shared_secret.encode("utf-8"), hashes.SHA256())
    mac.update(f"{subject_id}{expiry}".encode("utf-8"))
    return mac.finalize().hex()


class CredentialGenerator:
    """Mints a fresh credential on every call.

    Credentials are never cached: two calls within the same wall-clock second
    yield identical credentials, calls across a second boundary do not.
    """

    def __init__(self, shared_secret: str | None, *, clock: Callable[[], float] = time.time) -> None:
        self._shared_secret = shared_secret
        self._clock = clock

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shared_secret=<redacted>)"

    def generate(self, subject_id: str) -> Credential:
        if not isinstance(self._shared_secret, str) or not self._shared_secret:
            raise ConfigurationError("shared secret is not configured")
        if not isinstance(subject_id, str) or not subject_id:
            raise InvalidInputError("subject_id must be a non-empty string")

        expiry = int(self._clock()) + TOKEN_TTL_SECONDS
        return Credential(
            subject_id=subject_id,
            expiry=expiry,
            signature=compute_signature(self._shared_secret, subject_id, expiry),
        )
