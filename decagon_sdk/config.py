"""Immutable client configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import DEFAULT_OPEN_TIMEOUT_S, DEFAULT_TIMEOUT_S, DEFAULT_WS_PATH
from .errors import ConfigurationError
from .utils import derive_ws_url


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Endpoint and team settings for one `SessionClient`."""

    base_url: str
    team_id: str
    shared_secret: str = field(repr=False)
    ws_url: str | None = None
    timeout_s: float = DEFAULT_TIMEOUT_S
    open_timeout_s: float = DEFAULT_OPEN_TIMEOUT_S

    def __post_init__(self) -> None:
        if not isinstance(self.base_url, str) or not self.base_url:
            raise ConfigurationError("base_url must be a non-empty string")
        if not isinstance(self.team_id, str) or not self.team_id:
            raise ConfigurationError("team_id must be a non-empty string")
        if not isinstance(self.shared_secret, str) or not self.shared_secret:
            raise ConfigurationError("shared_secret must be a non-empty string")
        if self.timeout_s <= 0 or self.open_timeout_s <= 0:
            raise ConfigurationError("timeouts must be positive")
        if self.ws_url is None:
            object.__setattr__(self, "ws_url", derive_ws_url(self.base_url, DEFAULT_WS_PATH))
