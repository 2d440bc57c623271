"""Typed WebSocket messages.

Frames carry a ``type`` discriminator and a ``data`` object. Known types map
onto dedicated classes; anything else is kept as `UnknownMessage` so fields the
server adds later survive a round trip.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from .constants import MESSAGE_TYPE_CHAT, MESSAGE_TYPE_ERROR, MESSAGE_TYPE_USER
from .errors import ProtocolError


@dataclass(frozen=True, slots=True)
class UserMessage:
    """Outbound chat text for a conversation."""

    type: ClassVar[str] = MESSAGE_TYPE_USER

    conversation_id: str
    text: str
    extra: dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        data = dict(self.extra)
        data["conversation_id"] = self.conversation_id
        data["text"] = self.text
        return {"type": self.type, "data": data}


@dataclass(frozen=True, slots=True)
class ChatMessage:
    type: ClassVar[str] = MESSAGE_TYPE_CHAT

    data: dict[str, Any]
    raw: dict[str, Any]

    @property
    def text(self) -> str | None:
        value = self.data.get("text")
        return value if isinstance(value, str) else None

    @property
    def role(self) -> str | None:
        value = self.data.get("role")
        return value if isinstance(value, str) else None

    @property
    def conversation_id(self) -> str | None:
        value = self.data.get("conversation_id")
        return value if isinstance(value, str) else None


@dataclass(frozen=True, slots=True)
class ErrorMessage:
    type: ClassVar[str] = MESSAGE_TYPE_ERROR

    data: dict[str, Any]
    raw: dict[str, Any]

    @property
    def error(self) -> str | None:
        for key in ("error", "message"):
            value = self.data.get(key)
            if isinstance(value, str):
                return value
        return None


@dataclass(frozen=True, slots=True)
class UnknownMessage:
    type: str
    data: Any
    raw: dict[str, Any]


InboundMessage = Union[ChatMessage, ErrorMessage, UnknownMessage]

_KNOWN_INBOUND: dict[str, type[ChatMessage] | type[ErrorMessage]] = {
    MESSAGE_TYPE_CHAT: ChatMessage,
    MESSAGE_TYPE_ERROR: ErrorMessage,
}


def parse_message(payload: dict[str, Any]) -> InboundMessage:
    msg_type = payload.get("type")
    if not isinstance(msg_type, str) or not msg_type:
        raise ProtocolError("message type must be a non-empty string", raw=None)

    data = payload.get("data")
    cls = _KNOWN_INBOUND.get(msg_type)
    if cls is None:
        return UnknownMessage(type=msg_type, data=data, raw=payload)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        # a recognized type with a non-object body keeps its payload opaque
        return UnknownMessage(type=msg_type, data=data, raw=payload)
    return cls(data=data, raw=payload)
