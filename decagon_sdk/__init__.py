"""Client SDK for the Decagon conversational API."""

from .client import SessionClient
from .codec import CodecError, decode_frame, encode_message
from .config import ClientConfig
from .errors import (
    APIError,
    ConfigurationError,
    DecagonError,
    InvalidInputError,
    NotConnectedError,
    ProtocolError,
    TransportError,
)
from .messages import ChatMessage, ErrorMessage, InboundMessage, UnknownMessage, UserMessage, parse_message
from .security import Credential, CredentialGenerator, compute_signature
from .transport_http import HTTPTransport, UrllibTransport
from .transport_ws import ConnectionState, WebSocketConnection
from .utils import SafeResult, safe_async

__all__ = [
    "SessionClient",
    "ClientConfig",
    "Credential",
    "CredentialGenerator",
    "compute_signature",
    "ConnectionState",
    "WebSocketConnection",
    "HTTPTransport",
    "UrllibTransport",
    "UserMessage",
    "ChatMessage",
    "ErrorMessage",
    "UnknownMessage",
    "InboundMessage",
    "parse_message",
    "encode_message",
    "decode_frame",
    "CodecError",
    "DecagonError",
    "InvalidInputError",
    "ConfigurationError",
    "NotConnectedError",
    "ProtocolError",
    "TransportError",
    "APIError",
    "SafeResult",
    "safe_async",
]

__version__ = "0.1.0"
