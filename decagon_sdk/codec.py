"""Frame encoding/decoding."""

from __future__ import annotations

import json
from typing import Any, Mapping

from .errors import ProtocolError
from .utils import compact_json


class CodecError(ProtocolError):
    """Raised on encoding/decoding failures."""


def encode_message(message: Mapping[str, Any]) -> str:
    if not isinstance(message, Mapping):
        raise CodecError("message must be a mapping")
    try:
        return compact_json(dict(message))
    except (TypeError, ValueError) as exc:
        raise CodecError(f"failed to encode message: {exc}") from exc


def decode_frame(frame: bytes | str) -> dict[str, Any]:
    try:
        if isinstance(frame, (bytes, bytearray)):
            decoded = json.loads(bytes(frame).decode("utf-8"))
        else:
            decoded = json.loads(frame)
    except (UnicodeDecodeError, ValueError) as exc:
        raise CodecError(f"invalid JSON frame: {exc}", raw=frame) from exc

    if not isinstance(decoded, dict):
        raise CodecError("decoded frame must be an object", raw=frame)
    return decoded
