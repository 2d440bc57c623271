"""Small utility helpers."""

from __future__ import annotations

import json
import math
import urllib.parse
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

from .errors import InvalidInputError

T = TypeVar("T")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidInputError(f"{field_name} must be a non-empty string")
    return value


def require_number(value: Any, field_name: str) -> int | float:
    # bool is an int subclass but never a valid score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{field_name} must be a number")
    if not math.isfinite(value):
        raise InvalidInputError(f"{field_name} must be finite")
    return value


def compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def join_url(base_url: str, path: str, params: dict[str, str] | None = None) -> str:
    url = base_url.rstrip("/") + "/" + path.lstrip("/")
    if params:
        url = f"{url}?{urllib.parse.urlencode(params)}"
    return url


def with_query(url: str, params: dict[str, str]) -> str:
    parts = urllib.parse.urlsplit(url)
    query = urllib.parse.urlencode(params)
    if parts.query:
        query = f"{parts.query}&{query}"
    return urllib.parse.urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def derive_ws_url(base_url: str, path: str) -> str:
    """Map an http(s) base URL onto the matching ws(s) endpoint."""
    parts = urllib.parse.urlsplit(base_url)
    scheme = {"https": "wss", "http": "ws"}.get(parts.scheme, parts.scheme)
    base_path = parts.path.rstrip("/")
    return urllib.parse.urlunsplit((scheme, parts.netloc, base_path + path, "", ""))


def strip_query(url: str) -> str:
    parts = urllib.parse.urlsplit(url)
    return urllib.parse.urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


@dataclass(frozen=True)
class SafeResult(Generic[T]):
    """Outcome of `safe_async`: exactly one of `data` / `error` is meaningful."""

    data: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def safe_async(factory: Callable[[], Awaitable[T]]) -> SafeResult[T]:
    try:
        data = await factory()
    except Exception as exc:
        return SafeResult(error=exc)
    return SafeResult(data=data)
