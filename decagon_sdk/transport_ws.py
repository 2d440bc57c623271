"""WebSocket transport binding with an explicit connection state machine."""

from __future__ import annotations

import asyncio
import contextlib
import enum
import inspect
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Mapping, Protocol, Union

from websockets.asyncio.client import connect as websockets_connect

from .codec import decode_frame, encode_message
from .constants import DEFAULT_OPEN_TIMEOUT_S
from .errors import DecagonError, NotConnectedError, ProtocolError, TransportError
from .messages import InboundMessage, UserMessage, parse_message
from .utils import strip_query

logger = logging.getLogger(__name__)


class Socket(Protocol):
    """The subset of a websockets client connection used here."""

    async def send(self, message: str) -> None:
        ...

    async def close(self) -> None:
        ...

    def __aiter__(self) -> AsyncIterator[str | bytes]:
        ...


Connector = Callable[[str], Awaitable[Socket]]
OpenHandler = Callable[[], Any]
MessageHandler = Callable[[InboundMessage], Any]
ErrorHandler = Callable[[DecagonError], Any]
CloseHandler = Callable[[], Any]
OutboundMessage = Union[Mapping[str, Any], UserMessage]


class ConnectionState(str, enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class ConnectionEvent:
    """One item on the connection's event channel."""

    kind: str
    message: InboundMessage | None = None
    error: DecagonError | None = None


_STOP = object()


def default_connector(open_timeout_s: float = DEFAULT_OPEN_TIMEOUT_S) -> Connector:
    async def _connect(url: str) -> Socket:
        return await websockets_connect(url, open_timeout=open_timeout_s)

    return _connect


class WebSocketConnection:
    """A single-use WebSocket connection.

    States move ``idle -> connecting -> open -> closed`` and never back. The
    receive loop is the only producer on the event queue; one dispatcher task
    consumes it and calls the registered handlers in arrival order. The queue
    is unbounded, and sends while not open are rejected rather than buffered.
    """

    def __init__(
        self,
        url: str,
        *,
        on_message: MessageHandler,
        on_open: OpenHandler | None = None,
        on_error: ErrorHandler | None = None,
        on_close: CloseHandler | None = None,
        connector: Connector | None = None,
    ) -> None:
        self._url = url
        self._on_message = on_message
        self._on_open = on_open
        self._on_error = on_error
        self._on_close = on_close
        self._connector = connector or default_connector()

        self._state = ConnectionState.IDLE
        self._socket: Socket | None = None
        self._events: asyncio.Queue[Any] = asyncio.Queue()
        self._receive_task: asyncio.Task[None] | None = None
        self._dispatch_task: asyncio.Task[None] | None = None
        self._finalized = False
        self.last_error: DecagonError | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={strip_query(self._url)!r}, state={self._state.value!r})"

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ConnectionState.OPEN

    async def open(self) -> None:
        if self._state is not ConnectionState.IDLE:
            raise RuntimeError(f"connection cannot be opened from state {self._state.value}")

        self._state = ConnectionState.CONNECTING
        self._dispatch_task = asyncio.create_task(self._dispatch_loop())
        logger.debug("connecting to %s", strip_query(self._url))

        try:
            socket = await self._connector(self._url)
        except asyncio.CancelledError:
            self._finalize()
            raise
        except Exception as exc:
            error = TransportError(f"websocket connect failed: {exc}")
            self.last_error = error
            self._finalize()
            raise error from exc

        if self._state is ConnectionState.CLOSED:
            # close() ran while the handshake was in flight
            await _close_quietly(socket)
            return

        self._socket = socket
        self._state = ConnectionState.OPEN
        self._events.put_nowait(ConnectionEvent("open"))
        self._receive_task = asyncio.create_task(self._receive_loop(socket))
        logger.debug("websocket open")

    async def send(self, message: OutboundMessage) -> None:
        if self._state is not ConnectionState.OPEN or self._socket is None:
            logger.warning("dropping outbound message: connection is %s", self._state.value)
            raise NotConnectedError(f"cannot send while connection is {self._state.value}")

        payload = message.to_wire() if isinstance(message, UserMessage) else message
        text = encode_message(payload)
        try:
            await self._socket.send(text)
        except Exception as exc:
            raise TransportError(f"websocket send failed: {exc}") from exc

    async def close(self) -> None:
        if self._state is ConnectionState.CLOSED and self._receive_task is None:
            return

        self._state = ConnectionState.CLOSED
        socket, self._socket = self._socket, None
        if socket is not None:
            await _close_quietly(socket)

        receive_task, self._receive_task = self._receive_task, None
        if receive_task is not None and receive_task is not asyncio.current_task():
            if not receive_task.done():
                receive_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await receive_task

        self._finalize()
        await self.wait_closed()

    async def wait_closed(self) -> None:
        """Wait until every queued event has been delivered after close."""
        task = self._dispatch_task
        if task is None or task is asyncio.current_task() or not self._finalized:
            return
        await asyncio.shield(task)

    async def _receive_loop(self, socket: Socket) -> None:
        try:
            async for frame in socket:
                self._events.put_nowait(self._decode(frame))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            error = TransportError(f"websocket receive failed: {exc}")
            self.last_error = error
            self._events.put_nowait(ConnectionEvent("error", error=error))
        finally:
            self._state = ConnectionState.CLOSED
            self._socket = None
            self._finalize()

    def _decode(self, frame: str | bytes) -> ConnectionEvent:
        try:
            message = parse_message(decode_frame(frame))
        except ProtocolError as exc:
            if exc.raw is None:
                exc.raw = frame
            self.last_error = exc
            logger.debug("discarding malformed frame: %s", exc)
            return ConnectionEvent("error", error=exc)
        return ConnectionEvent("message", message=message)

    def _finalize(self) -> None:
        self._state = ConnectionState.CLOSED
        if self._finalized:
            return
        self._finalized = True
        self._events.put_nowait(ConnectionEvent("close"))
        self._events.put_nowait(_STOP)
        logger.debug("websocket closed")

    async def _dispatch_loop(self) -> None:
        while True:
            event = await self._events.get()
            if event is _STOP:
                return
            if event.kind == "open":
                await self._invoke(self._on_open)
            elif event.kind == "message":
                await self._invoke(self._on_message, event.message)
            elif event.kind == "error":
                if self._on_error is None:
                    logger.warning("unhandled websocket error: %s", event.error)
                else:
                    await self._invoke(self._on_error, event.error)
            elif event.kind == "close":
                await self._invoke(self._on_close)

    async def _invoke(self, handler: Callable[..., Any] | None, *args: Any) -> None:
        if handler is None:
            return
        try:
            result = handler(*args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("websocket event handler failed")


async def _close_quietly(socket: Socket) -> None:
    try:
        await socket.close()
    except Exception as exc:
        logger.debug("socket close raised: %s", exc)
