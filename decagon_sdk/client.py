"""Session client: authenticated REST calls and the live conversation channel."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from .config import ClientConfig
from .constants import (
    PATH_CHAT_COMPLETION,
    PATH_CONVERSATION_HISTORY,
    PATH_CONVERSATION_MARK_READ,
    PATH_CONVERSATION_NEW,
    PATH_CONVERSATION_USER,
    PATH_CSAT_SET,
    WS_PARAM_CONVERSATION_ID,
)
from .errors import InvalidInputError, NotConnectedError
from .models import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ConversationHistoryResponse,
    NewConversationResponse,
    UserConversationsResponse,
)
from .security import CredentialGenerator
from .transport_http import HTTPTransport, UrllibTransport
from .transport_ws import (
    CloseHandler,
    ConnectionState,
    Connector,
    ErrorHandler,
    MessageHandler,
    OpenHandler,
    OutboundMessage,
    WebSocketConnection,
    default_connector,
)
from .utils import require_non_empty, require_number, with_query

logger = logging.getLogger(__name__)


class SessionClient:
    """Client for one team/secret pair.

    Every REST call and every connection gets a freshly minted credential.
    Auth headers are built per request and handed straight to the transport,
    so overlapping calls never observe each other's headers.
    """

    def __init__(
        self,
        base_url: str,
        team_id: str,
        shared_secret: str,
        *,
        ws_url: str | None = None,
        timeout_s: float | None = None,
        transport: HTTPTransport | None = None,
        connector: Connector | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        config_kwargs: dict[str, Any] = {"ws_url": ws_url}
        if timeout_s is not None:
            config_kwargs["timeout_s"] = timeout_s
        self.config = ClientConfig(base_url=base_url, team_id=team_id, shared_secret=shared_secret, **config_kwargs)
        self.credentials = CredentialGenerator(shared_secret, clock=clock)
        self._transport = transport or UrllibTransport(self.config.base_url, timeout_s=self.config.timeout_s)
        self._connector = connector or default_connector(self.config.open_timeout_s)
        self._connection: WebSocketConnection | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.config.base_url!r}, team_id={self.config.team_id!r})"

    async def __aenter__(self) -> "SessionClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def authenticate(self, subject_id: str) -> dict[str, str]:
        """Return a new set of auth headers for ``subject_id``."""
        credential = self.credentials.generate(subject_id)
        return credential.as_headers(self.config.team_id)

    async def create_conversation(
        self,
        subject_id: str,
        flow_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> NewConversationResponse:
        require_non_empty(subject_id, "subject_id")
        require_non_empty(flow_id, "flow_id")
        body = {"flow_id": flow_id, "metadata": metadata if metadata is not None else {}}
        return await self._request("POST", PATH_CONVERSATION_NEW, subject_id, body=body)

    async def list_conversations(self, subject_id: str) -> UserConversationsResponse:
        require_non_empty(subject_id, "subject_id")
        return await self._request("GET", PATH_CONVERSATION_USER, subject_id)

    async def get_history(self, subject_id: str, conversation_id: str) -> ConversationHistoryResponse:
        require_non_empty(subject_id, "subject_id")
        require_non_empty(conversation_id, "conversation_id")
        return await self._request(
            "GET",
            PATH_CONVERSATION_HISTORY,
            subject_id,
            params={"conversation_id": conversation_id},
        )

    async def send_chat_turn(
        self,
        subject_id: str,
        conversation_id: str,
        text: str,
        flow_id: str,
        metadata: dict[str, Any] | None = None,
        action_id: str | None = None,
    ) -> ChatCompletionResponse:
        require_non_empty(subject_id, "subject_id")
        require_non_empty(conversation_id, "conversation_id")
        require_non_empty(text, "text")
        require_non_empty(flow_id, "flow_id")
        if action_id is not None:
            require_non_empty(action_id, "action_id")

        body: ChatCompletionRequest = {
            "conversation_id": conversation_id,
            "text": text,
            "flow_id": flow_id,
            "metadata": metadata if metadata is not None else {},
        }
        if action_id is not None:
            body["action_id"] = action_id
        return await self._request("POST", PATH_CHAT_COMPLETION, subject_id, body=body)

    async def mark_read(self, subject_id: str, conversation_id: str) -> Any:
        require_non_empty(subject_id, "subject_id")
        require_non_empty(conversation_id, "conversation_id")
        return await self._request(
            "POST",
            PATH_CONVERSATION_MARK_READ,
            subject_id,
            body={"conversation_id": conversation_id},
        )

    async def set_satisfaction_score(self, subject_id: str, conversation_id: str, score: int | float) -> Any:
        require_non_empty(subject_id, "subject_id")
        require_non_empty(conversation_id, "conversation_id")
        require_number(score, "score")
        return await self._request(
            "POST",
            PATH_CSAT_SET,
            subject_id,
            body={"conversation_id": conversation_id, "score": score},
        )

    async def _request(
        self,
        method: str,
        path: str,
        subject_id: str,
        *,
        params: dict[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        headers = self.authenticate(subject_id)
        return await self._transport.request(method, path, headers=headers, params=params, body=body)

    @property
    def connection(self) -> WebSocketConnection | None:
        return self._connection

    @property
    def state(self) -> ConnectionState:
        if self._connection is None:
            return ConnectionState.IDLE
        return self._connection.state

    async def connect(
        self,
        subject_id: str,
        conversation_id: str | None = None,
        on_open: OpenHandler | None = None,
        on_message: MessageHandler | None = None,
        *,
        on_error: ErrorHandler | None = None,
        on_close: CloseHandler | None = None,
    ) -> WebSocketConnection:
        """Open the conversation channel, closing any previous one first."""
        require_non_empty(subject_id, "subject_id")
        if on_message is None or not callable(on_message):
            raise InvalidInputError("on_message handler is required")
        if conversation_id is not None:
            require_non_empty(conversation_id, "conversation_id")

        # another connect() may claim the slot while a close is awaited
        while self._connection is not None:
            previous, self._connection = self._connection, None
            await previous.close()

        credential = self.credentials.generate(subject_id)
        params = credential.as_query_params(self.config.team_id)
        if conversation_id is not None:
            params[WS_PARAM_CONVERSATION_ID] = conversation_id

        connection = WebSocketConnection(
            with_query(str(self.config.ws_url), params),
            on_message=on_message,
            on_open=on_open,
            on_error=on_error,
            on_close=on_close,
            connector=self._connector,
        )
        self._connection = connection
        await connection.open()
        return connection

    async def send(self, message: OutboundMessage) -> None:
        if self._connection is None:
            state = ConnectionState.IDLE.value
            logger.warning("dropping outbound message: connection is %s", state)
            raise NotConnectedError(f"cannot send while connection is {state}")
        await self._connection.send(message)

    async def close(self) -> None:
        if self._connection is None:
            return
        await self._connection.close()
