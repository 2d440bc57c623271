"""Payload shapes returned by the REST endpoints.

These describe what the service sends today. Responses are handed back
unchanged, so fields the service adds are still present at runtime.
"""

from __future__ import annotations

from typing import Any, Literal, TypedDict

Role = Literal["AI", "AGENT", "USER"]


class Conversation(TypedDict):
    id: str
    role: Role
    text: str
    created_at: str
    time_ago: str
    num_unread_messages: int


class HistoryMessage(TypedDict):
    id: int
    conversation_id: str
    role: Role
    text: str
    created_at: str
    time_ago: str


class NewConversationResponse(TypedDict):
    conversation_id: str


class UserConversationsResponse(TypedDict):
    conversations: list[Conversation]


class ConversationHistoryResponse(TypedDict):
    messages: list[HistoryMessage]
    destination: str


class _ChatCompletionRequired(TypedDict):
    conversation_id: str
    text: str
    flow_id: str
    metadata: Any


class ChatCompletionRequest(_ChatCompletionRequired, total=False):
    action_id: str


class ChatEvent(TypedDict, total=False):
    type: str
    role: Literal["AI", "AGENT"]
    text: str
    channel: str
    choices: list[str]
    message: list[str]
    error: str


class ChatCompletionResponse(TypedDict):
    events: list[ChatEvent]
