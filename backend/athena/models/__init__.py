"""Pydantic models for the Athena chat backend."""

from athena.models.chat import (
    ChatMessage,
    ChatMessagesResponse,
    ChatRole,
    ChatSession,
    ChatSummary,
    ChatTurnResponse,
    CreateChatRequest,
    CreateChatResponse,
    FileDescriptor,
    RenameChatRequest,
    RenameChatResponse,
)
from athena.models.user import ProfileUpdate, User

__all__ = [
    # Chat sessions
    "ChatRole",
    "ChatMessage",
    "ChatSession",
    "ChatSummary",
    "FileDescriptor",
    # Chat API payloads
    "CreateChatRequest",
    "CreateChatResponse",
    "RenameChatRequest",
    "RenameChatResponse",
    "ChatMessagesResponse",
    "ChatTurnResponse",
    # Users
    "User",
    "ProfileUpdate",
]
