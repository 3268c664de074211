"""Pydantic models for chat sessions and their messages."""

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def _generate_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ChatRole(str, Enum):
    """Role of a chat message sender."""

    USER = "user"
    ASSISTANT = "assistant"


class FileDescriptor(BaseModel):
    """Name and declared MIME type of a file sent with a message.

    The file's bytes are never stored.
    """

    name: str
    type: str


class ChatMessage(BaseModel):
    """A single message embedded in a chat session."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = Field(default_factory=_generate_id)
    role: ChatRole
    content: str | None = None
    file: FileDescriptor | None = None
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")


class ChatSession(BaseModel):
    """A user-owned conversation with its ordered message history."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    title: str
    messages: list[ChatMessage] = Field(default_factory=list)
    version: int = 1
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @property
    def has_files(self) -> bool:
        """Whether any message in the session carried a file."""
        return any(m.file is not None for m in self.messages)


class ChatSummary(BaseModel):
    """Entry in a user's chat list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    updated_at: datetime = Field(alias="updatedAt")


# ==================== API payloads ====================


class CreateChatRequest(BaseModel):
    """Request to start a new chat."""

    title: str | None = None


class CreateChatResponse(BaseModel):
    """Response after creating a chat."""

    model_config = ConfigDict(populate_by_name=True)

    chat_id: str = Field(alias="chatId")
    title: str


class RenameChatRequest(BaseModel):
    """Request to rename a chat."""

    model_config = ConfigDict(populate_by_name=True)

    new_title: str | None = Field(default=None, alias="newTitle")


class RenameChatResponse(BaseModel):
    """Response after renaming a chat."""

    message: str
    chat: ChatSession


class ChatMessagesResponse(BaseModel):
    """All messages of one chat."""

    messages: list[ChatMessage]


class ChatTurnResponse(BaseModel):
    """The two messages persisted by one chat turn."""

    model_config = ConfigDict(populate_by_name=True)

    user_message: ChatMessage = Field(alias="userMessage")
    assistant_message: ChatMessage = Field(alias="assistantMessage")
