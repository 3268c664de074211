"""Models passed between the chat turn components."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

from athena.models.chat import ChatMessage, FileDescriptor


class ModelRole(str, Enum):
    """Role names understood by the conversational model."""

    USER = "user"
    MODEL = "model"


class HistoryTurn(BaseModel):
    """One prior turn as sent to the model. Text only, never file bytes."""

    model_config = ConfigDict(use_enum_values=True)

    role: ModelRole
    text: str


@dataclass
class UploadedFile:
    """A file received with the current request.

    Lives only for the duration of the request.
    """

    buffer: bytes
    originalname: str
    mimetype: str

    @property
    def size(self) -> int:
        return len(self.buffer)

    def describe(self) -> FileDescriptor:
        """Descriptor persisted in place of the bytes."""
        return FileDescriptor(name=self.originalname, type=self.mimetype)


class TurnResult(BaseModel):
    """The two messages persisted by one chat turn."""

    user_message: ChatMessage
    assistant_message: ChatMessage
