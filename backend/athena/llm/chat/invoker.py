"""Model selection and invocation for chat turns."""

import logging
import os
from typing import Protocol

from google.genai import types

from athena.errors import ExternalServiceError
from athena.llm.chat.models import HistoryTurn, UploadedFile

logger = logging.getLogger(__name__)

# Model for text-only turns
DEFAULT_TEXT_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# Model for any turn carrying a file, whatever its MIME type
VISION_MODEL = os.getenv("GEMINI_VISION_MODEL", "gemini-2.0-flash")

UNAVAILABLE_REPLY = (
    "Athena is currently unavailable (AI service error). Please try again later."
)
EMPTY_REPLY = (
    "I'm sorry, I was unable to generate a response. "
    "Please try rephrasing your message."
)


def file_to_part(upload: UploadedFile) -> types.Part:
    """Inline a request file as a model content part."""
    return types.Part.from_bytes(data=upload.buffer, mime_type=upload.mimetype)


def history_to_contents(history: list[HistoryTurn]) -> list[types.Content]:
    """Convert adapted history turns into model content objects."""
    return [
        types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.text)])
        for turn in history
    ]


class ChatModelClient(Protocol):
    async def send_chat(
        self,
        model: str,
        history: list[types.Content],
        parts: list[types.Part],
    ) -> str: ...


class ModelInvoker:
    """Picks a model variant for a turn and gets a reply from it.

    Never raises: a failed call yields UNAVAILABLE_REPLY and a blank reply
    yields EMPTY_REPLY. Nothing is retried.
    """

    def __init__(
        self,
        client: ChatModelClient,
        text_model: str | None = None,
        vision_model: str | None = None,
    ):
        self.client = client
        self.text_model = text_model or DEFAULT_TEXT_MODEL
        self.vision_model = vision_model or VISION_MODEL

    def select_model(self, upload: UploadedFile | None) -> str:
        """Vision model whenever a file is attached, text model otherwise."""
        if upload is not None:
            return self.vision_model
        return self.text_model

    def build_parts(self, text: str | None, upload: UploadedFile | None) -> list[types.Part]:
        """Content parts of the current turn: inline file first, then text."""
        parts: list[types.Part] = []
        if upload is not None:
            parts.append(file_to_part(upload))
        if text:
            parts.append(types.Part.from_text(text=text))
        return parts

    async def invoke(
        self,
        history: list[HistoryTurn],
        text: str | None,
        upload: UploadedFile | None = None,
    ) -> str:
        """Get the model's reply to the current turn.

        Args:
            history: Adapted prior turns
            text: Trimmed text of the current turn, or None
            upload: File attached to the current turn, if any

        Returns:
            Non-blank reply text
        """
        model = self.select_model(upload)
        parts = self.build_parts(text, upload)

        try:
            reply = await self.client.send_chat(
                model, history_to_contents(history), parts
            )
        except ExternalServiceError as e:
            logger.error(f"Generative AI call failed ({model}): {e}")
            return UNAVAILABLE_REPLY

        if not reply or not reply.strip():
            logger.warning(f"Model {model} returned an empty reply")
            return EMPTY_REPLY

        return reply
