"""TurnOrchestrator runs one chat turn end to end."""

import logging
import os

from athena.db.chat_store import ChatStore
from athena.errors import AthenaError, AuthError, InternalError, NotFoundError, ValidationError
from athena.llm.chat.history import build_history
from athena.llm.chat.invoker import ModelInvoker
from athena.llm.chat.models import TurnResult, UploadedFile
from athena.models.chat import ChatMessage, ChatRole

logger = logging.getLogger(__name__)

# Inline file payloads above this size are rejected before calling the model
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(20 * 1024 * 1024)))


class TurnOrchestrator:
    """Coordinates the store and the model for one incoming message.

    Steps:
    1. Validate identity and input
    2. Load the caller's session
    3. Build the user message
    4. Adapt prior history for the model
    5. Invoke the model (never fails the request)
    6. Build the assistant message
    7. Persist both messages in a single write
    """

    def __init__(
        self,
        store: ChatStore,
        invoker: ModelInvoker,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        self.store = store
        self.invoker = invoker
        self.max_upload_bytes = max_upload_bytes

    def validate(
        self,
        user_id: str | None,
        chat_id: str | None,
        user_message: str | None,
        upload: UploadedFile | None,
    ) -> None:
        """Reject a turn before anything is loaded.

        Raises:
            AuthError: No caller identity.
            ValidationError: No chat id, no content, or an oversized file.
        """
        if not user_id:
            logger.warning("Chat turn without an authenticated user")
            raise AuthError("User not authenticated")

        text = (user_message or "").strip()
        if not chat_id or (not text and upload is None):
            raise ValidationError("Chat ID and user message are required.")

        if upload is not None:
            self.check_upload_size(upload.originalname, upload.size)

    def check_upload_size(self, filename: str, size: int) -> None:
        """Raise ValidationError if a file exceeds the inline payload limit."""
        if size > self.max_upload_bytes:
            raise ValidationError(
                f"File '{filename}' is too large "
                f"({size} bytes, limit {self.max_upload_bytes})."
            )

    async def handle_turn(
        self,
        user_id: str | None,
        chat_id: str | None,
        user_message: str | None,
        upload: UploadedFile | None = None,
    ) -> TurnResult:
        """Append one user message and the model's reply to a chat.

        Args:
            user_id: Authenticated caller
            chat_id: Target chat
            user_message: Raw message text, may be blank when a file is sent
            upload: Optional file, forwarded inline and never stored

        Returns:
            The persisted user and assistant messages
        """
        self.validate(user_id, chat_id, user_message, upload)

        try:
            session = await self.store.find_owned_session(chat_id, user_id)
            if session is None:
                raise NotFoundError("Chat not found")

            text = (user_message or "").strip() or None
            user_msg = ChatMessage(
                role=ChatRole.USER,
                content=text,
                file=upload.describe() if upload is not None else None,
            )

            history = build_history(
                session.messages,
                files_exchanged=session.has_files or upload is not None,
            )

            reply = await self.invoker.invoke(history, text, upload)

            assistant_msg = ChatMessage(role=ChatRole.ASSISTANT, content=reply)

            session.messages.extend([user_msg, assistant_msg])
            await self.store.save_session(session)

        except AthenaError:
            raise
        except Exception as e:
            logger.exception(f"Error handling chat turn for chat {chat_id}: {e}")
            raise InternalError() from e

        logger.info(
            f"Chat {chat_id}: appended turn "
            f"(file={upload.mimetype if upload else None}, history={len(history)})"
        )

        return TurnResult(user_message=user_msg, assistant_message=assistant_msg)
