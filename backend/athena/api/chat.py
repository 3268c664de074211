"""Chat API endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, status
from starlette.datastructures import UploadFile

from athena.auth import CurrentUser
from athena.db.chat_store import ChatStore, get_chat_store
from athena.errors import NotFoundError, ValidationError
from athena.llm.chat import ModelInvoker, TurnOrchestrator, UploadedFile
from athena.models.chat import (
    ChatMessagesResponse,
    ChatSummary,
    ChatTurnResponse,
    CreateChatRequest,
    CreateChatResponse,
    RenameChatRequest,
    RenameChatResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND_MESSAGE = "Chat not found or you do not have permission."


def get_model_invoker(request: Request) -> ModelInvoker:
    """Model invoker bound to the process-wide Gemini client."""
    return ModelInvoker(request.app.state.gemini_client)


def get_turn_orchestrator(
    store: Annotated[ChatStore, Depends(get_chat_store)],
    invoker: Annotated[ModelInvoker, Depends(get_model_invoker)],
) -> TurnOrchestrator:
    return TurnOrchestrator(store, invoker)


async def _read_turn_payload(
    request: Request,
    orchestrator: TurnOrchestrator,
) -> tuple[str | None, str | None, UploadedFile | None]:
    """Pull chatId, userMessage and an optional file out of the request.

    Accepts a JSON body or a multipart form with a single ``file`` part.
    An oversized file is rejected from its declared size before it is read.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        chat_id = form.get("chatId")
        user_message = form.get("userMessage")
        upload: UploadedFile | None = None

        file = form.get("file")
        if isinstance(file, UploadFile) and file.filename:
            if file.size is not None:
                orchestrator.check_upload_size(file.filename, file.size)
            upload = UploadedFile(
                buffer=await file.read(),
                originalname=file.filename,
                mimetype=file.content_type or "application/octet-stream",
            )
            await file.close()

        return (
            chat_id if isinstance(chat_id, str) else None,
            user_message if isinstance(user_message, str) else None,
            upload,
        )

    try:
        body: Any = await request.json()
    except ValueError:
        raise ValidationError("Request body must be JSON or multipart form data.")

    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")

    chat_id = body.get("chatId")
    user_message = body.get("userMessage", "")
    if user_message is not None and not isinstance(user_message, str):
        raise ValidationError("userMessage must be a string.")

    return (str(chat_id) if chat_id else None, user_message, None)


@router.post("/new-chat", status_code=status.HTTP_201_CREATED)
async def create_new_chat(
    user: CurrentUser,
    store: Annotated[ChatStore, Depends(get_chat_store)],
    request: CreateChatRequest | None = None,
) -> CreateChatResponse:
    """Create a new chat session for the caller."""
    title = request.title if request else None
    chat = await store.create_session(user.id, title)
    logger.info(f"Created chat {chat.id} for user {user.id}")
    return CreateChatResponse(chat_id=chat.id, title=chat.title)


@router.post("/chat")
async def post_chat_message(
    request: Request,
    user: CurrentUser,
    orchestrator: Annotated[TurnOrchestrator, Depends(get_turn_orchestrator)],
) -> ChatTurnResponse:
    """Send a message, optionally with one file, and get the assistant's reply.

    Model failures do not fail the request: the reply is replaced with a
    notice and the turn is still saved.
    """
    chat_id, user_message, upload = await _read_turn_payload(request, orchestrator)

    result = await orchestrator.handle_turn(user.id, chat_id, user_message, upload)

    return ChatTurnResponse(
        user_message=result.user_message,
        assistant_message=result.assistant_message,
    )


@router.get("/chat/{chat_id}/messages")
async def get_chat_messages(
    chat_id: str,
    user: CurrentUser,
    store: Annotated[ChatStore, Depends(get_chat_store)],
) -> ChatMessagesResponse:
    """Fetch all messages of one chat."""
    chat = await store.find_owned_session(chat_id, user.id)
    if chat is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return ChatMessagesResponse(messages=chat.messages)


@router.get("/chats")
async def list_user_chats(
    user: CurrentUser,
    store: Annotated[ChatStore, Depends(get_chat_store)],
) -> list[ChatSummary]:
    """List the caller's chats, most recently updated first."""
    return await store.list_sessions(user.id)


@router.put("/chat/{chat_id}/rename")
async def rename_chat(
    chat_id: str,
    user: CurrentUser,
    store: Annotated[ChatStore, Depends(get_chat_store)],
    request: RenameChatRequest | None = None,
) -> RenameChatResponse:
    """Rename one of the caller's chats."""
    new_title = request.new_title if request else None
    if not new_title or not new_title.strip():
        raise ValidationError("New title is required.")

    chat = await store.rename_session(chat_id, user.id, new_title)
    if chat is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)

    return RenameChatResponse(message="Chat renamed successfully.", chat=chat)


@router.delete("/chat/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chat(
    chat_id: str,
    user: CurrentUser,
    store: Annotated[ChatStore, Depends(get_chat_store)],
) -> None:
    """Delete one of the caller's chats."""
    deleted = await store.delete_session(chat_id, user.id)
    if not deleted:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    logger.info(f"Deleted chat {chat_id} for user {user.id}")
