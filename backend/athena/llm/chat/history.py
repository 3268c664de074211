"""Stored chat history to the model's turn format."""

from athena.llm.chat.models import HistoryTurn, ModelRole
from athena.models.chat import ChatMessage, ChatRole


def to_model_role(role: str) -> ModelRole:
    """Map a stored message role to the model's role name."""
    return ModelRole.MODEL if role == ChatRole.ASSISTANT else ModelRole.USER


def build_history(
    messages: list[ChatMessage],
    *,
    files_exchanged: bool,
) -> list[HistoryTurn]:
    """Convert prior messages into model turns.

    File bytes are never kept, so a historical file turn is represented only by
    the text that accompanied it, possibly empty.

    Turns with blank text are dropped, except user turns in a session where a
    file has ever been exchanged: those are kept (with empty text) so the model
    still sees that the user said something at that point.

    Args:
        messages: Session messages before the current turn was appended.
        files_exchanged: Whether any message of the session, including the
            current turn, carried a file.

    Returns:
        Ordered turns for seeding the model chat.
    """
    history: list[HistoryTurn] = []
    for message in messages:
        role = to_model_role(message.role)
        text = message.content or ""

        if not text.strip() and not (role == ModelRole.USER and files_exchanged):
            continue

        history.append(HistoryTurn(role=role, text=text))
    return history
