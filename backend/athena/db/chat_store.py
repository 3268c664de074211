"""ChatStore - ownership-scoped persistence for chat sessions."""

import json
import uuid
from datetime import UTC, datetime

import aiosqlite

from athena.db.database import get_db
from athena.errors import ConflictError, ValidationError
from athena.models.chat import ChatMessage, ChatSession, ChatSummary


def _generate_id() -> str:
    """Generate a unique ID."""
    return str(uuid.uuid4())


def _now() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(UTC).isoformat()


def _row_to_session(row: aiosqlite.Row) -> ChatSession:
    """Convert a database row to a ChatSession model."""
    messages = [
        ChatMessage.model_validate(m) for m in json.loads(row["messages_json"] or "[]")
    ]
    return ChatSession(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        messages=messages,
        version=row["version"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _dump_messages(messages: list[ChatMessage]) -> str:
    return json.dumps([m.model_dump(mode="json", by_alias=True) for m in messages])


class ChatStore:
    """Storage for chat sessions.

    Every read and write is scoped by the owning user id, so a session that
    belongs to someone else behaves exactly like one that does not exist.
    """

    async def create_session(self, owner_id: str | None, title: str | None) -> ChatSession:
        """Create an empty chat session for a user."""
        if not owner_id or not title or not title.strip():
            raise ValidationError("User ID and title are required.")

        db = await get_db()
        session_id = _generate_id()
        now = _now()

        await db.execute(
            """
            INSERT INTO chat_sessions (id, user_id, title, messages_json, version, created_at, updated_at)
            VALUES (?, ?, ?, '[]', 1, ?, ?)
            """,
            (session_id, owner_id, title, now, now),
        )
        await db.commit()

        return ChatSession(
            id=session_id,
            user_id=owner_id,
            title=title,
            messages=[],
            version=1,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
        )

    async def find_owned_session(self, session_id: str, owner_id: str) -> ChatSession | None:
        """Get a session by ID if it belongs to the owner."""
        db = await get_db()
        cursor = await db.execute(
            "SELECT * FROM chat_sessions WHERE id = ? AND user_id = ?",
            (session_id, owner_id),
        )
        row = await cursor.fetchone()

        if row is None:
            return None

        return _row_to_session(row)

    async def list_sessions(self, owner_id: str) -> list[ChatSummary]:
        """List a user's sessions, most recently updated first."""
        db = await get_db()
        cursor = await db.execute(
            """
            SELECT id, title, updated_at FROM chat_sessions
            WHERE user_id = ?
            ORDER BY updated_at DESC, created_at DESC
            """,
            (owner_id,),
        )
        rows = await cursor.fetchall()

        return [
            ChatSummary(
                id=row["id"],
                title=row["title"],
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
            for row in rows
        ]

    async def rename_session(
        self, session_id: str, owner_id: str, new_title: str
    ) -> ChatSession | None:
        """Set a new title and bump the session's updated timestamp."""
        db = await get_db()
        cursor = await db.execute(
            """
            UPDATE chat_sessions
            SET title = ?, updated_at = ?, version = version + 1
            WHERE id = ? AND user_id = ?
            """,
            (new_title, _now(), session_id, owner_id),
        )
        await db.commit()

        if cursor.rowcount == 0:
            return None

        return await self.find_owned_session(session_id, owner_id)

    async def delete_session(self, session_id: str, owner_id: str) -> bool:
        """Delete a session and its messages."""
        db = await get_db()
        cursor = await db.execute(
            "DELETE FROM chat_sessions WHERE id = ? AND user_id = ?",
            (session_id, owner_id),
        )
        await db.commit()
        return cursor.rowcount > 0

    async def save_session(self, session: ChatSession) -> ChatSession:
        """Write a session's messages and title back in one statement.

        The write only applies if the stored version still matches the one the
        session was loaded at.

        Raises:
            ConflictError: If another request wrote the session in between,
                or it was deleted.
        """
        db = await get_db()
        now = _now()

        cursor = await db.execute(
            """
            UPDATE chat_sessions
            SET title = ?, messages_json = ?, updated_at = ?, version = version + 1
            WHERE id = ? AND user_id = ? AND version = ?
            """,
            (
                session.title,
                _dump_messages(session.messages),
                now,
                session.id,
                session.user_id,
                session.version,
            ),
        )
        await db.commit()

        if cursor.rowcount == 0:
            raise ConflictError(
                "Chat was modified by another request. Please reload and try again."
            )

        return session.model_copy(
            update={
                "version": session.version + 1,
                "updated_at": datetime.fromisoformat(now),
            }
        )


# Global instance
chat_store = ChatStore()


def get_chat_store() -> ChatStore:
    """Dependency returning the chat store."""
    return chat_store
