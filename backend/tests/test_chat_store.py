"""Tests for the ownership-scoped chat store."""

import pytest

from athena.db.chat_store import ChatStore
from athena.errors import ConflictError, ValidationError
from athena.models.chat import ChatMessage, ChatRole, FileDescriptor


@pytest.fixture
def store() -> ChatStore:
    return ChatStore()


class TestCreateSession:
    """Tests for creating sessions."""

    @pytest.mark.asyncio
    async def test_create_session(self, store):
        """A new session is empty and owned by its creator."""
        chat = await store.create_session("user-1", "Midterm")

        assert chat.title == "Midterm"
        assert chat.user_id == "user-1"
        assert chat.messages == []
        assert chat.version == 1
        assert chat.created_at == chat.updated_at

    @pytest.mark.asyncio
    async def test_owner_needs_no_user_row(self, store):
        """Sessions are keyed by the caller id alone."""
        chat = await store.create_session("never-seen", "Midterm")

        assert (await store.find_owned_session(chat.id, "never-seen")) is not None

    @pytest.mark.asyncio
    async def test_missing_title(self, store):
        """Title is required."""
        with pytest.raises(ValidationError):
            await store.create_session("user-1", None)

        with pytest.raises(ValidationError):
            await store.create_session("user-1", "   ")

    @pytest.mark.asyncio
    async def test_missing_owner(self, store):
        """Owner id is required."""
        with pytest.raises(ValidationError):
            await store.create_session("", "Midterm")


class TestOwnership:
    """Every lookup is scoped to the owner."""

    @pytest.mark.asyncio
    async def test_find_owned_session(self, store):
        chat = await store.create_session("user-1", "Midterm")

        found = await store.find_owned_session(chat.id, "user-1")

        assert found is not None
        assert found.id == chat.id

    @pytest.mark.asyncio
    async def test_foreign_session_not_found(self, store):
        """Another user's session looks like a missing one."""
        chat = await store.create_session("user-1", "Midterm")

        assert await store.find_owned_session(chat.id, "user-2") is None
        assert await store.rename_session(chat.id, "user-2", "Stolen") is None
        assert await store.delete_session(chat.id, "user-2") is False

        # Untouched for the owner
        found = await store.find_owned_session(chat.id, "user-1")
        assert found is not None
        assert found.title == "Midterm"

    @pytest.mark.asyncio
    async def test_list_only_own_sessions(self, store):
        mine = await store.create_session("user-1", "Mine")
        await store.create_session("user-2", "Theirs")

        listed = await store.list_sessions("user-1")

        assert [c.id for c in listed] == [mine.id]
        assert await store.list_sessions("user-3") == []


class TestListSessions:
    """Tests for listing sessions."""

    @pytest.mark.asyncio
    async def test_sorted_by_updated_desc(self, store):
        """Most recently updated first."""
        first = await store.create_session("user-1", "First")
        second = await store.create_session("user-1", "Second")
        third = await store.create_session("user-1", "Third")

        # Touch the first one so it moves to the top
        await store.rename_session(first.id, "user-1", "First (renamed)")

        listed = await store.list_sessions("user-1")

        assert [c.id for c in listed] == [first.id, third.id, second.id]
        assert listed[0].title == "First (renamed)"

    @pytest.mark.asyncio
    async def test_deleted_session_disappears(self, store):
        chat = await store.create_session("user-1", "Midterm")

        assert await store.delete_session(chat.id, "user-1") is True
        assert await store.list_sessions("user-1") == []
        assert await store.find_owned_session(chat.id, "user-1") is None

    @pytest.mark.asyncio
    async def test_delete_twice(self, store):
        chat = await store.create_session("user-1", "Midterm")

        assert await store.delete_session(chat.id, "user-1") is True
        assert await store.delete_session(chat.id, "user-1") is False


class TestRenameSession:
    """Tests for renaming sessions."""

    @pytest.mark.asyncio
    async def test_rename(self, store):
        chat = await store.create_session("user-1", "Midterm")

        renamed = await store.rename_session(chat.id, "user-1", "Final")

        assert renamed is not None
        assert renamed.title == "Final"
        assert renamed.updated_at >= chat.updated_at

    @pytest.mark.asyncio
    async def test_rename_idempotent(self, store):
        """Same title twice keeps the title and bumps the timestamp each time."""
        chat = await store.create_session("user-1", "Midterm")

        once = await store.rename_session(chat.id, "user-1", "Final")
        twice = await store.rename_session(chat.id, "user-1", "Final")

        assert once.title == twice.title == "Final"
        assert once.updated_at >= chat.updated_at
        assert twice.updated_at >= once.updated_at

    @pytest.mark.asyncio
    async def test_rename_missing(self, store):
        assert await store.rename_session("no-such-chat", "user-1", "Final") is None


class TestSaveSession:
    """Tests for writing messages back."""

    @pytest.mark.asyncio
    async def test_save_round_trip(self, store):
        """Messages keep their order, roles and file descriptors."""
        chat = await store.create_session("user-1", "Midterm")
        chat.messages.extend([
            ChatMessage(
                role=ChatRole.USER,
                content=None,
                file=FileDescriptor(name="notes.pdf", type="application/pdf"),
            ),
            ChatMessage(role=ChatRole.ASSISTANT, content="Summary of your notes"),
        ])

        saved = await store.save_session(chat)
        loaded = await store.find_owned_session(chat.id, "user-1")

        assert saved.version == 2
        assert loaded.version == 2
        assert [m.role for m in loaded.messages] == ["user", "assistant"]
        assert loaded.messages[0].content is None
        assert loaded.messages[0].file.name == "notes.pdf"
        assert loaded.messages[0].file.type == "application/pdf"
        assert loaded.messages[1].content == "Summary of your notes"
        assert loaded.messages[0].id == chat.messages[0].id
        assert loaded.updated_at >= chat.updated_at

    @pytest.mark.asyncio
    async def test_stale_version_conflicts(self, store):
        """A second writer holding an old copy is rejected."""
        chat = await store.create_session("user-1", "Midterm")
        copy_a = await store.find_owned_session(chat.id, "user-1")
        copy_b = await store.find_owned_session(chat.id, "user-1")

        copy_a.messages.append(ChatMessage(role=ChatRole.USER, content="A"))
        await store.save_session(copy_a)

        copy_b.messages.append(ChatMessage(role=ChatRole.USER, content="B"))
        with pytest.raises(ConflictError):
            await store.save_session(copy_b)

        loaded = await store.find_owned_session(chat.id, "user-1")
        assert [m.content for m in loaded.messages] == ["A"]

    @pytest.mark.asyncio
    async def test_save_after_rename_conflicts(self, store):
        """Renaming also advances the version."""
        chat = await store.create_session("user-1", "Midterm")
        await store.rename_session(chat.id, "user-1", "Final")

        chat.messages.append(ChatMessage(role=ChatRole.USER, content="Hello"))
        with pytest.raises(ConflictError):
            await store.save_session(chat)

    @pytest.mark.asyncio
    async def test_save_deleted_conflicts(self, store):
        chat = await store.create_session("user-1", "Midterm")
        await store.delete_session(chat.id, "user-1")

        with pytest.raises(ConflictError):
            await store.save_session(chat)
