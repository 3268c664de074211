"""Database operations for users."""

from datetime import UTC, datetime

import aiosqlite

from athena.db.database import get_db
from athena.models.user import ProfileUpdate, User


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _row_to_user(row: aiosqlite.Row) -> User:
    """Convert a database row to a User model."""
    return User(
        id=row["id"],
        email=row["email"],
        display_name=row["display_name"],
        branch=row["branch"],
        year=row["year"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


async def get_user(user_id: str) -> User | None:
    """Get a user by ID."""
    db = await get_db()
    cursor = await db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
    row = await cursor.fetchone()

    if not row:
        return None

    return _row_to_user(row)


async def ensure_user(
    user_id: str,
    email: str | None = None,
    display_name: str | None = None,
) -> User:
    """Get a user, creating the record on first sight.

    Existing profile fields are left alone so that edits made through the
    profile endpoint survive later logins.
    """
    db = await get_db()
    now = _now()

    await db.execute(
        """
        INSERT INTO users (id, email, display_name, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(id) DO NOTHING
        """,
        (user_id, email, display_name, now, now),
    )
    await db.commit()

    user = await get_user(user_id)
    if user is None:
        raise RuntimeError(f"User {user_id} missing right after insert")
    return user


async def update_profile(user_id: str, update: ProfileUpdate) -> User | None:
    """Update the profile fields present in the request.

    Fields the request omits keep their stored value.
    """
    db = await get_db()
    fields = update.model_dump(exclude_unset=True)
    if fields.get("year") is not None:
        fields["year"] = str(fields["year"])

    assignments = [f"{column} = ?" for column in fields] + ["updated_at = ?"]
    values = [*fields.values(), _now(), user_id]

    cursor = await db.execute(
        f"UPDATE users SET {', '.join(assignments)} WHERE id = ?",
        values,
    )
    await db.commit()

    if cursor.rowcount == 0:
        return None

    return await get_user(user_id)
