"""Current user and profile routes."""

import logging

from fastapi import APIRouter

from athena.auth import CurrentUser, OptionalUser
from athena.db import user_store
from athena.errors import NotFoundError
from athena.models.user import ProfileUpdate, User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/current_user")
async def current_user(user: OptionalUser) -> User | None:
    """Return the caller's user record, or null when not signed in."""
    return user


@router.post("/profile")
async def update_profile(user: CurrentUser, update: ProfileUpdate) -> User:
    """Update the caller's display name, branch and year."""
    updated = await user_store.update_profile(user.id, update)
    if updated is None:
        raise NotFoundError("User not found")
    logger.info(f"Updated profile for user {user.id}")
    return updated
