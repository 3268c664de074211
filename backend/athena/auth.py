"""Caller identity resolution.

The OAuth handshake happens in front of this service. The authenticating proxy
forwards the verified identity in request headers; these dependencies read it
and make sure a user record exists.
"""

import hmac
import logging
import os
from typing import Annotated

from fastapi import Depends, Request

from athena.db import user_store
from athena.errors import AuthError
from athena.models.user import User

logger = logging.getLogger(__name__)

AUTH_USER_HEADER = os.getenv("AUTH_USER_HEADER", "X-User-Id")
AUTH_EMAIL_HEADER = "X-User-Email"
AUTH_NAME_HEADER = "X-User-Name"
AUTH_SECRET_HEADER = "X-Auth-Proxy-Secret"

# Shared secret the proxy must present, if set
AUTH_PROXY_SECRET = os.getenv("AUTH_PROXY_SECRET")


def _proxy_verified(request: Request) -> bool:
    if not AUTH_PROXY_SECRET:
        return True
    presented = request.headers.get(AUTH_SECRET_HEADER, "")
    return hmac.compare_digest(presented.encode(), AUTH_PROXY_SECRET.encode())


async def get_optional_user(request: Request) -> User | None:
    """Resolve the caller, or None when the request carries no identity."""
    user_id = (request.headers.get(AUTH_USER_HEADER) or "").strip()
    if not user_id:
        return None

    if not _proxy_verified(request):
        logger.warning(f"Rejected identity header for {user_id}: bad proxy secret")
        return None

    return await user_store.ensure_user(
        user_id,
        email=request.headers.get(AUTH_EMAIL_HEADER),
        display_name=request.headers.get(AUTH_NAME_HEADER),
    )


async def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Resolve the caller or fail with 401."""
    if user is None:
        raise AuthError("User not authenticated")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
