"""Caller identity resolution.

Session handling lives in front of this service (the dashboard's auth
layer); requests reach the API with the authenticated user's id in the
``X-User-Id`` header. The id is opaque here: it scopes stored transactions
and analytics cache entries, nothing else.
"""

import structlog
from fastapi import Security
from fastapi.security import APIKeyHeader

from finsight.core.exceptions import UnauthorizedError

logger = structlog.get_logger()

_user_id_header = APIKeyHeader(name="X-User-Id", auto_error=False)

MAX_USER_ID_LENGTH = 128


async def get_current_user(user_id: str | None = Security(_user_id_header)) -> str:
    """Return the caller's user id, or raise 401 when it is missing."""
    if user_id is None or not user_id.strip():
        raise UnauthorizedError()

    user_id = user_id.strip()
    if len(user_id) > MAX_USER_ID_LENGTH:
        logger.warning("user_id_rejected", length=len(user_id))
        raise UnauthorizedError("Invalid user id")
    return user_id
