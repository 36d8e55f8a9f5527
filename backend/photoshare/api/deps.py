"""Request-scoped dependencies shared by the v1 routers."""

from dataclasses import dataclass
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.core.errors import Unauthorized
from photoshare.core.logging import get_logger
from photoshare.db.base import is_valid_id
from photoshare.db.session import get_db
from photoshare.models import User

logger = get_logger(__name__)

SESSION_USER_KEY = "user_id"


@dataclass
class RequestSession:
    """
    The signed session cookie of one request.

    Wraps the dict Starlette's SessionMiddleware exposes as
    ``request.session``; changes are written back with the response.
    """

    data: dict[str, Any]

    @property
    def current_actor_id(self) -> str | None:
        user_id = self.data.get(SESSION_USER_KEY)
        if not isinstance(user_id, str) or not is_valid_id(user_id):
            return None
        return user_id

    def start(self, user_id: str) -> None:
        self.data.clear()
        self.data[SESSION_USER_KEY] = user_id

    def end(self) -> None:
        self.data.clear()


def get_request_session(request: Request) -> RequestSession:
    return RequestSession(request.session)


async def require_actor_id(
    session: RequestSession = Depends(get_request_session),
    db: AsyncSession = Depends(get_db),
) -> str:
    """
    The logged-in user; raises Unauthorized without a session.

    A cookie can outlive its account (deleted from another browser), so the
    user must still exist. A stale session is cleared.
    """
    actor_id = session.current_actor_id
    if actor_id is None:
        raise Unauthorized()
    if not await db.get(User, actor_id):
        logger.info("Dropping session of deleted user", user_id=actor_id)
        session.end()
        raise Unauthorized()
    return actor_id
