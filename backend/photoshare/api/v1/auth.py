"""Login and logout endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.api.deps import RequestSession, get_request_session
from photoshare.core.errors import InvalidArgument
from photoshare.core.logging import get_logger
from photoshare.db.session import get_db
from photoshare.schemas import AccountResponse, LoginRequest, MessageResponse
from photoshare.services import users as user_service

logger = get_logger(__name__)

router = APIRouter()


@router.post("/login", response_model=AccountResponse)
async def login(
    payload: LoginRequest,
    session: RequestSession = Depends(get_request_session),
    db: AsyncSession = Depends(get_db),
) -> AccountResponse:
    """Check credentials and start a session for the user."""
    account = await user_service.authenticate(db, payload.login_name, payload.password)
    session.start(account.id)
    logger.info("User logged in", user_id=account.id)
    return account


@router.post("/logout", response_model=MessageResponse)
async def logout(
    session: RequestSession = Depends(get_request_session),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    user_id = session.current_actor_id
    if user_id is None:
        raise InvalidArgument("Not logged in")

    await user_service.record_logout(db, user_id)
    session.end()
    logger.info("User logged out", user_id=user_id)
    return MessageResponse(message="Logged out")
