"""User endpoints: registration, profiles, counts, highlights, deletion."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.api.deps import RequestSession, get_request_session, require_actor_id
from photoshare.db.session import get_db
from photoshare.schemas import (
    AccountResponse,
    HighlightsResponse,
    MessageResponse,
    UserCounts,
    UserCreate,
    UserDetail,
    UserSummary,
)
from photoshare.services import StorageService, get_storage_service
from photoshare.services import aggregates
from photoshare.services import users as user_service

router = APIRouter()


@router.post("", response_model=AccountResponse)
async def register(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> AccountResponse:
    """Create an account. Does not log the new user in."""
    return await user_service.register(db, payload)


@router.get("/list", response_model=list[UserSummary])
async def list_users(
    _: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> list[UserSummary]:
    return await user_service.list_users(db)


@router.get("/counts", response_model=list[UserCounts])
async def user_counts(
    viewer_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> list[UserCounts]:
    """Photo and comment counts per user, over what the viewer can see."""
    return await aggregates.counts_per_user(db, viewer_id)


@router.get("/{user_id}", response_model=UserDetail)
async def get_user(
    user_id: str,
    _: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> UserDetail:
    return await user_service.get_user_detail(db, user_id)


@router.get("/{user_id}/highlights", response_model=HighlightsResponse)
async def get_highlights(
    user_id: str,
    viewer_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> HighlightsResponse:
    return await aggregates.highlights_of_user(db, user_id, viewer_id)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    actor_id: str = Depends(require_actor_id),
    session: RequestSession = Depends(get_request_session),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
) -> MessageResponse:
    """
    Delete the caller's own account.

    Removes their photos (with everything attached), their comments, likes,
    favorites, shares and tags, then ends the session.
    """
    await user_service.delete_account(db, storage, actor_id, user_id)
    session.end()
    return MessageResponse(message="Account deleted")
