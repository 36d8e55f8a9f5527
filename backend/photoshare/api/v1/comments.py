"""Comment endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.api.deps import require_actor_id
from photoshare.db.session import get_db
from photoshare.schemas import CommentAdded, CommentCreate, MessageResponse, UserComment, UserMention
from photoshare.services import comments as comment_service

router = APIRouter()


@router.post("/commentsOfPhoto/{photo_id}", response_model=CommentAdded)
async def add_comment(
    photo_id: str,
    payload: CommentCreate,
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> CommentAdded:
    """Comment on a photo. ``@[Name](userId)`` markup becomes a mention."""
    return await comment_service.add_comment(db, actor_id, photo_id, payload.comment)


@router.delete("/commentsOfPhoto/{photo_id}/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    photo_id: str,
    comment_id: str,
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await comment_service.delete_comment(db, actor_id, photo_id, comment_id)
    return MessageResponse(message="Comment deleted")


@router.get("/commentsOfUser/{user_id}", response_model=list[UserComment])
async def comments_of_user(
    user_id: str,
    viewer_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> list[UserComment]:
    return await comment_service.comments_of_user(db, user_id, viewer_id)


@router.get("/mentionsOfUser/{user_id}", response_model=list[UserMention])
async def mentions_of_user(
    user_id: str,
    viewer_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> list[UserMention]:
    return await comment_service.mentions_of_user(db, user_id, viewer_id)
