"""Favorites endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.api.deps import require_actor_id
from photoshare.db.session import get_db
from photoshare.schemas import FavoritePhoto, FavoriteResponse
from photoshare.services import aggregates
from photoshare.services import users as user_service

router = APIRouter()


@router.get("", response_model=list[FavoritePhoto])
async def list_favorites(
    viewer_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> list[FavoritePhoto]:
    """The caller's favorites they can still see, newest photo first."""
    return await aggregates.favorites_of(db, viewer_id)


@router.post("/{photo_id}", response_model=FavoriteResponse)
async def add_favorite(
    photo_id: str,
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> FavoriteResponse:
    await user_service.add_favorite(db, actor_id, photo_id)
    return FavoriteResponse(favorited=True)


@router.delete("/{photo_id}", response_model=FavoriteResponse)
async def remove_favorite(
    photo_id: str,
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> FavoriteResponse:
    await user_service.remove_favorite(db, actor_id, photo_id)
    return FavoriteResponse(favorited=False)
