"""Activity feed endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.api.deps import require_actor_id
from photoshare.db.session import get_db
from photoshare.schemas import ActivityResponse, LastActivityResponse
from photoshare.services import activity as activity_service

router = APIRouter(dependencies=[Depends(require_actor_id)])


@router.get("", response_model=list[ActivityResponse])
async def list_activities(
    limit: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[ActivityResponse]:
    """Newest activities first. ``limit`` defaults to 5 and is capped at 50."""
    return await activity_service.recent_activities(db, limit)


@router.get("/last-by-user", response_model=list[LastActivityResponse])
async def last_activity_by_user(
    db: AsyncSession = Depends(get_db),
) -> list[LastActivityResponse]:
    return await activity_service.last_activity_per_user(db)
