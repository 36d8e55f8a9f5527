"""Activity logging and the activity feed views."""

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from photoshare.core.config import settings
from photoshare.core.logging import get_logger
from photoshare.models import Activity, ActivityType, User
from photoshare.schemas import ActivityResponse, LastActivityResponse, UserSummary

logger = get_logger(__name__)


async def log_activity(
    db: AsyncSession,
    type: ActivityType,
    user_id: str,
    photo_id: str | None = None,
    photo_file_name: str | None = None,
) -> None:
    """
    Append an activity record in its own commit.

    A failure here is logged and swallowed so it never breaks the action
    being recorded.
    """
    try:
        db.add(
            Activity(
                type=type.value,
                user_id=user_id,
                photo_id=photo_id,
                photo_file_name=photo_file_name,
            )
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Failed to log activity", type=type.value, user_id=user_id, error=str(e))


async def purge_activities(
    db: AsyncSession,
    user_id: str | None = None,
    photo_ids: list[str] | None = None,
) -> None:
    """
    Delete activity records by actor and/or photo. Best-effort.

    Runs after the owning rows are already gone, so a failure leaves
    orphaned feed entries rather than failing the deletion.
    """
    conditions = []
    if user_id is not None:
        conditions.append(Activity.user_id == user_id)
    if photo_ids:
        conditions.append(Activity.photo_id.in_(photo_ids))
    if not conditions:
        return

    try:
        await db.execute(delete(Activity).where(or_(*conditions)))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "Failed to delete activities",
            user_id=user_id,
            photo_count=len(photo_ids or []),
            error=str(e),
        )


def clamp_limit(limit: int | None) -> int:
    """Missing or zero means the default; anything else is clamped to [1, max]."""
    if not limit:
        limit = settings.activity_default_limit
    return max(1, min(settings.activity_max_limit, limit))


async def recent_activities(db: AsyncSession, limit: int | None = None) -> list[ActivityResponse]:
    """Return the newest activities with their actors denormalized."""
    result = await db.execute(
        select(Activity)
        .order_by(Activity.date_time.desc())
        .limit(clamp_limit(limit))
    )
    entries = result.scalars().all()
    if not entries:
        return []

    user_ids = {a.user_id for a in entries}
    users_result = await db.execute(select(User).where(User.id.in_(user_ids)))
    users = {u.id: u for u in users_result.scalars().all()}

    responses = []
    for a in entries:
        user = users.get(a.user_id)
        responses.append(
            ActivityResponse(
                id=a.id,
                type=ActivityType(a.type),
                date_time=a.date_time,
                user=UserSummary(id=user.id, first_name=user.first_name, last_name=user.last_name)
                if user
                else None,
                photo_file_name=a.photo_file_name,
                photo_id=a.photo_id,
            )
        )
    return responses


async def last_activity_per_user(db: AsyncSession) -> list[LastActivityResponse]:
    """Each user's single most recent action, newest first."""
    ranked = select(
        Activity,
        func.row_number()
        .over(partition_by=Activity.user_id, order_by=Activity.date_time.desc())
        .label("recency"),
    ).subquery()
    latest = aliased(Activity, ranked)

    result = await db.execute(
        select(latest)
        .where(ranked.c.recency == 1)
        .order_by(latest.date_time.desc())
    )

    return [
        LastActivityResponse(
            user_id=a.user_id,
            type=ActivityType(a.type),
            date_time=a.date_time,
            photo_file_name=a.photo_file_name,
            photo_id=a.photo_id,
        )
        for a in result.scalars().all()
    ]
