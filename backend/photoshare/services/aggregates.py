"""Read models derived from the visible photo set."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.core.errors import InvalidArgument, NotFound, Unauthorized
from photoshare.db.base import is_valid_id
from photoshare.models import Favorite, Photo, User
from photoshare.schemas import FavoritePhoto, HighlightPhoto, HighlightsResponse, UserCounts
from photoshare.services.photos import select_photos
from photoshare.services.users import load_user_summaries
from photoshare.services.visibility import filter_visible, load_seed_owner_ids


async def counts_per_user(db: AsyncSession, viewer_id: str | None) -> list[UserCounts]:
    """
    Count photos owned and comments written by every user.

    Only photos visible to the viewer contribute, so totals depend on who
    asks. Users without activity are listed with zero counts.
    """
    users_result = await db.execute(select(User.id).order_by(User.last_name, User.first_name))
    counts = {uid: UserCounts(id=uid) for uid in users_result.scalars().all()}

    photos_result = await db.execute(select_photos())
    seed_owner_ids = await load_seed_owner_ids(db)
    photos = filter_visible(list(photos_result.scalars().all()), viewer_id, seed_owner_ids)

    for photo in photos:
        owner = counts.get(photo.user_id)
        if owner:
            owner.photoCount += 1
        for comment in photo.comments:
            author = counts.get(comment.user_id)
            if author:
                author.commentCount += 1

    return list(counts.values())


def _highlight(photo: Photo) -> HighlightPhoto:
    return HighlightPhoto(
        id=photo.id,
        file_name=photo.file_name,
        date_time=photo.date_time,
        commentsCount=len(photo.comments),
    )


async def highlights_of_user(
    db: AsyncSession,
    user_id: str,
    viewer_id: str | None,
) -> HighlightsResponse:
    """Most recent and most commented photo among those the viewer may see."""
    if not is_valid_id(user_id):
        raise InvalidArgument("Invalid user id")

    result = await db.execute(select_photos().where(Photo.user_id == user_id))
    photos = list(result.scalars().all())
    if viewer_id != user_id:
        seed_owner_ids = await load_seed_owner_ids(db)
        photos = filter_visible(photos, viewer_id, seed_owner_ids)

    if not photos:
        return HighlightsResponse(mostRecent=None, mostCommented=None)

    most_recent = max(photos, key=lambda p: p.date_time)
    # Ties on comment count go to the newer photo
    most_commented = max(photos, key=lambda p: (len(p.comments), p.date_time))
    return HighlightsResponse(
        mostRecent=_highlight(most_recent),
        mostCommented=_highlight(most_commented),
    )


async def favorites_of(db: AsyncSession, viewer_id: str | None) -> list[FavoritePhoto]:
    """
    The viewer's favorites that are still visible to them, newest first.

    Visibility is re-checked on every read: favoriting never grants access
    that the owner later withdraws.
    """
    if viewer_id is None:
        raise Unauthorized()
    if not await db.get(User, viewer_id):
        raise NotFound("User not found")

    result = await db.execute(
        select_photos()
        .join(Favorite, Favorite.photo_id == Photo.id)
        .where(Favorite.user_id == viewer_id)
    )
    seed_owner_ids = await load_seed_owner_ids(db)
    photos = filter_visible(list(result.scalars().all()), viewer_id, seed_owner_ids)
    if not photos:
        return []

    owners = await load_user_summaries(db, {p.user_id for p in photos})
    photos.sort(key=lambda p: p.date_time, reverse=True)
    return [
        FavoritePhoto(
            id=p.id,
            file_name=p.file_name,
            date_time=p.date_time,
            user=owners[p.user_id],
        )
        for p in photos
        if p.user_id in owners
    ]
