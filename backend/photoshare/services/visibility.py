"""Photo visibility resolution."""

from collections.abc import Collection

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.models import Photo, PhotoVisibility, User


def is_visible(
    photo: Photo,
    viewer_id: str | None,
    seed_owner_ids: Collection[str] = (),
) -> bool:
    """
    Decide whether a viewer may read a photo.

    The owner always sees their own photo. Otherwise public photos are visible
    to everyone (including anonymous viewers), shared photos only to the
    listed users, and owner-only photos to nobody - except owner-only photos
    of seed accounts, which older data stored that way while meaning public.

    Args:
        photo: Photo with its shares loaded
        viewer_id: The requesting user, or None if unauthenticated
        seed_owner_ids: Ids of the seed/demo accounts
    """
    if viewer_id is not None and viewer_id == photo.user_id:
        return True

    visibility = PhotoVisibility(photo.visibility)
    if visibility is PhotoVisibility.PUBLIC:
        return True
    if visibility is PhotoVisibility.SHARED:
        return viewer_id is not None and viewer_id in photo.shared_with_ids
    return photo.user_id in seed_owner_ids


def filter_visible(
    photos: list[Photo],
    viewer_id: str | None,
    seed_owner_ids: Collection[str] = (),
) -> list[Photo]:
    """Keep only the photos the viewer may read, preserving order."""
    return [p for p in photos if is_visible(p, viewer_id, seed_owner_ids)]


async def load_seed_owner_ids(db: AsyncSession) -> frozenset[str]:
    """Load the ids of the seed/demo accounts. Not cached across requests."""
    result = await db.execute(select(User.id).where(User.is_seed.is_(True)))
    return frozenset(result.scalars().all())
