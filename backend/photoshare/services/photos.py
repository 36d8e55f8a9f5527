"""Profile gallery queries and photo mutations."""

import json
import math

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.core.errors import Internal, InvalidArgument, NotFound
from photoshare.core.logging import get_logger
from photoshare.db.base import is_valid_id
from photoshare.db.helpers import insert_ignore
from photoshare.models import ActivityType, Favorite, Like, Photo, PhotoShare, PhotoVisibility, Tag, User
from photoshare.schemas import (
    CommentResponse,
    LikeResponse,
    PhotoResponse,
    SharingResponse,
    SharingUpdate,
    TagCreate,
    TagCreated,
    TagResponse,
    UploadResponse,
    UserSummary,
)
from photoshare.services.activity import log_activity, purge_activities
from photoshare.services.guard import Action, authorize, ensure
from photoshare.services.storage import StorageService
from photoshare.services.users import load_user_summaries
from photoshare.services.visibility import filter_visible, load_seed_owner_ids

logger = get_logger(__name__)


def select_photos():
    """SELECT for photos that refreshes collections already in the session."""
    return select(Photo).execution_options(populate_existing=True)


async def get_photo(db: AsyncSession, photo_id: str) -> Photo | None:
    """Load a photo by id, rejecting malformed ids."""
    if not is_valid_id(photo_id):
        raise InvalidArgument("Invalid photo id")
    return await db.get(Photo, photo_id, populate_existing=True)


async def load_favorite_ids(db: AsyncSession, user_id: str | None) -> set[str]:
    if user_id is None:
        return set()
    result = await db.execute(select(Favorite.photo_id).where(Favorite.user_id == user_id))
    return set(result.scalars().all())


async def count_likes(db: AsyncSession, photo_id: str) -> int:
    result = await db.execute(select(func.count()).select_from(Like).where(Like.photo_id == photo_id))
    return result.scalar_one()


def parse_shared_with(raw: str | None) -> list[str] | None:
    """
    Decode the multipart ``shared_with`` field.

    Anything but a JSON array (including unparseable text) counts as absent,
    which makes the photo public.
    """
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(parsed, list):
        return None
    return [str(x) for x in parsed]


async def resolve_sharing(
    db: AsyncSession,
    owner_id: str,
    visibility: PhotoVisibility | None,
    shared_with: list[str] | None,
) -> tuple[PhotoVisibility, list[str]]:
    """
    Turn a sharing request into an explicit visibility and share list.

    Without an explicit visibility the legacy encoding applies: no list is
    public, an empty list is owner-only, a non-empty list is shared. Share
    ids that are malformed, unknown or the owner's own are dropped; a shared
    photo left with nobody to share with becomes owner-only.
    """
    if visibility is None:
        if shared_with is None:
            return PhotoVisibility.PUBLIC, []
        visibility = PhotoVisibility.SHARED if shared_with else PhotoVisibility.OWNER_ONLY

    if visibility is not PhotoVisibility.SHARED:
        return visibility, []

    candidates: list[str] = []
    for uid in shared_with or []:
        if is_valid_id(uid) and uid != owner_id and uid not in candidates:
            candidates.append(uid)
    if candidates:
        result = await db.execute(select(User.id).where(User.id.in_(candidates)))
        existing = set(result.scalars().all())
        candidates = [uid for uid in candidates if uid in existing]

    if not candidates:
        return PhotoVisibility.OWNER_ONLY, []
    return PhotoVisibility.SHARED, candidates


def build_photo_response(
    photo: Photo,
    viewer_id: str | None,
    users: dict[str, UserSummary],
    favorite_ids: set[str],
) -> PhotoResponse:
    """Enrich a photo for display: author snapshots, like and favorite flags."""
    liker_ids = photo.liker_ids
    return PhotoResponse(
        id=photo.id,
        user_id=photo.user_id,
        file_name=photo.file_name,
        date_time=photo.date_time,
        visibility=PhotoVisibility(photo.visibility),
        comments=[
            CommentResponse(
                id=c.id,
                comment=c.comment,
                date_time=c.date_time,
                mentions=c.mention_ids,
                user=users.get(c.user_id),
            )
            for c in photo.comments
        ],
        tags=[
            TagResponse(
                id=t.id,
                x=t.x,
                y=t.y,
                w=t.w,
                h=t.h,
                date_time=t.date_time,
                user=users.get(t.user_id),
            )
            for t in photo.tags
        ],
        likesCount=len(liker_ids),
        likedByViewer=viewer_id is not None and viewer_id in liker_ids,
        favoritedByViewer=photo.id in favorite_ids,
    )


async def photos_of_user(
    db: AsyncSession,
    target_user_id: str,
    viewer_id: str | None,
) -> list[PhotoResponse]:
    """
    List a user's photos as the viewer may see them.

    The owner sees every photo; anyone else only those passing the
    visibility predicate. Sorted by like count, then newest first.
    """
    if not is_valid_id(target_user_id):
        raise InvalidArgument("Invalid user id")

    result = await db.execute(select_photos().where(Photo.user_id == target_user_id))
    photos = list(result.scalars().all())

    if viewer_id != target_user_id:
        seed_owner_ids = await load_seed_owner_ids(db)
        photos = filter_visible(photos, viewer_id, seed_owner_ids)

    if not photos:
        return []

    favorite_ids = await load_favorite_ids(db, viewer_id)
    referenced = {c.user_id for p in photos for c in p.comments}
    referenced |= {t.user_id for p in photos for t in p.tags}
    users = await load_user_summaries(db, referenced)

    responses = [build_photo_response(p, viewer_id, users, favorite_ids) for p in photos]
    responses.sort(key=lambda p: (p.likesCount, p.date_time), reverse=True)
    return responses


async def upload_photo(
    db: AsyncSession,
    storage: StorageService,
    owner_id: str,
    data: bytes,
    filename: str | None,
    visibility: PhotoVisibility | None = None,
    shared_with: list[str] | None = None,
) -> UploadResponse:
    """Store an uploaded image and create its photo record."""
    resolved, share_ids = await resolve_sharing(db, owner_id, visibility, shared_with)
    file_name = storage.save_upload(data, filename)

    photo = Photo(
        user_id=owner_id,
        file_name=file_name,
        visibility=resolved.value,
        shares=[PhotoShare(user_id=uid) for uid in share_ids],
    )
    db.add(photo)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        storage.delete_photo_files(file_name)
        logger.error("Failed to save photo", owner_id=owner_id, error=str(e))
        raise Internal("Failed to save photo") from e

    logger.info("Photo uploaded", photo_id=photo.id, owner_id=owner_id, visibility=resolved.value)
    await log_activity(
        db,
        ActivityType.PHOTO_UPLOAD,
        owner_id,
        photo_id=photo.id,
        photo_file_name=file_name,
    )

    return UploadResponse(
        id=photo.id,
        file_name=photo.file_name,
        url=storage.get_photo_url(photo.file_name),
        thumbnail_url=storage.get_thumbnail_url(photo.file_name),
        user_id=photo.user_id,
        date_time=photo.date_time,
        visibility=resolved,
        shared_with=share_ids,
    )


async def update_sharing(
    db: AsyncSession,
    actor_id: str | None,
    photo_id: str,
    payload: SharingUpdate,
) -> SharingResponse:
    """Replace a photo's visibility and share list. Owner only."""
    photo = await get_photo(db, photo_id)
    ensure(authorize(actor_id, Action.UPDATE_SHARING, photo))

    resolved, share_ids = await resolve_sharing(db, photo.user_id, payload.visibility, payload.shared_with)

    await db.execute(delete(PhotoShare).where(PhotoShare.photo_id == photo.id))
    if share_ids:
        await db.execute(
            insert(PhotoShare),
            [{"photo_id": photo.id, "user_id": uid} for uid in share_ids],
        )
    await db.execute(update(Photo).where(Photo.id == photo.id).values(visibility=resolved.value))
    await db.commit()

    logger.info("Photo sharing updated", photo_id=photo.id, visibility=resolved.value)
    return SharingResponse(id=photo.id, visibility=resolved, shared_with=share_ids)


async def delete_photo(
    db: AsyncSession,
    storage: StorageService,
    actor_id: str | None,
    photo_id: str,
) -> None:
    """
    Delete a photo. Owner only.

    The photo row and its comments, likes, tags, shares and favorites go in
    one transaction; activity cleanup and file removal are best-effort.
    """
    photo = await get_photo(db, photo_id)
    ensure(authorize(actor_id, Action.DELETE_PHOTO, photo))
    file_name = photo.file_name

    await db.execute(delete(Photo).where(Photo.id == photo_id))
    await db.commit()

    await purge_activities(db, photo_ids=[photo_id])
    storage.delete_photo_files(file_name)

    logger.info("Photo deleted", photo_id=photo_id, owner_id=actor_id)


async def like_photo(db: AsyncSession, actor_id: str | None, photo_id: str) -> LikeResponse:
    """Add the actor to a visible photo's likes. Idempotent."""
    photo = await get_photo(db, photo_id)
    seed_owner_ids = await load_seed_owner_ids(db)
    ensure(authorize(actor_id, Action.LIKE, photo, seed_owner_ids))

    await insert_ignore(db, Like.__table__, {"photo_id": photo_id, "user_id": actor_id})
    await db.commit()

    return LikeResponse(liked=True, likesCount=await count_likes(db, photo_id))


async def unlike_photo(db: AsyncSession, actor_id: str | None, photo_id: str) -> LikeResponse:
    """Remove the actor from a photo's likes. Idempotent, even for missing photos."""
    if not is_valid_id(photo_id):
        raise InvalidArgument("Invalid photo id")
    ensure(authorize(actor_id, Action.UNLIKE, None))

    await db.execute(delete(Like).where(Like.photo_id == photo_id, Like.user_id == actor_id))
    await db.commit()

    return LikeResponse(liked=False, likesCount=await count_likes(db, photo_id))


def normalize_rectangle(x: float, y: float, w: float, h: float) -> tuple[float, float, float, float]:
    """
    Clamp a tag rectangle into the unit square.

    Each value is clamped to [0, 1]; width and height must stay positive,
    then the rectangle is clipped so it ends inside the photo.
    """
    if any(not isinstance(n, (int, float)) or not math.isfinite(n) for n in (x, y, w, h)):
        raise InvalidArgument("Invalid coord types")

    def clamp01(n: float) -> float:
        return max(0.0, min(1.0, float(n)))

    cx, cy, cw, ch = clamp01(x), clamp01(y), clamp01(w), clamp01(h)
    if cw <= 0 or ch <= 0:
        raise InvalidArgument("Rectangle must have positive size")

    return cx, cy, min(1.0, cx + cw) - cx, min(1.0, cy + ch) - cy


async def add_tag(
    db: AsyncSession,
    actor_id: str | None,
    photo_id: str,
    payload: TagCreate,
) -> TagCreated:
    """Tag a user on a photo the actor can see."""
    photo = await get_photo(db, photo_id)
    seed_owner_ids = await load_seed_owner_ids(db)
    ensure(authorize(actor_id, Action.ADD_TAG, photo, seed_owner_ids))

    if not is_valid_id(payload.user_id):
        raise InvalidArgument("Invalid user to tag")
    if not await db.get(User, payload.user_id):
        raise NotFound("Tagged user not found")

    x, y, w, h = normalize_rectangle(payload.x, payload.y, payload.w, payload.h)

    tag = Tag(photo_id=photo.id, user_id=payload.user_id, x=x, y=y, w=w, h=h)
    db.add(tag)
    await db.commit()

    logger.info("Tag added", photo_id=photo.id, tagged_user_id=payload.user_id, actor_id=actor_id)
    return TagCreated(id=tag.id, x=tag.x, y=tag.y, w=tag.w, h=tag.h, user_id=tag.user_id)
