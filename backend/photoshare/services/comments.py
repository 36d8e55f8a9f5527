"""Comment mutations and per-user comment views."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.core.errors import InvalidArgument, NotFound, Unauthorized
from photoshare.core.logging import get_logger
from photoshare.db.base import is_valid_id
from photoshare.models import ActivityType, Comment, CommentMention, Photo
from photoshare.schemas import CommentAdded, UserComment, UserMention
from photoshare.services.activity import log_activity
from photoshare.services.guard import Action, authorize, ensure
from photoshare.services.mentions import extract_mentions
from photoshare.services.photos import get_photo, select_photos
from photoshare.services.users import load_user_summaries
from photoshare.services.visibility import filter_visible, load_seed_owner_ids

logger = get_logger(__name__)


async def add_comment(
    db: AsyncSession,
    actor_id: str | None,
    photo_id: str,
    text: str,
) -> CommentAdded:
    """
    Append a comment to a photo.

    Mention markup is resolved before storage. The photo must exist but its
    visibility to the commenter is not re-checked.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        raise InvalidArgument("Comment cannot be empty")

    photo = await get_photo(db, photo_id)
    ensure(authorize(actor_id, Action.ADD_COMMENT, photo))

    mentions = await extract_mentions(db, trimmed)

    # A single INSERT; concurrent comments on the same photo never overwrite each other
    comment = Comment(
        photo_id=photo.id,
        user_id=actor_id,
        comment=mentions.display_text,
        mentions=[
            CommentMention(position=i, user_id=uid)
            for i, uid in enumerate(mentions.mention_ids)
        ],
    )
    db.add(comment)
    await db.commit()

    logger.info(
        "Comment added",
        photo_id=photo.id,
        comment_id=comment.id,
        mention_count=len(mentions.mention_ids),
    )
    await log_activity(
        db,
        ActivityType.COMMENT_ADDED,
        actor_id,
        photo_id=photo.id,
        photo_file_name=photo.file_name,
    )

    return CommentAdded(message="Comment added", mentions=mentions.mention_ids)


async def delete_comment(
    db: AsyncSession,
    actor_id: str | None,
    photo_id: str,
    comment_id: str,
) -> None:
    """Delete a comment. Only its author may, not even the photo owner."""
    if not is_valid_id(photo_id) or not is_valid_id(comment_id):
        raise InvalidArgument("Invalid ids")

    if actor_id is None:
        raise Unauthorized()
    if not await get_photo(db, photo_id):
        raise NotFound("Photo not found")

    result = await db.execute(
        select(Comment).where(Comment.id == comment_id, Comment.photo_id == photo_id)
    )
    comment = result.scalar_one_or_none()
    ensure(authorize(actor_id, Action.DELETE_COMMENT, comment))

    await db.execute(delete(Comment).where(Comment.id == comment_id))
    await db.commit()
    logger.info("Comment deleted", photo_id=photo_id, comment_id=comment_id)


async def comments_of_user(
    db: AsyncSession,
    user_id: str,
    viewer_id: str | None,
) -> list[UserComment]:
    """Every comment a user wrote on photos the viewer may see."""
    if not is_valid_id(user_id):
        raise InvalidArgument("Invalid user id")

    result = await db.execute(
        select_photos().where(Photo.comments.any(Comment.user_id == user_id))
    )
    seed_owner_ids = await load_seed_owner_ids(db)
    photos = filter_visible(list(result.scalars().all()), viewer_id, seed_owner_ids)

    return [
        UserComment(
            photo_id=photo.id,
            owner_id=photo.user_id,
            file_name=photo.file_name,
            comment=c.comment,
            date_time=c.date_time,
        )
        for photo in photos
        for c in photo.comments
        if c.user_id == user_id
    ]


async def mentions_of_user(
    db: AsyncSession,
    user_id: str,
    viewer_id: str | None,
) -> list[UserMention]:
    """Photos visible to the viewer whose comments mention a user."""
    if not is_valid_id(user_id):
        raise InvalidArgument("Invalid user id")

    result = await db.execute(
        select_photos().where(
            Photo.comments.any(Comment.mentions.any(CommentMention.user_id == user_id))
        )
    )
    seed_owner_ids = await load_seed_owner_ids(db)
    photos = filter_visible(list(result.scalars().all()), viewer_id, seed_owner_ids)
    if not photos:
        return []

    owners = await load_user_summaries(db, {p.user_id for p in photos})
    mentions = []
    for p in photos:
        owner = owners.get(p.user_id)
        mentions.append(
            UserMention(
                photo_id=p.id,
                file_name=p.file_name,
                owner_id=p.user_id,
                owner_first_name=owner.first_name if owner else "",
                owner_last_name=owner.last_name if owner else "",
            )
        )
    return mentions
