"""User accounts, favorites and the account deletion cascade."""

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.core.errors import Conflict, Internal, InvalidArgument, NotFound, Unauthorized
from photoshare.core.logging import get_logger
from photoshare.core.security import hash_password, verify_password
from photoshare.db.base import is_valid_id
from photoshare.db.helpers import insert_ignore
from photoshare.models import ActivityType, Comment, Favorite, Like, Photo, PhotoShare, Tag, User
from photoshare.schemas import AccountResponse, UserCreate, UserDetail, UserSummary
from photoshare.services.activity import log_activity, purge_activities
from photoshare.services.guard import Action, authorize, ensure
from photoshare.services.storage import StorageService

logger = get_logger(__name__)


def summarize(user: User) -> UserSummary:
    return UserSummary(id=user.id, first_name=user.first_name, last_name=user.last_name)


async def load_user_summaries(db: AsyncSession, user_ids: Iterable[str]) -> dict[str, UserSummary]:
    """Batch-load ``{_id, first_name, last_name}`` snapshots keyed by id."""
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {u.id: summarize(u) for u in result.scalars().all()}


async def register(db: AsyncSession, payload: UserCreate) -> AccountResponse:
    """Create an account and record the registration."""
    login_name = payload.login_name.strip()
    first_name = payload.first_name.strip()
    last_name = payload.last_name.strip()
    if not login_name or not payload.password or not first_name or not last_name:
        raise InvalidArgument("login_name, password, first_name, last_name required")

    existing = await db.execute(select(User.id).where(User.login_name == login_name))
    if existing.scalar_one_or_none():
        raise Conflict("login_name already exists")

    user = User(
        login_name=login_name,
        password_hash=hash_password(payload.password),
        first_name=first_name,
        last_name=last_name,
        location=payload.location or "",
        description=payload.description or "",
        occupation=payload.occupation or "",
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same name
        await db.rollback()
        raise Conflict("login_name already exists") from e

    logger.info("User registered", user_id=user.id, login_name=login_name)
    await log_activity(db, ActivityType.USER_REGISTER, user.id)

    return AccountResponse(
        id=user.id,
        login_name=user.login_name,
        first_name=user.first_name,
        last_name=user.last_name,
    )


async def authenticate(db: AsyncSession, login_name: str, password: str) -> AccountResponse:
    """Check credentials and record the login."""
    if not login_name or not password:
        raise InvalidArgument("login_name and password required")

    result = await db.execute(select(User).where(User.login_name == login_name))
    user = result.scalar_one_or_none()
    if not user or not verify_password(password, user.password_hash):
        raise Unauthorized("Invalid credentials")

    await log_activity(db, ActivityType.USER_LOGIN, user.id)

    return AccountResponse(
        id=user.id,
        login_name=user.login_name,
        first_name=user.first_name,
        last_name=user.last_name,
    )


async def record_logout(db: AsyncSession, user_id: str) -> None:
    await log_activity(db, ActivityType.USER_LOGOUT, user_id)


async def list_users(db: AsyncSession) -> list[UserSummary]:
    result = await db.execute(select(User).order_by(User.last_name, User.first_name))
    return [summarize(u) for u in result.scalars().all()]


async def get_user_detail(db: AsyncSession, user_id: str) -> UserDetail:
    if not is_valid_id(user_id):
        raise InvalidArgument("Invalid user id")
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return UserDetail(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        location=user.location,
        description=user.description,
        occupation=user.occupation,
    )


async def add_favorite(db: AsyncSession, actor_id: str | None, photo_id: str) -> None:
    """Add a photo to the actor's favorites. Idempotent."""
    if actor_id is None:
        raise Unauthorized()
    if not is_valid_id(photo_id):
        raise InvalidArgument("Invalid photo id")
    photo = await db.get(Photo, photo_id)
    ensure(authorize(actor_id, Action.FAVORITE, photo))

    await insert_ignore(db, Favorite.__table__, {"user_id": actor_id, "photo_id": photo_id})
    await db.commit()


async def remove_favorite(db: AsyncSession, actor_id: str | None, photo_id: str) -> None:
    """Remove a photo from the actor's favorites. Idempotent."""
    if actor_id is None:
        raise Unauthorized()
    if not is_valid_id(photo_id):
        raise InvalidArgument("Invalid photo id")
    ensure(authorize(actor_id, Action.UNFAVORITE, None))

    await db.execute(
        delete(Favorite).where(Favorite.user_id == actor_id, Favorite.photo_id == photo_id)
    )
    await db.commit()


async def delete_account(
    db: AsyncSession,
    storage: StorageService,
    actor_id: str | None,
    user_id: str,
) -> None:
    """
    Delete an account and everything hanging off it.

    The user's rows (photos and their comments/likes/tags/shares/favorites,
    the user's comments on other photos, likes, favorites, shares and tags
    naming the user) go in one transaction. Activity cleanup and file
    removal follow as separate best-effort steps, so a crash between them can
    leave orphaned feed entries or files behind.
    """
    if not is_valid_id(user_id):
        raise InvalidArgument("Invalid user id")
    user = await db.get(User, user_id) if actor_id == user_id else None
    ensure(authorize(actor_id, Action.DELETE_ACCOUNT, user, target_user_id=user_id))

    result = await db.execute(select(Photo.id, Photo.file_name).where(Photo.user_id == user_id))
    photos = result.all()
    photo_ids = [p.id for p in photos]

    try:
        if photo_ids:
            # Comments, likes, tags, shares and favorites of these photos
            # follow through ON DELETE CASCADE.
            await db.execute(delete(Photo).where(Photo.id.in_(photo_ids)))
        await db.execute(delete(Comment).where(Comment.user_id == user_id))
        await db.execute(delete(Like).where(Like.user_id == user_id))
        await db.execute(delete(Favorite).where(Favorite.user_id == user_id))
        await db.execute(delete(PhotoShare).where(PhotoShare.user_id == user_id))
        await db.execute(delete(Tag).where(Tag.user_id == user_id))
        await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Failed to delete account", user_id=user_id, error=str(e))
        raise Internal("Failed to delete account") from e

    await purge_activities(db, user_id=user_id, photo_ids=photo_ids)

    for photo in photos:
        storage.delete_photo_files(photo.file_name)

    logger.info("Account deleted", user_id=user_id, photo_count=len(photo_ids))
