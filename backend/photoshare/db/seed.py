"""
Demo data loader.

Run with ``python -m photoshare.db.seed``. Creates a handful of seed
accounts (password ``weak``) with generated photos and a few comments.
Does nothing if seed accounts already exist.
"""

import asyncio
import io
from datetime import timedelta

from PIL import Image
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from photoshare.core.logging import get_logger, setup_logging
from photoshare.core.security import hash_password
from photoshare.db.base import utcnow
from photoshare.db.session import async_session_maker, init_db
from photoshare.models import Comment, Photo, PhotoVisibility, User
from photoshare.services.storage import StorageService, get_storage_service

logger = get_logger(__name__)

SEED_PASSWORD = "weak"

SEED_USERS = [
    ("malcolm", "Ian", "Malcolm", "Austin, TX", "Mathematician", "Life finds a way."),
    ("ripley", "Ellen", "Ripley", "Nostromo", "Warrant Officer", "Lucky to be alive."),
    ("took", "Peregrin", "Took", "Gondor", "Thain", "Fool of a Took!"),
    ("kenobi", "Rey", "Kenobi", "D'Qar", "Rebel", "Finding my place."),
    ("ludgate", "April", "Ludgate", "Pawnee, IN", "Animal Control", "I'm not a people person."),
]

# login_name, colour, hours ago, visibility
SEED_PHOTOS = [
    ("malcolm", (34, 139, 34), 72, PhotoVisibility.PUBLIC),
    ("malcolm", (200, 80, 40), 48, PhotoVisibility.OWNER_ONLY),
    ("ripley", (20, 20, 60), 60, PhotoVisibility.PUBLIC),
    ("took", (240, 200, 90), 36, PhotoVisibility.PUBLIC),
    ("kenobi", (180, 120, 60), 24, PhotoVisibility.PUBLIC),
    ("ludgate", (90, 40, 120), 12, PhotoVisibility.PUBLIC),
]

# author, photo index in SEED_PHOTOS, text
SEED_COMMENTS = [
    ("ripley", 0, "Is that a fern? Looks prehistoric."),
    ("took", 0, "Second breakfast spot?"),
    ("malcolm", 2, "Must go faster."),
    ("ludgate", 3, "Ugh. Sunshine."),
    ("kenobi", 5, "Nice colours."),
]


def _solid_jpeg(colour: tuple[int, int, int]) -> bytes:
    output = io.BytesIO()
    Image.new("RGB", (640, 480), colour).save(output, format="JPEG")
    return output.getvalue()


async def seed_database(
    db: AsyncSession,
    storage: StorageService,
) -> bool:
    """
    Insert the demo accounts, photos and comments.

    Returns:
        False if seed accounts were already present
    """
    existing = await db.execute(select(User.id).where(User.is_seed.is_(True)).limit(1))
    if existing.scalar_one_or_none():
        logger.info("Seed data already present")
        return False

    password_hash = hash_password(SEED_PASSWORD)
    users: dict[str, User] = {}
    for login_name, first, last, location, occupation, description in SEED_USERS:
        users[login_name] = User(
            login_name=login_name,
            password_hash=password_hash,
            first_name=first,
            last_name=last,
            location=location,
            occupation=occupation,
            description=description,
            is_seed=True,
        )
    db.add_all(users.values())
    await db.flush()

    now = utcnow()
    photos: list[Photo] = []
    for login_name, colour, hours_ago, visibility in SEED_PHOTOS:
        file_name = storage.save_upload(_solid_jpeg(colour), f"{login_name}.jpg")
        photos.append(
            Photo(
                user_id=users[login_name].id,
                file_name=file_name,
                date_time=now - timedelta(hours=hours_ago),
                visibility=visibility.value,
            )
        )
    db.add_all(photos)
    await db.flush()

    for minutes, (author, photo_index, text) in enumerate(SEED_COMMENTS, start=1):
        photo = photos[photo_index]
        db.add(
            Comment(
                photo_id=photo.id,
                user_id=users[author].id,
                comment=text,
                date_time=photo.date_time + timedelta(minutes=minutes),
            )
        )

    await db.commit()
    logger.info("Seed data loaded", users=len(users), photos=len(photos))
    return True


async def main(session_maker: async_sessionmaker[AsyncSession] = async_session_maker) -> None:
    setup_logging()
    await init_db()
    async with session_maker() as db:
        await seed_database(db, get_storage_service())


if __name__ == "__main__":
    asyncio.run(main())
