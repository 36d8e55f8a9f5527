"""Demo data loader."""

from sqlalchemy import select

from photoshare.db.seed import SEED_PASSWORD, SEED_PHOTOS, SEED_USERS, seed_database
from photoshare.models import Photo, User
from photoshare.services.photos import photos_of_user
from photoshare.services.users import authenticate
from tests.conftest import create_user


async def test_seed_loads_once(db, storage):
    assert await seed_database(db, storage) is True
    assert await seed_database(db, storage) is False

    users = (await db.execute(select(User))).scalars().all()
    photos = (await db.execute(select(Photo))).scalars().all()
    assert len(users) == len(SEED_USERS)
    assert all(u.is_seed for u in users)
    assert len(photos) == len(SEED_PHOTOS)


async def test_seed_accounts_use_weak_password(db, storage):
    await seed_database(db, storage)

    account = await authenticate(db, "malcolm", SEED_PASSWORD)

    assert account.first_name == "Ian"


async def test_seed_owner_only_photos_readable_by_others(db, storage):
    await seed_database(db, storage)
    viewer = await create_user(db, "viewer")
    malcolm = (await db.execute(select(User).where(User.login_name == "malcolm"))).scalar_one()

    photos = await photos_of_user(db, malcolm.id, viewer.id)

    assert len(photos) == 2
