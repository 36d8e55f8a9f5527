"""Shared fixtures: in-memory database, temp image storage, HTTP clients."""

import io
from collections.abc import AsyncGenerator, Iterable
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from photoshare.core.security import hash_password
from photoshare.db.session import build_engine, get_db, init_db
from photoshare.main import app
from photoshare.models import Photo, PhotoShare, PhotoVisibility, User
from photoshare.services import LocalStorageService, get_storage_service

PASSWORD = "secret-password"

# Hashing is slow on purpose; hash once for every test user
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def storage(tmp_path) -> LocalStorageService:
    return LocalStorageService(base_dir=tmp_path / "images", max_width=200, thumbnail_max_width=50)


@pytest.fixture
async def make_client(session_maker, storage):
    """Factory for HTTP clients, each with its own cookie jar."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage

    clients: list[AsyncClient] = []

    def factory() -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
    app.dependency_overrides.clear()


@pytest.fixture
async def client(make_client) -> AsyncClient:
    return make_client()


def jpeg_bytes(size: tuple[int, int] = (320, 240), colour: tuple[int, int, int] = (200, 30, 30)) -> bytes:
    output = io.BytesIO()
    Image.new("RGB", size, colour).save(output, format="JPEG")
    return output.getvalue()


async def create_user(
    db: AsyncSession,
    login_name: str,
    first_name: str = "Test",
    last_name: str | None = None,
    is_seed: bool = False,
) -> User:
    user = User(
        login_name=login_name,
        password_hash=PASSWORD_HASH,
        first_name=first_name,
        last_name=last_name or login_name.capitalize(),
        is_seed=is_seed,
    )
    db.add(user)
    await db.commit()
    return user


async def create_photo(
    db: AsyncSession,
    owner: User,
    visibility: PhotoVisibility = PhotoVisibility.PUBLIC,
    shared_with: Iterable[User] = (),
    date_time: datetime | None = None,
    file_name: str = "photo.jpg",
) -> Photo:
    photo = Photo(
        user_id=owner.id,
        file_name=file_name,
        visibility=visibility.value,
        shares=[PhotoShare(user_id=u.id) for u in shared_with],
    )
    if date_time is not None:
        photo.date_time = date_time
    db.add(photo)
    await db.commit()
    return photo


async def login(client: AsyncClient, login_name: str, password: str = PASSWORD) -> dict:
    response = await client.post(
        "/api/v1/admin/login",
        json={"login_name": login_name, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()
