"""Photo endpoints: profile gallery, upload, sharing, deletion, likes, tags."""

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.api.deps import require_actor_id
from photoshare.core.errors import InvalidArgument
from photoshare.core.logging import get_logger
from photoshare.db.session import get_db
from photoshare.models import PhotoVisibility
from photoshare.schemas import (
    LikeResponse,
    MessageResponse,
    PhotoResponse,
    SharingResponse,
    SharingUpdate,
    TagCreate,
    TagCreated,
    UploadResponse,
)
from photoshare.services import StorageService, get_storage_service, ws_manager
from photoshare.services import photos as photo_service

logger = get_logger(__name__)

router = APIRouter()


@router.get("/photosOfUser/{user_id}", response_model=list[PhotoResponse])
async def photos_of_user(
    user_id: str,
    viewer_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> list[PhotoResponse]:
    """A user's photos as the caller may see them, most liked first."""
    return await photo_service.photos_of_user(db, user_id, viewer_id)


@router.post("/photos/new", response_model=UploadResponse)
async def upload_photo(
    uploadedphoto: UploadFile = File(...),
    visibility: str | None = Form(None),
    shared_with: str | None = Form(None),
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
) -> UploadResponse:
    """
    Upload a photo.

    ``shared_with`` is a JSON array of user ids. Without ``visibility`` it
    decides the photo's visibility: absent is public, ``[]`` owner-only,
    a non-empty list shared.
    """
    resolved_visibility = None
    if visibility:
        try:
            resolved_visibility = PhotoVisibility(visibility)
        except ValueError:
            raise InvalidArgument("Invalid visibility")

    data = await uploadedphoto.read()
    if not data:
        raise InvalidArgument("No file uploaded")

    return await photo_service.upload_photo(
        db,
        storage,
        actor_id,
        data,
        uploadedphoto.filename,
        visibility=resolved_visibility,
        shared_with=photo_service.parse_shared_with(shared_with),
    )


@router.delete("/photos/{photo_id}", response_model=MessageResponse)
async def delete_photo(
    photo_id: str,
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
) -> MessageResponse:
    await photo_service.delete_photo(db, storage, actor_id, photo_id)
    return MessageResponse(message="Photo deleted")


@router.put("/photos/{photo_id}/sharing", response_model=SharingResponse)
async def update_sharing(
    photo_id: str,
    payload: SharingUpdate,
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> SharingResponse:
    return await photo_service.update_sharing(db, actor_id, photo_id, payload)


@router.post("/photos/{photo_id}/like", response_model=LikeResponse)
async def like_photo(
    photo_id: str,
    background_tasks: BackgroundTasks,
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> LikeResponse:
    result = await photo_service.like_photo(db, actor_id, photo_id)
    # Push runs after the response is sent
    background_tasks.add_task(
        ws_manager.send_like_updated, photo_id, result.likesCount, actor_id, True
    )
    return result


@router.post("/photos/{photo_id}/unlike", response_model=LikeResponse)
async def unlike_photo(
    photo_id: str,
    background_tasks: BackgroundTasks,
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> LikeResponse:
    result = await photo_service.unlike_photo(db, actor_id, photo_id)
    background_tasks.add_task(
        ws_manager.send_like_updated, photo_id, result.likesCount, actor_id, False
    )
    return result


@router.post("/photos/{photo_id}/tags", response_model=TagCreated)
async def add_tag(
    photo_id: str,
    payload: TagCreate,
    actor_id: str = Depends(require_actor_id),
    db: AsyncSession = Depends(get_db),
) -> TagCreated:
    """Tag a user on a photo with a rectangle in normalized coordinates."""
    return await photo_service.add_tag(db, actor_id, photo_id, payload)
