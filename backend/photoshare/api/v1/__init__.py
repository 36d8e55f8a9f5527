"""API v1 router."""

from fastapi import APIRouter

from photoshare.api.v1 import activities, auth, comments, favorites, photos, users, websocket

router = APIRouter()

router.include_router(auth.router, prefix="/admin", tags=["auth"])
router.include_router(users.router, prefix="/user", tags=["users"])
router.include_router(photos.router, tags=["photos"])
router.include_router(comments.router, tags=["comments"])
router.include_router(activities.router, prefix="/activities", tags=["activities"])
router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
router.include_router(websocket.router, prefix="/ws", tags=["websocket"])
