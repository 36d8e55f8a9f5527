# Schemas module

from photoshare.schemas.base import ApiModel, MessageResponse
from photoshare.schemas.user import (
    UserSummary,
    UserDetail,
    UserCreate,
    LoginRequest,
    AccountResponse,
    UserCounts,
)
from photoshare.schemas.photo import (
    CommentResponse,
    TagResponse,
    PhotoResponse,
    UploadResponse,
    SharingUpdate,
    SharingResponse,
    TagCreate,
    TagCreated,
    LikeResponse,
    HighlightPhoto,
    HighlightsResponse,
    FavoritePhoto,
    FavoriteResponse,
)
from photoshare.schemas.comment import CommentCreate, CommentAdded, UserComment, UserMention
from photoshare.schemas.activity import ActivityResponse, LastActivityResponse
from photoshare.schemas.websocket import WSMessage, WSMessageType, LikeUpdatedMessage

__all__ = [
    "ApiModel",
    "MessageResponse",
    "UserSummary",
    "UserDetail",
    "UserCreate",
    "LoginRequest",
    "AccountResponse",
    "UserCounts",
    "CommentResponse",
    "TagResponse",
    "PhotoResponse",
    "UploadResponse",
    "SharingUpdate",
    "SharingResponse",
    "TagCreate",
    "TagCreated",
    "LikeResponse",
    "HighlightPhoto",
    "HighlightsResponse",
    "FavoritePhoto",
    "FavoriteResponse",
    "CommentCreate",
    "CommentAdded",
    "UserComment",
    "UserMention",
    "ActivityResponse",
    "LastActivityResponse",
    "WSMessage",
    "WSMessageType",
    "LikeUpdatedMessage",
]
