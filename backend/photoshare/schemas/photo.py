"""Photo schemas."""

from datetime import datetime

from pydantic import Field

from photoshare.models import PhotoVisibility
from photoshare.schemas.base import ApiModel
from photoshare.schemas.user import UserSummary


class CommentResponse(ApiModel):
    id: str = Field(alias="_id")
    comment: str
    date_time: datetime
    mentions: list[str] = []
    user: UserSummary | None = None


class TagResponse(ApiModel):
    id: str = Field(alias="_id")
    x: float
    y: float
    w: float
    h: float
    date_time: datetime
    user: UserSummary | None = None


class PhotoResponse(ApiModel):
    """A photo as shown in a profile gallery, enriched for the viewer."""

    id: str = Field(alias="_id")
    user_id: str
    file_name: str
    date_time: datetime
    visibility: PhotoVisibility
    comments: list[CommentResponse] = []
    tags: list[TagResponse] = []
    likesCount: int = 0
    likedByViewer: bool = False
    favoritedByViewer: bool = False


class UploadResponse(ApiModel):
    id: str = Field(alias="_id")
    file_name: str
    url: str
    thumbnail_url: str
    user_id: str
    date_time: datetime
    visibility: PhotoVisibility
    shared_with: list[str] = []


class SharingUpdate(ApiModel):
    """
    Sharing change request.

    ``visibility`` is explicit; when omitted it is inferred from
    ``shared_with`` (absent: public, empty: owner only, ids: shared).
    """

    visibility: PhotoVisibility | None = None
    shared_with: list[str] | None = None


class SharingResponse(ApiModel):
    id: str = Field(alias="_id")
    visibility: PhotoVisibility
    shared_with: list[str] = []


class TagCreate(ApiModel):
    user_id: str
    x: float
    y: float
    w: float
    h: float


class TagCreated(ApiModel):
    id: str = Field(alias="_id")
    x: float
    y: float
    w: float
    h: float
    user_id: str


class LikeResponse(ApiModel):
    liked: bool
    likesCount: int


class HighlightPhoto(ApiModel):
    id: str = Field(alias="_id")
    file_name: str
    date_time: datetime
    commentsCount: int


class HighlightsResponse(ApiModel):
    mostRecent: HighlightPhoto | None = None
    mostCommented: HighlightPhoto | None = None


class FavoritePhoto(ApiModel):
    id: str = Field(alias="_id")
    file_name: str
    date_time: datetime
    user: UserSummary


class FavoriteResponse(ApiModel):
    favorited: bool
