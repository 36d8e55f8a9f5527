"""Comment schemas."""

from datetime import datetime

from photoshare.schemas.base import ApiModel


class CommentCreate(ApiModel):
    comment: str


class CommentAdded(ApiModel):
    message: str
    mentions: list[str] = []


class UserComment(ApiModel):
    """A comment listed on its author's profile."""

    photo_id: str
    owner_id: str
    file_name: str
    comment: str
    date_time: datetime


class UserMention(ApiModel):
    """A photo whose comments mention a user."""

    photo_id: str
    file_name: str
    owner_id: str
    owner_first_name: str = ""
    owner_last_name: str = ""
