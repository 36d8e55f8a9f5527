"""Activity log model."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from photoshare.db.base import Base, new_id, utcnow


class ActivityType(str, Enum):
    """Activity feed entry types."""

    PHOTO_UPLOAD = "photo_upload"
    COMMENT_ADDED = "comment_added"
    USER_REGISTER = "user_register"
    USER_LOGIN = "user_login"
    USER_LOGOUT = "user_logout"


class Activity(Base):
    """Append-only record of a user action."""

    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    type: Mapped[str] = mapped_column(String(32))
    date_time: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    user_id: Mapped[str] = mapped_column(String(36), index=True)

    # Photo context for photo-linked types
    photo_id: Mapped[str | None] = mapped_column(String(36), index=True, default=None)
    photo_file_name: Mapped[str | None] = mapped_column(String(255), default=None)
