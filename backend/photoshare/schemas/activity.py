"""Activity feed schemas."""

from datetime import datetime

from pydantic import Field

from photoshare.models import ActivityType
from photoshare.schemas.base import ApiModel
from photoshare.schemas.user import UserSummary


class ActivityResponse(ApiModel):
    id: str = Field(alias="_id")
    type: ActivityType
    date_time: datetime
    user: UserSummary | None = None
    photo_file_name: str | None = None
    photo_id: str | None = None


class LastActivityResponse(ApiModel):
    user_id: str
    type: ActivityType
    date_time: datetime
    photo_file_name: str | None = None
    photo_id: str | None = None
