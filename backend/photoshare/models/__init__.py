# Models module

from photoshare.models.user import User, Favorite
from photoshare.models.photo import Photo, PhotoShare, PhotoVisibility, Like, Tag
from photoshare.models.comment import Comment, CommentMention
from photoshare.models.activity import Activity, ActivityType

__all__ = [
    "User",
    "Favorite",
    "Photo",
    "PhotoShare",
    "PhotoVisibility",
    "Like",
    "Tag",
    "Comment",
    "CommentMention",
    "Activity",
    "ActivityType",
]
