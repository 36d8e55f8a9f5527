"""Authorization decisions for write operations."""

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum

from photoshare.core.errors import Forbidden, NotFound, PhotoShareError, Unauthorized
from photoshare.models import Comment, Photo, User
from photoshare.services.visibility import is_visible


class Action(str, Enum):
    """Guarded mutations."""

    ADD_COMMENT = "add_comment"
    DELETE_COMMENT = "delete_comment"
    DELETE_PHOTO = "delete_photo"
    UPDATE_SHARING = "update_sharing"
    ADD_TAG = "add_tag"
    LIKE = "like"
    UNLIKE = "unlike"
    FAVORITE = "favorite"
    UNFAVORITE = "unfavorite"
    DELETE_ACCOUNT = "delete_account"


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Deny:
    error: type[PhotoShareError]
    reason: str

    def to_exception(self) -> PhotoShareError:
        return self.error(self.reason)


Decision = Allow | Deny

Resource = Photo | Comment | User | None

# Removals that succeed whether or not the target still exists
_IDEMPOTENT_REMOVALS = {Action.UNLIKE, Action.UNFAVORITE}

# Actions whose target must be visible to the actor
_REQUIRES_VISIBILITY = {Action.ADD_TAG, Action.LIKE}

# Actions only the photo owner may perform
_OWNER_ONLY = {Action.DELETE_PHOTO, Action.UPDATE_SHARING}

_NOT_FOUND_MESSAGES = {
    Action.DELETE_COMMENT: "Comment not found",
    Action.DELETE_ACCOUNT: "User not found",
}


def authorize(
    actor_id: str | None,
    action: Action,
    resource: Resource,
    seed_owner_ids: Collection[str] = (),
    target_user_id: str | None = None,
) -> Decision:
    """
    Decide whether an actor may perform an action on a resource.

    Args:
        actor_id: Session user, or None when unauthenticated
        action: The mutation being attempted
        resource: The loaded target (Photo, Comment or User), None if absent
        seed_owner_ids: Seed account ids, for the visibility carve-out
        target_user_id: Requested user id for DELETE_ACCOUNT

    Returns:
        Allow, or Deny carrying Unauthorized / Forbidden / NotFound
    """
    if actor_id is None:
        return Deny(Unauthorized, "Unauthorized")

    if action in _IDEMPOTENT_REMOVALS:
        return Allow()

    if action is Action.DELETE_ACCOUNT:
        requested = target_user_id if target_user_id is not None else getattr(resource, "id", None)
        if requested != actor_id:
            return Deny(Forbidden, "Forbidden")

    if resource is None:
        return Deny(NotFound, _NOT_FOUND_MESSAGES.get(action, "Photo not found"))

    if action is Action.DELETE_COMMENT:
        if not isinstance(resource, Comment) or resource.user_id != actor_id:
            return Deny(Forbidden, "Forbidden")
        return Allow()

    if action in _OWNER_ONLY:
        if not isinstance(resource, Photo) or resource.user_id != actor_id:
            return Deny(Forbidden, "Forbidden")
        return Allow()

    if action in _REQUIRES_VISIBILITY:
        if not isinstance(resource, Photo) or not is_visible(resource, actor_id, seed_owner_ids):
            return Deny(Forbidden, "Forbidden")
        return Allow()

    # ADD_COMMENT, FAVORITE: authenticated and the photo exists.
    # Commenting does not re-check visibility.
    return Allow()


def ensure(decision: Decision) -> None:
    """Raise the error carried by a Deny."""
    if isinstance(decision, Deny):
        raise decision.to_exception()
