"""Photo model and its owned collections."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photoshare.db.base import Base, new_id, utcnow

if TYPE_CHECKING:
    from photoshare.models.comment import Comment


class PhotoVisibility(str, Enum):
    """Who besides the owner may see a photo."""

    PUBLIC = "public"            # Everyone
    OWNER_ONLY = "owner_only"    # Nobody but the owner
    SHARED = "shared"            # Exactly the users in photo_shares


class Photo(Base):
    """Photo model - a single uploaded image."""

    __tablename__ = "photos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    file_name: Mapped[str] = mapped_column(String(255))
    date_time: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    visibility: Mapped[str] = mapped_column(
        String(20),
        default=PhotoVisibility.PUBLIC.value,
    )

    # Relationships
    shares: Mapped[list["PhotoShare"]] = relationship(
        back_populates="photo",
        lazy="selectin",
        passive_deletes=True,
    )
    likes: Mapped[list["Like"]] = relationship(
        back_populates="photo",
        lazy="selectin",
        passive_deletes=True,
    )
    tags: Mapped[list["Tag"]] = relationship(
        back_populates="photo",
        lazy="selectin",
        order_by="Tag.date_time",
        passive_deletes=True,
    )
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="photo",
        lazy="selectin",
        order_by="Comment.date_time",
        passive_deletes=True,
    )

    @property
    def shared_with_ids(self) -> set[str]:
        return {share.user_id for share in self.shares}

    @property
    def liker_ids(self) -> set[str]:
        return {like.user_id for like in self.likes}


class PhotoShare(Base):
    """One member of a photo's shared-with list. Never the owner."""

    __tablename__ = "photo_shares"

    photo_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("photos.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    photo: Mapped["Photo"] = relationship(back_populates="shares")


class Like(Base):
    __tablename__ = "likes"

    photo_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("photos.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    photo: Mapped["Photo"] = relationship(back_populates="likes")


class Tag(Base):
    """A person tagged on a photo by a normalized rectangle."""

    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    photo_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("photos.id", ondelete="CASCADE"),
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
    )
    # Relative coordinates, all in [0, 1]
    x: Mapped[float] = mapped_column(Float)
    y: Mapped[float] = mapped_column(Float)
    w: Mapped[float] = mapped_column(Float)
    h: Mapped[float] = mapped_column(Float)
    date_time: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    photo: Mapped["Photo"] = relationship(back_populates="tags")
