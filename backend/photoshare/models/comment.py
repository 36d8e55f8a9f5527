"""Comment model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photoshare.db.base import Base, new_id, utcnow

if TYPE_CHECKING:
    from photoshare.models.photo import Photo


class Comment(Base):
    """A comment on a photo. Text is stored with mention markup resolved."""

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    photo_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("photos.id", ondelete="CASCADE"),
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    comment: Mapped[str] = mapped_column(Text)
    date_time: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    photo: Mapped["Photo"] = relationship(back_populates="comments")
    mentions: Mapped[list["CommentMention"]] = relationship(
        back_populates="comment",
        lazy="selectin",
        order_by="CommentMention.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def mention_ids(self) -> list[str]:
        return [mention.user_id for mention in self.mentions]


class CommentMention(Base):
    """A user referenced from comment text."""

    __tablename__ = "comment_mentions"

    comment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Validated at write time only; not a foreign key.
    user_id: Mapped[str] = mapped_column(String(36), index=True)

    comment: Mapped["Comment"] = relationship(back_populates="mentions")
