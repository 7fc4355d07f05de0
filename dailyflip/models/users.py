from datetime import datetime
from sqlalchemy import Integer, String, ForeignKey, DateTime, CheckConstraint, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from typing import TYPE_CHECKING
from dailyflip.database import Base

if TYPE_CHECKING:
    from dailyflip.models.posts import Post, Comment

ROLE_MEMBER = "MEMBER"
ROLE_ADMIN = "ADMIN"

FRIENDSHIP_PENDING = "PENDING"
FRIENDSHIP_ACCEPTED = "ACCEPTED"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    image: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String(20), default=ROLE_MEMBER, nullable=False)  # "MEMBER", "ADMIN"
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile: Mapped["Profile"] = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    posts: Mapped[list["Post"]] = relationship("Post", back_populates="user")
    comments: Mapped[list["Comment"]] = relationship("Comment", back_populates="user")

    sent_friend_requests: Mapped[list["Friendship"]] = relationship(
        "Friendship",
        foreign_keys="[Friendship.requester_id]",
        back_populates="requester",
    )
    received_friend_requests: Mapped[list["Friendship"]] = relationship(
        "Friendship",
        foreign_keys="[Friendship.recipient_id]",
        back_populates="recipient",
    )


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    bio: Mapped[str] = mapped_column(String, default="", nullable=False)
    background_image: Mapped[str] = mapped_column(String, default="", nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="profile")


class Friendship(Base):
    """
    Directed friend request between two users.

    requester/recipient keep who asked whom; user_low_id/user_high_id hold the
    same pair sorted, and the unique constraint on them allows a single row per
    unordered pair whatever the direction.
    """
    __tablename__ = "friendships"
    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_friendships_pair"),
        CheckConstraint("user_low_id < user_high_id", name="ck_friendships_pair_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    requester_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    recipient_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    user_low_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_high_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=FRIENDSHIP_PENDING, nullable=False)  # "PENDING", "ACCEPTED"
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    requester: Mapped["User"] = relationship("User", foreign_keys=[requester_id], back_populates="sent_friend_requests")
    recipient: Mapped["User"] = relationship("User", foreign_keys=[recipient_id], back_populates="received_friend_requests")

    @staticmethod
    def pair_key(first_id: int, second_id: int) -> tuple[int, int]:
        return min(first_id, second_id), max(first_id, second_id)

    def other_party(self, user_id: int) -> "User":
        return self.recipient if self.requester_id == user_id else self.requester
