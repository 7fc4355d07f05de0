from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from dailyflip.schemas.users import PublicUser


class FriendRequestCreate(BaseModel):
    friend_id: int


class FriendRequestAction(BaseModel):
    action: str = Field(description="'accept' or 'reject'")


class Friendship(BaseModel):
    id: int
    requester_id: int
    recipient_id: int
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Friend(PublicUser):
    """The other party of an accepted friendship."""
    friendship_id: int


class PendingRequest(BaseModel):
    id: int
    created_at: datetime
    requester: PublicUser

    model_config = ConfigDict(from_attributes=True)
