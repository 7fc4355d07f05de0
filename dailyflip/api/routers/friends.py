from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dailyflip.api.dependencies import get_async_db
from dailyflip.core.auth import get_current_user
from dailyflip.models.users import User as UserModel
from dailyflip.schemas.friends import (
    Friend, Friendship as FriendshipSchema, FriendRequestCreate, FriendRequestAction, PendingRequest
)
from dailyflip.schemas.users import PublicUser
from dailyflip.services.friendships import FriendshipService

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get("", response_model=list[Friend])
async def get_friends(
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Accepted friends of the current user, each with the friendship id used to remove them.
    """
    friends = await FriendshipService(db).list_friends(current_user.id)
    return [
        Friend(**PublicUser.model_validate(other).model_dump(), friendship_id=f.id)
        for f, other in friends
    ]


@router.post("", response_model=FriendshipSchema, status_code=status.HTTP_201_CREATED)
async def send_friend_request(
    body: FriendRequestCreate,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Send a friend request to friend_id. 409 if the pair already has a row either way.
    """
    return await FriendshipService(db).request(current_user.id, body.friend_id)


@router.get("/pending", response_model=list[PendingRequest])
async def get_pending_requests(
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Incoming requests waiting for an answer."""
    return await FriendshipService(db).list_pending(current_user.id)


@router.patch("/{friendship_id}")
async def respond_to_request(
    friendship_id: int,
    body: FriendRequestAction,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Accept or reject an incoming request. Only its recipient may answer.
    """
    friendship = await FriendshipService(db).respond(friendship_id, current_user.id, body.action)
    if friendship is None:
        return {"message": "Friendship request rejected"}
    return FriendshipSchema.model_validate(friendship)


@router.delete("/{friendship_id}")
async def remove_friendship(
    friendship_id: int,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    await FriendshipService(db).remove(friendship_id, current_user.id)
    return {"message": "Friendship removed"}
