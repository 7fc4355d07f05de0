from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dailyflip.api.dependencies import get_async_db
from dailyflip.core.auth import get_current_user
from dailyflip.models.users import User as UserModel
from dailyflip.schemas.posts import Post as PostSchema, FeedPost, PostCreate, PostUpdate
from dailyflip.services.feed import FeedService
from dailyflip.services.posts import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=list[FeedPost])
async def get_posts(
    user_id: int | None = None,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Global feed, or the profile feed of user_id. Only public posts are listed.
    """
    feed = FeedService(db)
    if user_id is not None:
        return await feed.profile_feed(user_id)
    return await feed.global_feed()


@router.post("", response_model=PostSchema, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_in: PostCreate,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return await PostService(db).create_post(
        current_user,
        content=post_in.content,
        media_url=post_in.media_url,
        media_type=post_in.media_type,
        is_private=post_in.is_private,
    )


@router.patch("/{post_id}", response_model=PostSchema)
async def update_post(
    post_id: int,
    post_in: PostUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Owner only."""
    return await PostService(db).update_post(current_user, post_id, post_in.content, post_in.is_private)


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Owner or admin. Comments are removed with the post."""
    await PostService(db).delete_post(current_user, post_id)
    return {"message": "Post deleted"}
