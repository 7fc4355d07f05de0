from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dailyflip.api.dependencies import get_async_db
from dailyflip.core.auth import get_current_user, is_admin
from dailyflip.core.exceptions import NotFound
from dailyflip.models.users import User as UserModel
from dailyflip.schemas.posts import Comment as CommentSchema, CommentCreate
from dailyflip.services.posts import PostService

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentSchema, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_in: CommentCreate,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Comment on a post the caller can see. Private posts take comments from
    their owner or an admin only; anyone else gets 404.
    """
    posts = PostService(db)
    post = await posts.get_post(comment_in.post_id)
    if post.is_private and post.user_id != current_user.id and not is_admin(current_user):
        raise NotFound("Post not found")
    return await posts.create_comment(current_user, post.id, comment_in.content)
