"""
Ownership-gated mutations of posts and comments.
"""
from loguru import logger
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dailyflip.core.auth import is_admin
from dailyflip.core.exceptions import BadRequest, Forbidden, NotFound, Unexpected
from dailyflip.models.posts import Post as PostModel, Comment as CommentModel
from dailyflip.models.users import User as UserModel


class PostService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_post(self, post_id: int) -> PostModel:
        post = await self.db.get(PostModel, post_id)
        if post is None:
            raise NotFound("Post not found")
        return post

    async def create_post(
        self,
        actor: UserModel,
        content: str,
        media_url: str | None = None,
        media_type: str | None = None,
        is_private: bool = False,
    ) -> PostModel:
        """
        Store a new post owned by actor. The media reference is kept as given;
        no bytes are uploaded.
        """
        content = content.strip()
        if not content and not media_url:
            raise BadRequest("A post needs text or media")
        if media_url and media_type is None:
            raise BadRequest("media_type is required with media_url")
        if not media_url:
            media_type = None

        post = PostModel(
            user_id=actor.id,
            content=content,
            media_url=media_url,
            media_type=media_type,
            is_private=is_private,
        )
        self.db.add(post)
        await self._commit(f"create post for user {actor.id}")
        await self.db.refresh(post)
        logger.info(f"Post {post.id} created by {actor.id} (private={post.is_private})")
        return post

    async def update_post(self, actor: UserModel, post_id: int, content: str, is_private: bool) -> PostModel:
        """
        Overwrite content and privacy. Only the owner may edit; admins get no bypass here.
        """
        post = await self.get_post(post_id)
        if post.user_id != actor.id:
            raise Forbidden("Forbidden")

        post.content = content
        post.is_private = is_private
        await self._commit(f"update post {post_id}")
        await self.db.refresh(post)
        logger.info(f"Post {post_id} updated by {actor.id}")
        return post

    async def delete_post(self, actor: UserModel, post_id: int) -> None:
        """
        Delete a post and its comments. Allowed for the owner or an admin.
        Comments go first, in the same transaction.
        """
        post = await self.get_post(post_id)
        if post.user_id != actor.id and not is_admin(actor):
            raise Forbidden("Forbidden")

        try:
            await self.db.execute(delete(CommentModel).where(CommentModel.post_id == post_id))
            await self.db.delete(post)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to delete post {post_id}")
            raise Unexpected()
        logger.info(f"Post {post_id} deleted by {actor.id} (admin={is_admin(actor)})")

    async def create_comment(self, actor: UserModel, post_id: int, content: str) -> CommentModel:
        """
        Attach a comment to a post. Whether actor may see the post is decided by the caller.
        """
        await self.get_post(post_id)
        comment = CommentModel(post_id=post_id, user_id=actor.id, content=content)
        self.db.add(comment)
        await self._commit(f"create comment on post {post_id}")

        result = await self.db.execute(
            select(CommentModel).where(CommentModel.id == comment.id)
            .options(selectinload(CommentModel.user))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def _commit(self, what: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to {what}")
            raise Unexpected()
