import pytest
from sqlalchemy import select, func

from dailyflip.core.exceptions import BadRequest, Forbidden, NotFound
from dailyflip.models.posts import Post, Comment
from dailyflip.models.users import User
from dailyflip.services.posts import PostService


async def test_create_post(db, alice):
    actor = await db.get(User, alice.id)
    post = await PostService(db).create_post(actor, "  hi  ", is_private=True)

    assert post.user_id == alice.id
    assert post.content == "hi"
    assert post.is_private is True
    assert post.media_url is None


async def test_create_post_needs_text_or_media(db, alice):
    actor = await db.get(User, alice.id)
    service = PostService(db)

    with pytest.raises(BadRequest):
        await service.create_post(actor, "   ")
    with pytest.raises(BadRequest):
        await service.create_post(actor, "", media_url="https://cdn.example.com/a.png")

    post = await service.create_post(actor, "", media_url="https://cdn.example.com/a.png", media_type="image")
    assert post.media_type == "image"


async def test_update_post_by_owner(db, alice):
    actor = await db.get(User, alice.id)
    service = PostService(db)
    post = await service.create_post(actor, "draft")

    updated = await service.update_post(actor, post.id, "final", True)

    assert updated.content == "final"
    assert updated.is_private is True
    assert updated.user_id == alice.id
    assert updated.created_at == post.created_at


async def test_update_post_forbidden_for_others_including_admin(db, alice, bob, admin):
    service = PostService(db)
    post = await service.create_post(await db.get(User, alice.id), "mine")

    with pytest.raises(Forbidden):
        await service.update_post(await db.get(User, bob.id), post.id, "yours", False)
    with pytest.raises(Forbidden):
        await service.update_post(await db.get(User, admin.id), post.id, "admins", False)


async def test_update_missing_post(db, alice):
    with pytest.raises(NotFound):
        await PostService(db).update_post(await db.get(User, alice.id), 404, "x", False)


async def test_delete_post_removes_comments(db, alice, bob):
    service = PostService(db)
    owner = await db.get(User, alice.id)
    post = await service.create_post(owner, "to be deleted")
    await service.create_comment(await db.get(User, bob.id), post.id, "nice")
    await service.create_comment(owner, post.id, "thanks")

    await service.delete_post(owner, post.id)

    posts = await db.execute(select(func.count()).select_from(Post).where(Post.id == post.id))
    comments = await db.execute(select(func.count()).select_from(Comment).where(Comment.post_id == post.id))
    assert posts.scalar_one() == 0
    assert comments.scalar_one() == 0


async def test_delete_post_permissions(db, alice, bob, admin):
    service = PostService(db)
    post = await service.create_post(await db.get(User, alice.id), "hello")

    with pytest.raises(Forbidden):
        await service.delete_post(await db.get(User, bob.id), post.id)

    await service.delete_post(await db.get(User, admin.id), post.id)

    with pytest.raises(NotFound):
        await service.delete_post(await db.get(User, admin.id), post.id)


async def test_create_comment(db, alice, bob):
    service = PostService(db)
    post = await service.create_post(await db.get(User, alice.id), "hello")

    comment = await service.create_comment(await db.get(User, bob.id), post.id, "hey")

    assert comment.post_id == post.id
    assert comment.user.id == bob.id

    with pytest.raises(NotFound):
        await service.create_comment(await db.get(User, bob.id), 9999, "lost")
