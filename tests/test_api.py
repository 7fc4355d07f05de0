from sqlalchemy import select, func

from dailyflip.models.posts import Comment


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_register_and_login(client):
    payload = {"name": "Dana", "email": "dana@example.com", "password": "correct-horse"}
    response = await client.post("/api/register", json=payload)
    assert response.status_code == 201
    assert response.json() == {"message": "User created successfully"}

    duplicate = await client.post("/api/register", json=payload)
    assert duplicate.status_code == 409

    bad_login = await client.post("/api/token", data={"username": "dana@example.com", "password": "wrong-horse"})
    assert bad_login.status_code == 401

    login = await client.post("/api/token", data={"username": "dana@example.com", "password": "correct-horse"})
    assert login.status_code == 200
    tokens = login.json()

    me = await client.get("/api/users/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200
    body = me.json()
    assert body["name"] == "Dana"
    assert body["role"] == "MEMBER"
    assert body["profile"] == {"bio": "", "background_image": ""}
    assert "hashed_password" not in body

    refreshed = await client.post("/api/refresh-token", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    assert refreshed.json()["access_token"]

    # an access token is not accepted as a refresh token
    wrong_kind = await client.post("/api/refresh-token", json={"refresh_token": tokens["access_token"]})
    assert wrong_kind.status_code == 401


async def test_requests_without_session_are_unauthorized(client):
    for method, url in [
        ("GET", "/api/posts"),
        ("GET", "/api/friends"),
        ("POST", "/api/friends"),
        ("GET", "/api/users/1"),
    ]:
        response = await client.request(method, url, json={"friend_id": 1})
        assert response.status_code == 401, url

    garbage = await client.get("/api/posts", headers={"Authorization": "Bearer not-a-jwt"})
    assert garbage.status_code == 401


async def test_friendship_scenario(client, alice, bob):
    created = await client.post("/api/friends", json={"friend_id": bob.id}, headers=alice.headers)
    assert created.status_code == 201
    row = created.json()
    assert row["requester_id"] == alice.id
    assert row["recipient_id"] == bob.id
    assert row["status"] == "PENDING"

    again = await client.post("/api/friends", json={"friend_id": alice.id}, headers=bob.headers)
    assert again.status_code == 409

    pending = await client.get("/api/friends/pending", headers=bob.headers)
    assert [p["requester"]["id"] for p in pending.json()] == [alice.id]

    own_accept = await client.patch(f"/api/friends/{row['id']}", json={"action": "accept"}, headers=alice.headers)
    assert own_accept.status_code == 404

    accepted = await client.patch(f"/api/friends/{row['id']}", json={"action": "accept"}, headers=bob.headers)
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "ACCEPTED"

    alice_friends = (await client.get("/api/friends", headers=alice.headers)).json()
    bob_friends = (await client.get("/api/friends", headers=bob.headers)).json()
    assert [f["id"] for f in alice_friends] == [bob.id]
    assert [f["id"] for f in bob_friends] == [alice.id]
    assert alice_friends[0]["name"] == "Bob"
    assert alice_friends[0]["friendship_id"] == row["id"]

    removed = await client.delete(f"/api/friends/{row['id']}", headers=bob.headers)
    assert removed.status_code == 200
    assert (await client.get("/api/friends", headers=alice.headers)).json() == []


async def test_reject_and_invalid_action(client, alice, bob):
    row = (await client.post("/api/friends", json={"friend_id": bob.id}, headers=alice.headers)).json()

    invalid = await client.patch(f"/api/friends/{row['id']}", json={"action": "maybe"}, headers=bob.headers)
    assert invalid.status_code == 400

    rejected = await client.patch(f"/api/friends/{row['id']}", json={"action": "reject"}, headers=bob.headers)
    assert rejected.status_code == 200
    assert rejected.json() == {"message": "Friendship request rejected"}

    assert (await client.get("/api/friends/pending", headers=bob.headers)).json() == []
    retry = await client.post("/api/friends", json={"friend_id": bob.id}, headers=alice.headers)
    assert retry.status_code == 201


async def test_friend_request_edge_cases(client, alice):
    own = await client.post("/api/friends", json={"friend_id": alice.id}, headers=alice.headers)
    assert own.status_code == 400

    missing = await client.post("/api/friends", json={"friend_id": 9999}, headers=alice.headers)
    assert missing.status_code == 404

    unknown_row = await client.delete("/api/friends/9999", headers=alice.headers)
    assert unknown_row.status_code == 404


async def test_private_post_scenario(client, alice, bob):
    created = await client.post("/api/posts", json={"content": "hi", "is_private": True}, headers=alice.headers)
    assert created.status_code == 201
    post_id = created.json()["id"]

    global_feed = (await client.get("/api/posts", headers=bob.headers)).json()
    assert post_id not in [p["id"] for p in global_feed]

    profile_feed = (await client.get("/api/posts", params={"user_id": alice.id}, headers=bob.headers)).json()
    assert post_id not in [p["id"] for p in profile_feed]

    # bob cannot comment on a post he cannot see
    comment = await client.post("/api/comments", json={"post_id": post_id, "content": "peek"}, headers=bob.headers)
    assert comment.status_code == 404

    own_comment = await client.post("/api/comments", json={"post_id": post_id, "content": "note"}, headers=alice.headers)
    assert own_comment.status_code == 201


async def test_feed_shape(client, alice, bob):
    post = (await client.post("/api/posts", json={"content": "public"}, headers=alice.headers)).json()
    for i in range(4):
        response = await client.post("/api/comments", json={"post_id": post["id"], "content": f"c{i}"}, headers=bob.headers)
        assert response.status_code == 201

    [entry] = (await client.get("/api/posts", headers=bob.headers)).json()
    assert entry["user"] == {"id": alice.id, "name": "Alice", "email": alice.email, "image": None}
    assert [c["content"] for c in entry["comments"]] == ["c3", "c2", "c1"]
    assert entry["comments"][0]["user"]["name"] == "Bob"


async def test_create_post_validation(client, alice):
    empty = await client.post("/api/posts", json={"content": ""}, headers=alice.headers)
    assert empty.status_code == 400

    bad_kind = await client.post(
        "/api/posts",
        json={"content": "clip", "media_url": "https://cdn.example.com/a.gif", "media_type": "gif"},
        headers=alice.headers,
    )
    assert bad_kind.status_code == 422


async def test_update_post_owner_only(client, alice, bob, admin):
    post_id = (await client.post("/api/posts", json={"content": "v1"}, headers=alice.headers)).json()["id"]
    body = {"content": "v2", "is_private": True}

    assert (await client.patch(f"/api/posts/{post_id}", json=body, headers=bob.headers)).status_code == 403
    assert (await client.patch(f"/api/posts/{post_id}", json=body, headers=admin.headers)).status_code == 403
    assert (await client.patch("/api/posts/9999", json=body, headers=alice.headers)).status_code == 404

    updated = await client.patch(f"/api/posts/{post_id}", json=body, headers=alice.headers)
    assert updated.status_code == 200
    assert updated.json()["content"] == "v2"
    assert updated.json()["is_private"] is True


async def test_admin_deletes_any_post(client, session_maker, alice, bob, admin):
    post_id = (await client.post("/api/posts", json={"content": "rule breaking"}, headers=alice.headers)).json()["id"]
    await client.post("/api/comments", json={"post_id": post_id, "content": "reported"}, headers=bob.headers)

    forbidden = await client.delete(f"/api/posts/{post_id}", headers=bob.headers)
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/api/posts/{post_id}", headers=admin.headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Post deleted"}

    async with session_maker() as session:
        orphans = await session.execute(select(func.count()).select_from(Comment).where(Comment.post_id == post_id))
        assert orphans.scalar_one() == 0

    assert (await client.delete(f"/api/posts/{post_id}", headers=admin.headers)).status_code == 404


async def test_user_profile_edit(client, alice, bob, admin):
    viewed = await client.get(f"/api/users/{alice.id}", headers=bob.headers)
    assert viewed.status_code == 200
    assert "hashed_password" not in viewed.json()

    assert (await client.get("/api/users/9999", headers=bob.headers)).status_code == 404

    forbidden = await client.patch(f"/api/users/{alice.id}", json={"name": "Mallory"}, headers=bob.headers)
    assert forbidden.status_code == 403

    own = await client.patch(f"/api/users/{alice.id}", json={"bio": "Hello there"}, headers=alice.headers)
    assert own.status_code == 200
    assert own.json()["profile"]["bio"] == "Hello there"
    assert own.json()["name"] == "Alice"

    by_admin = await client.patch(
        f"/api/users/{alice.id}", json={"name": "Alice B.", "background_image": "bg.png"}, headers=admin.headers
    )
    assert by_admin.status_code == 200
    assert by_admin.json()["name"] == "Alice B."
    assert by_admin.json()["profile"] == {"bio": "Hello there", "background_image": "bg.png"}


async def test_admin_panel(client, alice, bob, admin):
    await client.post("/api/posts", json={"content": "hidden", "is_private": True}, headers=alice.headers)
    await client.post("/api/posts", json={"content": "shown"}, headers=bob.headers)

    assert (await client.get("/api/admin/users", headers=alice.headers)).status_code == 403
    assert (await client.get("/api/admin/posts", headers=alice.headers)).status_code == 403

    users = (await client.get("/api/admin/users", params={"search": "ALI"}, headers=admin.headers)).json()
    assert [u["id"] for u in users] == [alice.id]

    posts = (await client.get("/api/admin/posts", headers=admin.headers)).json()
    assert {p["content"] for p in posts} == {"hidden", "shown"}
    assert all("user" in p for p in posts)
