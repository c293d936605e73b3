from conftest import auth_headers, make_post


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_register_sign_in_and_session(client):
    response = await client.post(
        "/auth/register",
        json={"email": "carol@inkwell.dev", "name": "Carol", "password": "s3cret-pass"},
    )
    assert response.status_code == 201
    assert response.json()["role"] == "user"

    duplicate = await client.post(
        "/auth/register",
        json={"email": "carol@inkwell.dev", "name": "Carol", "password": "s3cret-pass"},
    )
    assert duplicate.status_code == 422

    bad = await client.post("/auth/token", data={"username": "carol@inkwell.dev", "password": "nope"})
    assert bad.status_code == 401

    token = await client.post(
        "/auth/token", data={"username": "carol@inkwell.dev", "password": "s3cret-pass"}
    )
    assert token.status_code == 200
    headers = {"Authorization": f"Bearer {token.json()['access_token']}"}

    session = await client.get("/auth/session", headers=headers)
    assert session.json()["is_authenticated"] is True
    assert session.json()["user"]["name"] == "Carol"

    anonymous = await client.get("/auth/session")
    assert anonymous.json() == {"is_authenticated": False, "user": None}

    assert (await client.post("/auth/logout", headers=headers)).status_code == 204


async def test_invalid_token_is_rejected(client):
    response = await client.get("/auth/session", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


async def test_post_lifecycle(client, alice, bob):
    created = await client.post(
        "/posts",
        json={"title": "Hello", "content": "First paragraph\n\nSecond", "tags": ["intro"]},
        headers=auth_headers(alice),
    )
    assert created.status_code == 201
    post = created.json()
    assert post["excerpt"] == "First paragraph"
    assert post["comments_count"] == 0

    listed = await client.get("/posts")
    assert [p["id"] for p in listed.json()] == [post["id"]]

    comment = await client.post(
        f"/posts/{post['id']}/comments", json={"content": "Welcome!"}, headers=auth_headers(bob)
    )
    assert comment.status_code == 201
    assert comment.json()["author"]["name"] == "Bob"

    listed = await client.get("/posts")
    assert listed.json()[0]["comments_count"] == 1
    comments = await client.get(f"/posts/{post['id']}/comments")
    assert [c["content"] for c in comments.json()] == ["Welcome!"]

    patched = await client.patch(
        f"/posts/{post['id']}", json={"title": "Hello again"}, headers=auth_headers(alice)
    )
    assert patched.status_code == 200
    assert patched.json()["title"] == "Hello again"

    forbidden = await client.delete(f"/posts/{post['id']}", headers=auth_headers(bob))
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/posts/{post['id']}", headers=auth_headers(alice))
    assert deleted.status_code == 204
    assert (await client.get("/posts")).json() == []


async def test_reading_a_post_counts_a_view(client, db, alice):
    post = await make_post(db, alice, "Counted")

    first = await client.get(f"/posts/{post.id}")
    second = await client.get(f"/posts/{post.id}")

    assert first.json()["views"] == 0
    assert second.json()["views"] == 1


async def test_missing_post_is_404(client):
    response = await client.get("/posts/4242")
    assert response.status_code == 404
    assert response.json() == {"detail": "Post not found"}


async def test_anonymous_comment_is_401(client, db, alice):
    post = await make_post(db, alice, "Members only")

    response = await client.post(f"/posts/{post.id}/comments", json={"content": "hi"})

    assert response.status_code == 401
    assert (await client.get(f"/posts/{post.id}/comments")).json() == []


async def test_blank_title_blocks_save(client, alice):
    response = await client.post(
        "/posts", json={"title": "", "content": "text"}, headers=auth_headers(alice)
    )
    assert response.status_code == 422
    assert response.json() == {"detail": "Title is required"}
    assert (await client.get("/posts")).json() == []


async def test_analytics_endpoint(client, db, alice):
    await make_post(db, alice, "One")

    response = await client.get("/analytics")

    assert response.status_code == 200
    body = response.json()
    assert body["total_blog_posts"] == 1
    assert body["total_users"] == 1
