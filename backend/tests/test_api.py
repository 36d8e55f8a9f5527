"""HTTP surface: sessions, routing, error rendering."""

import json

from photoshare.services import ws_manager
from tests.conftest import PASSWORD, create_photo, create_user, jpeg_bytes, login


async def register(client, login_name: str) -> dict:
    response = await client.post(
        "/api/v1/user",
        json={
            "login_name": login_name,
            "password": PASSWORD,
            "first_name": login_name.capitalize(),
            "last_name": "Tester",
        },
    )
    assert response.status_code == 200, response.text
    return response.json()


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_routes_require_session(client):
    for path in ("/api/v1/user/list", "/api/v1/activities", "/api/v1/favorites"):
        response = await client.get(path)
        assert response.status_code == 401, path
        assert response.json() == {"detail": "Unauthorized"}


async def test_register_login_logout(client):
    account = await register(client, "alice")
    assert set(account) == {"_id", "login_name", "first_name", "last_name"}

    duplicate = await client.post(
        "/api/v1/user",
        json={"login_name": "alice", "password": "x", "first_name": "A", "last_name": "B"},
    )
    assert duplicate.status_code == 409

    await login(client, "alice")
    users = await client.get("/api/v1/user/list")
    assert [u["_id"] for u in users.json()] == [account["_id"]]

    logout = await client.post("/api/v1/admin/logout")
    assert logout.status_code == 200
    assert (await client.get("/api/v1/user/list")).status_code == 401

    again = await client.post("/api/v1/admin/logout")
    assert again.status_code == 400
    assert again.json() == {"detail": "Not logged in"}


async def test_bad_credentials(client):
    await register(client, "alice")

    response = await client.post(
        "/api/v1/admin/login",
        json={"login_name": "alice", "password": "wrong"},
    )

    assert response.status_code == 401


async def test_upload_and_view_photos(make_client):
    owner_client, friend_client, stranger_client = make_client(), make_client(), make_client()
    owner = await register(owner_client, "owner")
    friend = await register(friend_client, "friend")
    await register(stranger_client, "stranger")
    for c, name in ((owner_client, "owner"), (friend_client, "friend"), (stranger_client, "stranger")):
        await login(c, name)

    public = await owner_client.post(
        "/api/v1/photos/new",
        files={"uploadedphoto": ("beach.jpg", jpeg_bytes(), "image/jpeg")},
    )
    shared = await owner_client.post(
        "/api/v1/photos/new",
        files={"uploadedphoto": ("party.jpg", jpeg_bytes(), "image/jpeg")},
        data={"shared_with": json.dumps([friend["_id"]])},
    )
    assert public.status_code == 200, public.text
    assert public.json()["visibility"] == "public"
    assert public.json()["url"] == f"/images/{public.json()['file_name']}"
    assert shared.json()["visibility"] == "shared"

    path = f"/api/v1/photosOfUser/{owner['_id']}"
    assert len((await owner_client.get(path)).json()) == 2
    assert len((await friend_client.get(path)).json()) == 2
    stranger_view = (await stranger_client.get(path)).json()
    assert [p["_id"] for p in stranger_view] == [public.json()["_id"]]
    assert "likes" not in stranger_view[0]
    assert stranger_view[0]["likesCount"] == 0


async def test_upload_rejects_bad_visibility(client):
    await register(client, "owner")
    await login(client, "owner")

    response = await client.post(
        "/api/v1/photos/new",
        files={"uploadedphoto": ("a.jpg", jpeg_bytes(), "image/jpeg")},
        data={"visibility": "everyone"},
    )

    assert response.status_code == 400


async def test_comment_flow(make_client):
    owner_client, other_client = make_client(), make_client()
    owner = await register(owner_client, "owner")
    await register(other_client, "other")
    await login(owner_client, "owner")
    await login(other_client, "other")
    upload = await owner_client.post(
        "/api/v1/photos/new",
        files={"uploadedphoto": ("a.jpg", jpeg_bytes(), "image/jpeg")},
    )
    photo_id = upload.json()["_id"]

    added = await other_client.post(
        f"/api/v1/commentsOfPhoto/{photo_id}",
        json={"comment": f"hey @[Owner]({owner['_id']})"},
    )
    assert added.status_code == 200
    assert added.json()["mentions"] == [owner["_id"]]

    [photo] = (await owner_client.get(f"/api/v1/photosOfUser/{owner['_id']}")).json()
    comment_id = photo["comments"][0]["_id"]
    assert photo["comments"][0]["comment"] == "hey @Owner"

    forbidden = await owner_client.delete(f"/api/v1/commentsOfPhoto/{photo_id}/{comment_id}")
    assert forbidden.status_code == 403

    deleted = await other_client.delete(f"/api/v1/commentsOfPhoto/{photo_id}/{comment_id}")
    assert deleted.status_code == 200

    mentions = await owner_client.get(f"/api/v1/mentionsOfUser/{owner['_id']}")
    assert mentions.json() == []


async def test_like_broadcasts_update(make_client, monkeypatch):
    sent = []

    async def fake_send(photo_id, likes_count, actor_id, liked):
        sent.append((photo_id, likes_count, actor_id, liked))

    monkeypatch.setattr(ws_manager, "send_like_updated", fake_send)

    owner_client, fan_client = make_client(), make_client()
    await register(owner_client, "owner")
    fan = await register(fan_client, "fan")
    await login(owner_client, "owner")
    await login(fan_client, "fan")
    upload = await owner_client.post(
        "/api/v1/photos/new",
        files={"uploadedphoto": ("a.jpg", jpeg_bytes(), "image/jpeg")},
    )
    photo_id = upload.json()["_id"]

    liked = await fan_client.post(f"/api/v1/photos/{photo_id}/like")
    unliked = await fan_client.post(f"/api/v1/photos/{photo_id}/unlike")
    unliked_again = await fan_client.post(f"/api/v1/photos/{photo_id}/unlike")

    assert liked.json() == {"liked": True, "likesCount": 1}
    assert unliked.json() == {"liked": False, "likesCount": 0}
    assert unliked_again.status_code == 200
    assert sent[0] == (photo_id, 1, fan["_id"], True)
    assert sent[1] == (photo_id, 0, fan["_id"], False)


async def test_delete_account_ends_session(make_client):
    client, other = make_client(), make_client()
    account = await register(client, "leaving")
    other_account = await register(other, "staying")
    await login(client, "leaving")
    await login(other, "staying")

    forbidden = await other.delete(f"/api/v1/user/{account['_id']}")
    assert forbidden.status_code == 403

    response = await client.delete(f"/api/v1/user/{account['_id']}")
    assert response.status_code == 200
    assert (await client.get("/api/v1/user/list")).status_code == 401

    users = (await other.get("/api/v1/user/list")).json()
    assert [u["_id"] for u in users] == [other_account["_id"]]


async def test_activity_feed_and_counts(make_client):
    client = make_client()
    owner = await register(client, "owner")
    await login(client, "owner")

    feed = (await client.get("/api/v1/activities", params={"limit": 10})).json()
    assert [a["type"] for a in feed] == ["user_login", "user_register"]
    assert feed[0]["user"]["_id"] == owner["_id"]

    last = (await client.get("/api/v1/activities/last-by-user")).json()
    assert last == [
        {
            "user_id": owner["_id"],
            "type": "user_login",
            "date_time": feed[0]["date_time"],
            "photo_file_name": None,
            "photo_id": None,
        }
    ]

    counts = (await client.get("/api/v1/user/counts")).json()
    assert counts == [{"_id": owner["_id"], "photoCount": 0, "commentCount": 0}]


async def test_favorites_and_highlights(make_client, db):
    owner = await create_user(db, "owner")
    await create_user(db, "fan")
    photo = await create_photo(db, owner)
    client = make_client()
    await login(client, "fan")

    added = await client.post(f"/api/v1/favorites/{photo.id}")
    favorites = (await client.get("/api/v1/favorites")).json()
    highlights = (await client.get(f"/api/v1/user/{owner.id}/highlights")).json()
    removed = await client.delete(f"/api/v1/favorites/{photo.id}")

    assert added.json() == {"favorited": True}
    assert [f["_id"] for f in favorites] == [photo.id]
    assert highlights["mostRecent"]["_id"] == photo.id
    assert highlights["mostCommented"]["commentsCount"] == 0
    assert removed.json() == {"favorited": False}


async def test_malformed_ids_are_bad_requests(client, db):
    await create_user(db, "alice")
    await login(client, "alice")

    assert (await client.get("/api/v1/user/not-a-uuid")).status_code == 400
    assert (await client.get("/api/v1/photosOfUser/not-a-uuid")).status_code == 400
    assert (await client.post("/api/v1/photos/not-a-uuid/like")).status_code == 400


async def test_session_of_deleted_account_is_rejected(make_client, db):
    owner = await create_user(db, "owner")
    doomed = await create_user(db, "doomed")
    photo = await create_photo(db, owner)
    first_browser, second_browser = make_client(), make_client()
    await login(first_browser, "doomed")
    await login(second_browser, "doomed")

    deleted = await first_browser.delete(f"/api/v1/user/{doomed.id}")
    assert deleted.status_code == 200

    like = await second_browser.post(f"/api/v1/photos/{photo.id}/like")
    favorite = await second_browser.post(f"/api/v1/favorites/{photo.id}")
    comment = await second_browser.post(
        f"/api/v1/commentsOfPhoto/{photo.id}",
        json={"comment": "still here?"},
    )

    for response in (like, favorite, comment):
        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}
