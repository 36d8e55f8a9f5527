"""Photo queries and mutations against the service layer."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from photoshare.core.errors import Forbidden, InvalidArgument, NotFound
from photoshare.models import Activity, ActivityType, Like, PhotoShare, PhotoVisibility
from photoshare.schemas import SharingUpdate, TagCreate
from photoshare.services import photos as photo_service
from tests.conftest import create_photo, create_user, jpeg_bytes

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)


async def add_likes(db, photo, users):
    db.add_all(Like(photo_id=photo.id, user_id=u.id) for u in users)
    await db.commit()


async def test_owner_sees_all_own_photos(db):
    owner = await create_user(db, "owner")
    friend = await create_user(db, "friend")
    await create_photo(db, owner, PhotoVisibility.PUBLIC)
    await create_photo(db, owner, PhotoVisibility.OWNER_ONLY)
    await create_photo(db, owner, PhotoVisibility.SHARED, shared_with=[friend])

    assert len(await photo_service.photos_of_user(db, owner.id, owner.id)) == 3


async def test_other_viewer_sees_filtered_photos(db):
    owner = await create_user(db, "owner")
    friend = await create_user(db, "friend")
    stranger = await create_user(db, "stranger")
    public = await create_photo(db, owner, PhotoVisibility.PUBLIC)
    await create_photo(db, owner, PhotoVisibility.OWNER_ONLY)
    shared = await create_photo(db, owner, PhotoVisibility.SHARED, shared_with=[friend])

    friend_view = await photo_service.photos_of_user(db, owner.id, friend.id)
    stranger_view = await photo_service.photos_of_user(db, owner.id, stranger.id)

    assert {p.id for p in friend_view} == {public.id, shared.id}
    assert [p.id for p in stranger_view] == [public.id]


async def test_seed_owner_only_photos_visible_to_others(db):
    seed = await create_user(db, "seed", is_seed=True)
    viewer = await create_user(db, "viewer")
    photo = await create_photo(db, seed, PhotoVisibility.OWNER_ONLY)

    result = await photo_service.photos_of_user(db, seed.id, viewer.id)

    assert [p.id for p in result] == [photo.id]


async def test_sorted_by_likes_then_newest(db):
    owner = await create_user(db, "owner")
    likers = [await create_user(db, f"liker{i}") for i in range(5)]

    old_five = await create_photo(db, owner, date_time=BASE_TIME)
    new_five = await create_photo(db, owner, date_time=BASE_TIME + timedelta(hours=2))
    newest_two = await create_photo(db, owner, date_time=BASE_TIME + timedelta(hours=4))
    await add_likes(db, old_five, likers)
    await add_likes(db, new_five, likers)
    await add_likes(db, newest_two, likers[:2])

    result = await photo_service.photos_of_user(db, owner.id, likers[0].id)

    assert [p.id for p in result] == [new_five.id, old_five.id, newest_two.id]
    assert [p.likesCount for p in result] == [5, 5, 2]
    assert all(p.likedByViewer for p in result)


async def test_unknown_user_has_no_photos(db):
    viewer = await create_user(db, "viewer")
    missing = "99999999-9999-4999-8999-999999999999"

    assert await photo_service.photos_of_user(db, missing, viewer.id) == []


async def test_malformed_user_id_rejected(db):
    with pytest.raises(InvalidArgument):
        await photo_service.photos_of_user(db, "nope", None)


async def test_upload_infers_visibility_from_share_list(db, storage):
    owner = await create_user(db, "owner")
    friend = await create_user(db, "friend")

    public = await photo_service.upload_photo(db, storage, owner.id, jpeg_bytes(), "a.jpg")
    private = await photo_service.upload_photo(
        db, storage, owner.id, jpeg_bytes(), "b.jpg", shared_with=[]
    )
    shared = await photo_service.upload_photo(
        db, storage, owner.id, jpeg_bytes(), "c.jpg",
        shared_with=[friend.id, owner.id, "bogus"],
    )

    assert public.visibility is PhotoVisibility.PUBLIC
    assert private.visibility is PhotoVisibility.OWNER_ONLY
    assert shared.visibility is PhotoVisibility.SHARED
    assert shared.shared_with == [friend.id]
    assert (storage.base_dir / public.file_name).exists()
    assert public.url == f"/images/{public.file_name}"
    assert public.thumbnail_url == f"/images/thumb_{public.file_name}"

    activity = await db.execute(select(Activity).where(Activity.photo_id == public.id))
    assert activity.scalar_one().type == ActivityType.PHOTO_UPLOAD.value


async def test_upload_rejects_non_image(db, storage):
    owner = await create_user(db, "owner")

    with pytest.raises(InvalidArgument):
        await photo_service.upload_photo(db, storage, owner.id, b"not an image", "x.jpg")


def test_parse_shared_with_treats_garbage_as_absent():
    assert photo_service.parse_shared_with(None) is None
    assert photo_service.parse_shared_with("{not json") is None
    assert photo_service.parse_shared_with('{"a": 1}') is None
    assert photo_service.parse_shared_with("[]") == []
    assert photo_service.parse_shared_with('["x"]') == ["x"]


async def test_update_sharing_is_owner_only(db):
    owner = await create_user(db, "owner")
    other = await create_user(db, "other")
    photo = await create_photo(db, owner)

    with pytest.raises(Forbidden):
        await photo_service.update_sharing(
            db, other.id, photo.id, SharingUpdate(visibility=PhotoVisibility.OWNER_ONLY)
        )

    result = await photo_service.update_sharing(db, owner.id, photo.id, SharingUpdate(shared_with=[other.id]))

    assert result.visibility is PhotoVisibility.SHARED
    shares = await db.execute(select(PhotoShare.user_id).where(PhotoShare.photo_id == photo.id))
    assert shares.scalars().all() == [other.id]


async def test_delete_photo_removes_rows_and_files(db, storage):
    owner = await create_user(db, "owner")
    other = await create_user(db, "other")
    uploaded = await photo_service.upload_photo(db, storage, owner.id, jpeg_bytes(), "a.jpg")

    with pytest.raises(Forbidden):
        await photo_service.delete_photo(db, storage, other.id, uploaded.id)

    await photo_service.delete_photo(db, storage, owner.id, uploaded.id)

    assert await photo_service.get_photo(db, uploaded.id) is None
    assert not (storage.base_dir / uploaded.file_name).exists()
    activity = await db.execute(select(Activity).where(Activity.photo_id == uploaded.id))
    assert activity.scalars().all() == []


async def test_like_requires_visibility(db):
    owner = await create_user(db, "owner")
    other = await create_user(db, "other")
    hidden = await create_photo(db, owner, PhotoVisibility.OWNER_ONLY)

    with pytest.raises(Forbidden):
        await photo_service.like_photo(db, other.id, hidden.id)


async def test_like_is_idempotent(db):
    owner = await create_user(db, "owner")
    other = await create_user(db, "other")
    photo = await create_photo(db, owner)

    first = await photo_service.like_photo(db, other.id, photo.id)
    second = await photo_service.like_photo(db, other.id, photo.id)

    assert first.likesCount == second.likesCount == 1


async def test_unlike_twice_never_errors(db):
    owner = await create_user(db, "owner")
    other = await create_user(db, "other")
    photo = await create_photo(db, owner)
    await photo_service.like_photo(db, other.id, photo.id)

    first = await photo_service.unlike_photo(db, other.id, photo.id)
    second = await photo_service.unlike_photo(db, other.id, photo.id)

    assert first.liked is False
    assert first.likesCount == second.likesCount == 0


async def test_unlike_missing_photo_succeeds(db):
    user = await create_user(db, "user")

    result = await photo_service.unlike_photo(db, user.id, "99999999-9999-4999-8999-999999999999")

    assert result.likesCount == 0


def test_normalize_rectangle_clamps_into_unit_square():
    assert photo_service.normalize_rectangle(0.8, -0.5, 0.5, 0.25) == pytest.approx((0.8, 0.0, 0.2, 0.25))
    assert photo_service.normalize_rectangle(0.9, 0.9, 5, 5) == pytest.approx((0.9, 0.9, 0.1, 0.1))


@pytest.mark.parametrize(
    "coords",
    [(0.1, 0.1, 0.0, 0.5), (0.1, 0.1, 0.5, -1.0)],
)
def test_normalize_rectangle_rejects_empty(coords):
    with pytest.raises(InvalidArgument, match="positive size"):
        photo_service.normalize_rectangle(*coords)


def test_normalize_rectangle_rejects_non_finite():
    with pytest.raises(InvalidArgument, match="Invalid coord types"):
        photo_service.normalize_rectangle(float("nan"), 0.1, 0.1, 0.1)


async def test_add_tag(db):
    owner = await create_user(db, "owner")
    tagged = await create_user(db, "tagged")
    photo = await create_photo(db, owner)

    tag = await photo_service.add_tag(
        db, owner.id, photo.id, TagCreate(user_id=tagged.id, x=0.5, y=0.5, w=0.9, h=0.1)
    )

    assert (tag.x, tag.y, tag.w, tag.h) == pytest.approx((0.5, 0.5, 0.5, 0.1))
    result = await photo_service.photos_of_user(db, owner.id, owner.id)
    assert result[0].tags[0].user.id == tagged.id


async def test_add_tag_validation(db):
    owner = await create_user(db, "owner")
    other = await create_user(db, "other")
    photo = await create_photo(db, owner)
    hidden = await create_photo(db, owner, PhotoVisibility.OWNER_ONLY)

    with pytest.raises(Forbidden):
        await photo_service.add_tag(db, other.id, hidden.id, TagCreate(user_id=owner.id, x=0, y=0, w=1, h=1))
    with pytest.raises(InvalidArgument, match="Invalid user to tag"):
        await photo_service.add_tag(db, owner.id, photo.id, TagCreate(user_id="bad", x=0, y=0, w=1, h=1))
    with pytest.raises(NotFound, match="Tagged user not found"):
        await photo_service.add_tag(
            db, owner.id, photo.id,
            TagCreate(user_id="99999999-9999-4999-8999-999999999999", x=0, y=0, w=1, h=1),
        )
