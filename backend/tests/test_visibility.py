"""Visibility predicate tests. No database needed."""

from photoshare.models import Photo, PhotoShare, PhotoVisibility
from photoshare.services.visibility import filter_visible, is_visible

OWNER = "11111111-1111-4111-8111-111111111111"
FRIEND = "22222222-2222-4222-8222-222222222222"
STRANGER = "33333333-3333-4333-8333-333333333333"


def make_photo(visibility: PhotoVisibility, shared_with=(), owner: str = OWNER) -> Photo:
    return Photo(
        user_id=owner,
        file_name="p.jpg",
        visibility=visibility.value,
        shares=[PhotoShare(user_id=uid) for uid in shared_with],
    )


def test_owner_always_sees_own_photo():
    for visibility in PhotoVisibility:
        photo = make_photo(visibility, shared_with=[FRIEND] if visibility is PhotoVisibility.SHARED else [])
        assert is_visible(photo, OWNER)


def test_public_photo_visible_to_everyone():
    photo = make_photo(PhotoVisibility.PUBLIC)
    assert is_visible(photo, STRANGER)
    assert is_visible(photo, None)


def test_owner_only_photo_hidden_from_others():
    photo = make_photo(PhotoVisibility.OWNER_ONLY)
    assert not is_visible(photo, FRIEND)
    assert not is_visible(photo, None)


def test_shared_photo_visible_only_to_listed_users():
    photo = make_photo(PhotoVisibility.SHARED, shared_with=[FRIEND])
    assert is_visible(photo, FRIEND)
    assert not is_visible(photo, STRANGER)
    assert not is_visible(photo, None)


def test_seed_owner_only_photos_are_readable():
    photo = make_photo(PhotoVisibility.OWNER_ONLY)
    assert is_visible(photo, STRANGER, seed_owner_ids={OWNER})
    assert is_visible(photo, None, seed_owner_ids={OWNER})


def test_seed_carve_out_does_not_open_shared_photos():
    photo = make_photo(PhotoVisibility.SHARED, shared_with=[FRIEND])
    assert not is_visible(photo, STRANGER, seed_owner_ids={OWNER})


def test_filter_visible_keeps_order():
    public_a = make_photo(PhotoVisibility.PUBLIC)
    hidden = make_photo(PhotoVisibility.OWNER_ONLY)
    public_b = make_photo(PhotoVisibility.PUBLIC)

    assert filter_visible([public_a, hidden, public_b], STRANGER) == [public_a, public_b]
