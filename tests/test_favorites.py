"""Tests for the favorite registry."""

import threading

import pytest
from subway_favorites.errors import DuplicateFavoriteError, FavoriteNotFoundError, ForbiddenError
from subway_favorites.favorites import FavoritePath, FavoriteRegistry
from subway_favorites.routing import ResolvedPath
from subway_favorites.stations import Station

KANGNAM = Station(1, "Kangnam")
HANTI = Station(2, "Hanti")
DOGOK = Station(3, "Dogok")
YANGJAE = Station(4, "Yangjae")


def draft(source, target):
    path = ResolvedPath(station_ids=(source.id, target.id), distance=5, duration=2)
    return FavoritePath(source=source, target=target, path=path)


@pytest.fixture
def registry():
    return FavoriteRegistry()


def test_register_assigns_identity(registry):
    """Test registration returns a stored copy with id and owner."""
    favorite = registry.register(1, draft(KANGNAM, HANTI))
    assert favorite.id == 1
    assert favorite.member_id == 1
    assert favorite.created_at is not None
    assert favorite.source == KANGNAM
    assert registry.list(1) == (favorite,)


def test_list_unknown_member_is_empty(registry):
    assert registry.list("nobody") == ()


def test_listing_unknown_members_keeps_no_state(registry):
    """Test reads for members without favorites leave nothing behind."""
    for member_id in range(10_000):
        assert registry.list(f"visitor-{member_id}") == ()
    assert registry._member_locks == {}

    registry.register(1, draft(KANGNAM, HANTI))
    assert list(registry._member_locks) == [1]


def test_list_preserves_registration_order(registry):
    first = registry.register(1, draft(KANGNAM, HANTI))
    second = registry.register(1, draft(DOGOK, YANGJAE))
    third = registry.register(1, draft(KANGNAM, DOGOK))
    assert [f.id for f in registry.list(1)] == [first.id, second.id, third.id]


def test_duplicate_favorite(registry):
    """Test registering the same pair twice fails."""
    registry.register(1, draft(KANGNAM, HANTI))
    with pytest.raises(DuplicateFavoriteError):
        registry.register(1, draft(KANGNAM, HANTI))
    assert len(registry.list(1)) == 1


def test_reversed_pair_is_duplicate(registry):
    """Test (B, A) collides with an existing (A, B)."""
    registry.register(1, draft(KANGNAM, HANTI))
    with pytest.raises(DuplicateFavoriteError):
        registry.register(1, draft(HANTI, KANGNAM))


def test_same_pair_for_different_members(registry):
    registry.register(1, draft(KANGNAM, HANTI))
    other = registry.register(2, draft(KANGNAM, HANTI))
    assert other.member_id == 2
    assert len(registry.list(1)) == 1
    assert len(registry.list(2)) == 1


def test_remove(registry):
    """Test a removed favorite no longer lists."""
    kept = registry.register(1, draft(DOGOK, YANGJAE))
    removed = registry.register(1, draft(KANGNAM, HANTI))
    registry.remove(1, removed.id)
    assert registry.list(1) == (kept,)
    assert len(registry) == 1


def test_remove_then_register_again(registry):
    favorite = registry.register(1, draft(KANGNAM, HANTI))
    registry.remove(1, favorite.id)
    again = registry.register(1, draft(HANTI, KANGNAM))
    assert again.id != favorite.id


def test_remove_missing(registry):
    with pytest.raises(FavoriteNotFoundError) as exc_info:
        registry.remove(1, 42)
    assert not isinstance(exc_info.value, ForbiddenError)


def test_remove_twice(registry):
    favorite = registry.register(1, draft(KANGNAM, HANTI))
    registry.remove(1, favorite.id)
    with pytest.raises(FavoriteNotFoundError):
        registry.remove(1, favorite.id)


def test_remove_by_other_member(registry):
    """Test a non-owner cannot remove a favorite and nothing changes."""
    favorite = registry.register(1, draft(KANGNAM, HANTI))
    with pytest.raises(ForbiddenError):
        registry.remove(2, favorite.id)
    assert registry.list(1) == (favorite,)
    assert registry.list(2) == ()


def test_forbidden_is_reported_as_not_found(registry):
    """Test callers catching not-found also catch foreign favorites."""
    favorite = registry.register(1, draft(KANGNAM, HANTI))
    with pytest.raises(FavoriteNotFoundError):
        registry.remove(2, favorite.id)


def test_get(registry):
    favorite = registry.register(1, draft(KANGNAM, HANTI))
    assert registry.get(1, favorite.id) == favorite
    with pytest.raises(ForbiddenError):
        registry.get(2, favorite.id)
    with pytest.raises(FavoriteNotFoundError):
        registry.get(1, 99)


def test_pair_is_direction_agnostic():
    assert draft(KANGNAM, HANTI).pair == draft(HANTI, KANGNAM).pair


def test_concurrent_registrations_get_unique_ids(registry):
    """Test parallel registrations across members never share an id."""
    stations = [Station(i, f"S{i}") for i in range(1, 11)]
    pairs = [(a, b) for a in stations for b in stations if a.id < b.id]
    errors = []

    def worker(member_id):
        try:
            for a, b in pairs:
                registry.register(member_id, draft(a, b))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(m,)) for m in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    ids = [f.id for m in range(4) for f in registry.list(m)]
    assert len(ids) == len(set(ids)) == 4 * len(pairs)
    for m in range(4):
        assert len(registry.list(m)) == len(pairs)


def test_concurrent_duplicates_have_one_winner(registry):
    """Test racing registrations of the same pair store it once."""
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        try:
            results.append(registry.register(1, draft(KANGNAM, HANTI)))
        except DuplicateFavoriteError as e:
            results.append(e)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    stored = [r for r in results if isinstance(r, FavoritePath)]
    assert len(stored) == 1
    assert len(registry.list(1)) == 1
