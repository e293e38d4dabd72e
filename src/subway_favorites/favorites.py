"""Per-member registry of favorite paths."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Hashable, Optional

from .errors import DuplicateFavoriteError, FavoriteNotFoundError, ForbiddenError
from .routing import ResolvedPath
from .stations import Station

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)

MemberId = Hashable


@dataclass(frozen=True)
class FavoritePath:
    """A member's saved route between two stations."""
    source: Station
    target: Station
    path: ResolvedPath
    member_id: Optional[MemberId] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def pair(self) -> frozenset:
        """Direction-agnostic key used for duplicate detection."""
        return frozenset((self.source.id, self.target.id))


class FavoriteRegistry:
    """Favorites grouped by member, in registration order.

    Each member has its own lock, so members never wait on each other. The
    registry-wide lock only guards the lock table, the id -> owner index and
    id allocation. When a `Database` is given, existing favorites are loaded
    on construction and every change is written through before it becomes
    visible in memory.
    """

    def __init__(self, store: Optional[Database] = None):
        self._store = store
        self._lock = threading.Lock()
        self._member_locks: dict[MemberId, threading.Lock] = {}
        self._favorites: dict[MemberId, list[FavoritePath]] = {}
        self._owners: dict[int, MemberId] = {}
        self._last_id = 0

        if store is not None:
            self._load(store.load_favorites())

    def _load(self, favorites: list[FavoritePath]):
        for favorite in favorites:
            self._favorites.setdefault(favorite.member_id, []).append(favorite)
            self._member_locks.setdefault(favorite.member_id, threading.Lock())
            self._owners[favorite.id] = favorite.member_id
            self._last_id = max(self._last_id, favorite.id)
        if favorites:
            logger.info("Restored %d favorite path(s)", len(favorites))

    def _member_lock(self, member_id: MemberId) -> threading.Lock:
        with self._lock:
            lock = self._member_locks.get(member_id)
            if lock is None:
                lock = self._member_locks[member_id] = threading.Lock()
            return lock

    def _allocate_id(self) -> int:
        with self._lock:
            self._last_id += 1
            return self._last_id

    def register(self, member_id: MemberId, favorite: FavoritePath) -> FavoritePath:
        """Store a favorite for `member_id` under a fresh id."""
        with self._member_lock(member_id):
            existing = self._favorites.get(member_id, [])
            if any(f.pair == favorite.pair for f in existing):
                raise DuplicateFavoriteError(member_id, favorite.source.id, favorite.target.id)

            stored = replace(
                favorite,
                id=self._allocate_id(),
                member_id=member_id,
                created_at=datetime.now(timezone.utc),
            )
            if self._store is not None:
                self._store.add_favorite(stored)

            self._favorites.setdefault(member_id, []).append(stored)
            with self._lock:
                self._owners[stored.id] = member_id

        logger.info(
            "Member %s registered favorite %d: %s -> %s",
            member_id, stored.id, stored.source.name, stored.target.name,
        )
        return stored

    def list(self, member_id: MemberId) -> tuple[FavoritePath, ...]:
        # Locks exist only for members that have registered something
        with self._lock:
            lock = self._member_locks.get(member_id)
        if lock is None:
            return ()
        with lock:
            return tuple(self._favorites.get(member_id, ()))

    def get(self, member_id: MemberId, favorite_id: int) -> FavoritePath:
        self._check_owner(member_id, favorite_id)
        with self._member_lock(member_id):
            return self._find(member_id, favorite_id)

    def remove(self, member_id: MemberId, favorite_id: int) -> None:
        self._check_owner(member_id, favorite_id)
        with self._member_lock(member_id):
            favorite = self._find(member_id, favorite_id)
            if self._store is not None:
                self._store.delete_favorite(favorite_id)

            self._favorites[member_id].remove(favorite)
            with self._lock:
                self._owners.pop(favorite_id, None)

        logger.info("Member %s removed favorite %d", member_id, favorite_id)

    def _check_owner(self, member_id: MemberId, favorite_id: int):
        with self._lock:
            owner = self._owners.get(favorite_id)

        if owner is None:
            logger.info("Member %s asked for missing favorite %s", member_id, favorite_id)
            raise FavoriteNotFoundError(favorite_id)
        if owner != member_id:
            logger.warning(
                "Member %s asked for favorite %s owned by member %s", member_id, favorite_id, owner
            )
            raise ForbiddenError(favorite_id, member_id)

    def _find(self, member_id: MemberId, favorite_id: int) -> FavoritePath:
        # Another request may have removed it since the owner check
        for favorite in self._favorites.get(member_id, ()):
            if favorite.id == favorite_id:
                return favorite
        raise FavoriteNotFoundError(favorite_id)

    def close(self):
        if self._store is not None:
            self._store.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._owners)
