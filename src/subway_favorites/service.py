"""Resolving station names into favorite paths."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import NETWORK_PATH, PERSIST_FAVORITES, TRANSFER_PENALTY_MINUTES
from .database import Database
from .favorites import FavoritePath, FavoriteRegistry, MemberId
from .network import default_graph
from .routing import PathFinder, PathType, ResolvedPath
from .stations import Station, StationGraph

logger = logging.getLogger(__name__)


class FavoriteResolutionService:
    """Entry point for registering, listing and deleting favorites."""

    def __init__(
        self,
        graph: StationGraph,
        registry: Optional[FavoriteRegistry] = None,
        path_finder: Optional[PathFinder] = None,
    ):
        self.graph = graph
        self.registry = registry if registry is not None else FavoriteRegistry()
        self.path_finder = path_finder or PathFinder()

    def find_path(
        self, source_name: str, target_name: str, path_type: PathType = PathType.DISTANCE
    ) -> ResolvedPath:
        """Shortest path between two stations given by name."""
        source = self.graph.find_by_name(source_name)
        target = self.graph.find_by_name(target_name)
        logger.debug("Finding %s path %s -> %s", PathType.of(path_type).value, source.name, target.name)
        return self.path_finder.shortest_path(self.graph, source.id, target.id, path_type)

    def register_favorite(
        self,
        member_id: MemberId,
        source_name: str,
        target_name: str,
        path_type: PathType = PathType.DISTANCE,
    ) -> FavoritePath:
        """Resolve and save a favorite.

        Lookup, routing and duplicate errors propagate unchanged. Nothing is
        written unless every step succeeds.
        """
        source = self.graph.find_by_name(source_name)
        target = self.graph.find_by_name(target_name)
        path = self.path_finder.shortest_path(self.graph, source.id, target.id, path_type)

        draft = FavoritePath(source=source, target=target, path=path)
        return self.registry.register(member_id, draft)

    def retrieve_favorites(self, member_id: MemberId) -> tuple[FavoritePath, ...]:
        return self.registry.list(member_id)

    def delete_favorite(self, member_id: MemberId, favorite_id: int) -> None:
        self.registry.remove(member_id, favorite_id)

    def stations_on(self, path: ResolvedPath) -> list[Station]:
        return [self.graph.station(station_id) for station_id in path.station_ids]

    def close(self):
        self.registry.close()


def create_service(
    persist: bool = PERSIST_FAVORITES,
    db_path: Optional[Path] = None,
    network_path: Optional[str] = NETWORK_PATH,
) -> FavoriteResolutionService:
    """Wire up the configured network, registry and (optionally) database."""
    graph = default_graph(network_path)
    store = Database(db_path) if persist else None
    return FavoriteResolutionService(
        graph,
        FavoriteRegistry(store),
        PathFinder(TRANSFER_PENALTY_MINUTES),
    )
