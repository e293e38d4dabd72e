"""Error types raised by the subway network and favorite registry."""

from __future__ import annotations


class SubwayError(Exception):
    """Base class for every error raised by this package."""


# Topology construction. These only happen while the network is being loaded.

class TopologyError(SubwayError):
    """The network could not be assembled."""


class DuplicateStationError(TopologyError):
    def __init__(self, name: str):
        super().__init__(f"Station already exists: {name}")
        self.name = name


class InvalidEdgeError(TopologyError):
    """An edge would break a graph invariant (e.g. a self loop)."""


class InvalidWeightError(InvalidEdgeError):
    def __init__(self, weight):
        super().__init__(f"Edge weight must be positive, got {weight!r}")
        self.weight = weight


class GraphFrozenError(TopologyError):
    def __init__(self):
        super().__init__("Station graph is frozen and cannot be modified")


# Per-request failures.

class StationNotFoundError(SubwayError, LookupError):
    def __init__(self, name):
        super().__init__(f"Station not found: {name}")
        self.name = name


class UnknownStationError(StationNotFoundError):
    """A station id that is not part of the graph."""

    def __init__(self, station_id):
        super().__init__(station_id)
        self.station_id = station_id


class SameStationError(SubwayError, ValueError):
    def __init__(self, station_id):
        super().__init__("Source and destination must be different stations")
        self.station_id = station_id


class NoRouteError(SubwayError):
    def __init__(self, source_id, target_id):
        super().__init__(f"No route exists between stations {source_id} and {target_id}")
        self.source_id = source_id
        self.target_id = target_id


class DuplicateFavoriteError(SubwayError):
    def __init__(self, member_id, source_id, target_id):
        super().__init__("This favorite path is already registered")
        self.member_id = member_id
        self.source_id = source_id
        self.target_id = target_id


class FavoriteNotFoundError(SubwayError, LookupError):
    def __init__(self, favorite_id):
        super().__init__(f"Favorite path not found: {favorite_id}")
        self.favorite_id = favorite_id


class ForbiddenError(FavoriteNotFoundError):
    """The favorite exists but belongs to another member.

    Subclasses FavoriteNotFoundError so callers that only catch the parent
    report both cases identically and never reveal someone else's favorite.
    """

    def __init__(self, favorite_id, member_id):
        super().__init__(favorite_id)
        self.member_id = member_id
