"""Subway stations and the weighted graph connecting them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .errors import (
    DuplicateStationError,
    GraphFrozenError,
    InvalidEdgeError,
    InvalidWeightError,
    StationNotFoundError,
    UnknownStationError,
)


@dataclass(frozen=True)
class Station:
    """Represents a subway station."""
    id: int
    name: str


@dataclass(frozen=True)
class Edge:
    """A track segment leaving `source_id`."""
    source_id: int
    target_id: int
    distance: float
    duration: float
    line: Optional[str] = None


StationRef = Union[Station, int]


def _normalize(name: str) -> str:
    return name.strip().lower()


class StationGraph:
    """Graph of stations keyed by integer id.

    Stations live in a flat id -> Station map and edges in an
    id -> {neighbor id -> Edge} adjacency map. Once `freeze()` is called the
    graph is read-only and can be shared between threads without locking.
    """

    def __init__(self):
        self._stations: dict[int, Station] = {}
        self._adjacency: dict[int, dict[int, Edge]] = {}
        self._name_index: dict[str, int] = {}
        self._next_id = 1
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> StationGraph:
        self._frozen = True
        return self

    def add_station(self, name: str) -> Station:
        """Add a station with a network-unique name."""
        self._check_mutable()
        key = _normalize(name)
        if not key:
            raise ValueError("Station name must not be empty")
        if key in self._name_index:
            raise DuplicateStationError(name)

        station = Station(id=self._next_id, name=name.strip())
        self._next_id += 1
        self._stations[station.id] = station
        self._adjacency[station.id] = {}
        self._name_index[key] = station.id
        return station

    def add_edge(
        self,
        station_a: StationRef,
        station_b: StationRef,
        distance: float,
        duration: Optional[float] = None,
        line: Optional[str] = None,
        bidirectional: bool = True,
    ) -> None:
        """Connect two stations, replacing any existing edge between them.

        `duration` defaults to `distance` for networks with a single weight.
        """
        self._check_mutable()
        a_id = self._resolve(station_a)
        b_id = self._resolve(station_b)
        if a_id == b_id:
            raise InvalidEdgeError(f"Self loop on station {a_id}")
        if duration is None:
            duration = distance
        for weight in (distance, duration):
            if isinstance(weight, bool) or not weight > 0:
                raise InvalidWeightError(weight)

        self._adjacency[a_id][b_id] = Edge(a_id, b_id, distance, duration, line)
        if bidirectional:
            self._adjacency[b_id][a_id] = Edge(b_id, a_id, distance, duration, line)

    def find_by_name(self, name: str) -> Station:
        station_id = self._name_index.get(_normalize(name))
        if station_id is None:
            raise StationNotFoundError(name)
        return self._stations[station_id]

    def station(self, station_id: int) -> Station:
        try:
            return self._stations[station_id]
        except (KeyError, TypeError):
            raise UnknownStationError(station_id) from None

    def edges_from(self, station_id: int) -> Iterator[Edge]:
        if station_id not in self._adjacency:
            raise UnknownStationError(station_id)
        return iter(tuple(self._adjacency[station_id].values()))

    def edge(self, source_id: int, target_id: int) -> Optional[Edge]:
        return self._adjacency.get(source_id, {}).get(target_id)

    @property
    def stations(self) -> tuple[Station, ...]:
        return tuple(self._stations.values())

    def edge_count(self) -> int:
        """Number of directed adjacency entries."""
        return sum(len(neighbors) for neighbors in self._adjacency.values())

    def __contains__(self, station_id) -> bool:
        try:
            return station_id in self._stations
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._stations)

    def _resolve(self, ref: StationRef) -> int:
        station_id = ref.id if isinstance(ref, Station) else ref
        if station_id not in self:
            raise UnknownStationError(station_id)
        if isinstance(ref, Station) and self._stations[station_id] != ref:
            raise UnknownStationError(station_id)
        return station_id

    def _check_mutable(self):
        if self._frozen:
            raise GraphFrozenError()
