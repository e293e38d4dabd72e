"""Shortest-path search over a station graph."""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import TRANSFER_PENALTY_MINUTES
from .errors import NoRouteError, SameStationError, UnknownStationError
from .stations import StationGraph

# (station id, line the train arrived on)
State = tuple[int, Optional[str]]


class PathType(str, Enum):
    """Which edge attribute a search minimises."""
    DISTANCE = "DISTANCE"
    DURATION = "DURATION"

    @classmethod
    def of(cls, value) -> PathType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown path type: {value}") from None


@dataclass(frozen=True)
class ResolvedPath:
    """A concrete route between two stations."""
    station_ids: tuple[int, ...]
    distance: float
    duration: float
    transfer_count: int = 0
    path_type: PathType = PathType.DISTANCE

    @property
    def source_id(self) -> int:
        return self.station_ids[0]

    @property
    def target_id(self) -> int:
        return self.station_ids[-1]

    @property
    def total_weight(self) -> float:
        if self.path_type is PathType.DURATION:
            return self.duration
        return self.distance

    def reversed(self) -> ResolvedPath:
        return ResolvedPath(
            station_ids=tuple(reversed(self.station_ids)),
            distance=self.distance,
            duration=self.duration,
            transfer_count=self.transfer_count,
            path_type=self.path_type,
        )

    def __str__(self):
        stops = " -> ".join(str(station_id) for station_id in self.station_ids)
        return f"{stops} (distance {self.distance}, ~{self.duration} min, {self.transfer_count} transfer(s))"


class PathFinder:
    """Dijkstra search with an interchange penalty.

    Search states are (station, line the train arrived on) so that changing
    lines can be charged `transfer_penalty` minutes. The penalty is part of
    the reported duration; distance queries ignore it. Each state keeps its
    cheapest known totals and the state it was reached from, and the route is
    rebuilt from those links once the target is popped. When two ways into a
    state cost the same, the one arriving from the lower station id is kept,
    which keeps results reproducible.
    """

    def __init__(self, transfer_penalty: float = TRANSFER_PENALTY_MINUTES):
        if transfer_penalty < 0:
            raise ValueError("transfer_penalty must not be negative")
        self.transfer_penalty = transfer_penalty

    def shortest_path(
        self,
        graph: StationGraph,
        source_id: int,
        target_id: int,
        path_type: PathType = PathType.DISTANCE,
    ) -> ResolvedPath:
        if source_id == target_id:
            raise SameStationError(source_id)
        for station_id in (source_id, target_id):
            if station_id not in graph:
                raise UnknownStationError(station_id)

        path_type = PathType.of(path_type)

        start: State = (source_id, None)
        # state -> (cost, distance, duration, transfers)
        best: dict[State, tuple] = {start: (0, 0, 0, 0)}
        previous: dict[State, State] = {}
        settled: set[State] = set()
        pq = [(0, source_id, _line_key(None), None)]

        while pq:
            _, current, _, line = heapq.heappop(pq)
            state = (current, line)
            if state in settled:
                continue
            settled.add(state)

            _, distance, duration, transfers = best[state]
            if current == target_id:
                return ResolvedPath(
                    station_ids=_unwind(previous, state),
                    distance=distance,
                    duration=duration,
                    transfer_count=transfers,
                    path_type=path_type,
                )

            for edge in graph.edges_from(current):
                new_transfers = transfers
                new_duration = duration + edge.duration
                if line is not None and edge.line is not None and edge.line != line:
                    new_transfers += 1
                    new_duration += self.transfer_penalty
                new_line = edge.line if edge.line is not None else line

                next_state = (edge.target_id, new_line)
                if next_state in settled:
                    continue

                new_distance = distance + edge.distance
                new_cost = new_duration if path_type is PathType.DURATION else new_distance
                known = best.get(next_state)
                if known is None or new_cost < known[0]:
                    heapq.heappush(pq, (new_cost, edge.target_id, _line_key(new_line), new_line))
                elif new_cost > known[0] or _state_key(previous[next_state]) <= _state_key(state):
                    continue
                best[next_state] = (new_cost, new_distance, new_duration, new_transfers)
                previous[next_state] = state

        raise NoRouteError(source_id, target_id)


def _line_key(line: Optional[str]) -> tuple[bool, str]:
    # Unlabelled sorts first; keeps None and str out of the same comparison
    return line is not None, line or ""


def _state_key(state: State) -> tuple[int, tuple[bool, str]]:
    return state[0], _line_key(state[1])


def _unwind(previous: dict[State, State], state: State) -> tuple[int, ...]:
    stations = [state[0]]
    while state in previous:
        state = previous[state]
        stations.append(state[0])
    stations.reverse()
    return tuple(stations)
