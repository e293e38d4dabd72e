"""Network topology: the bundled sample network and JSON loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from .stations import StationGraph

logger = logging.getLogger(__name__)


# Seoul subway stations around Gangnam
STATIONS_DATA = [
    "Kangnam", "Hanti", "Dogok", "Yangjae",
    "Kyodae", "Yeoksam", "Seolleung", "Samseong",
    "Guryong", "Gaepo-dong", "Nambu Bus Terminal", "Maebong",
    "Yangjae Citizen's Forest",
]

# Line -> segments in running order: (from, to, distance in meters, duration in minutes)
LINE_SEQUENCES = {
    "2": [
        ("Kyodae", "Kangnam", 1200, 2),
        ("Kangnam", "Yeoksam", 800, 2),
        ("Yeoksam", "Seolleung", 1000, 2),
        ("Seolleung", "Samseong", 900, 2),
    ],
    "Suin-Bundang": [
        ("Seolleung", "Hanti", 900, 2),
        ("Hanti", "Dogok", 700, 1),
        ("Dogok", "Guryong", 800, 2),
        ("Guryong", "Gaepo-dong", 900, 2),
    ],
    "3": [
        ("Kyodae", "Nambu Bus Terminal", 900, 2),
        ("Nambu Bus Terminal", "Yangjae", 1600, 3),
        ("Yangjae", "Maebong", 1400, 2),
        ("Maebong", "Dogok", 900, 2),
    ],
    "Shinbundang": [
        ("Kangnam", "Yangjae", 1900, 2),
        ("Yangjae", "Yangjae Citizen's Forest", 1600, 2),
    ],
}

Segment = Union[tuple, Mapping]


def _segment_fields(segment: Segment) -> tuple:
    if isinstance(segment, Mapping):
        return (
            segment["from"],
            segment["to"],
            segment["distance"],
            segment.get("duration"),
        )
    return tuple(segment)


def build_graph(
    stations: Iterable[str],
    lines: Mapping[str, Iterable[Segment]],
    freeze: bool = True,
) -> StationGraph:
    """Assemble a graph from station names and per-line segments.

    Segments are either (from, to, distance, duration) tuples or mappings with
    the same keys; duration is optional. Any topology error aborts the load.
    """
    graph = StationGraph()
    for name in stations:
        graph.add_station(name)

    for line, segments in lines.items():
        for segment in segments:
            from_name, to_name, distance, duration = _segment_fields(segment)
            graph.add_edge(
                graph.find_by_name(from_name),
                graph.find_by_name(to_name),
                distance,
                duration,
                line=str(line),
            )

    logger.info("Loaded subway network: %d stations, %d lines", len(graph), len(lines))
    return graph.freeze() if freeze else graph


def load_graph(path: Union[str, Path]) -> StationGraph:
    """Load a network from a JSON file.

    Expected layout::

        {"stations": ["A", "B"],
         "lines": {"1": [{"from": "A", "to": "B", "distance": 5, "duration": 2}]}}
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return build_graph(data["stations"], data.get("lines", {}))


def default_graph(path: Optional[Union[str, Path]] = None) -> StationGraph:
    """The configured network file if one is given, else the bundled sample."""
    if path:
        return load_graph(path)
    return build_graph(STATIONS_DATA, LINE_SEQUENCES)
