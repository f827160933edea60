"""
Static spatial index over axis-aligned boxes.

Backed by shapely's STRtree (Sort-Tile-Recursive bulk loading). The tree is
built once from a complete set of primitives and is read-only afterwards,
so any number of queries may run against it.

Example:
    >>> index = SpatialIndex.bulk_load([
    ...     IndexedPrimitive.from_corners("left", (0.0, 0.0), (0.4, 1.0)),
    ...     IndexedPrimitive.from_corners("right", (0.6, 0.0), (1.0, 1.0)),
    ... ])
    >>> [p.label for p in index.locate_all_at_point((0.2, 0.5))]
    ['left']
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from shapely.geometry import LineString, Point, box
from shapely.geometry.base import BaseGeometry
from shapely.strtree import STRtree

from config.logging_config import get_logger
from config.settings import settings

logger = get_logger(__name__)

Point2D = Tuple[float, float]


@dataclass(frozen=True)
class IndexedPrimitive:
    """A labelled axis-aligned box with its area precomputed."""

    label: str
    lower: Point2D
    upper: Point2D
    area: float = field(init=False)
    payload: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.lower[0] > self.upper[0] or self.lower[1] > self.upper[1]:
            raise ValueError(f"Lower corner {self.lower} exceeds upper corner {self.upper}")
        width = self.upper[0] - self.lower[0]
        height = self.upper[1] - self.lower[1]
        object.__setattr__(self, "area", width * height)

    @classmethod
    def from_corners(
        cls, label: str, a: Point2D, b: Point2D, payload: Any = None
    ) -> "IndexedPrimitive":
        """Build from any two opposite corners."""
        lower = (min(a[0], b[0]), min(a[1], b[1]))
        upper = (max(a[0], b[0]), max(a[1], b[1]))
        return cls(label=label, lower=lower, upper=upper, payload=payload)

    @classmethod
    def from_bounds(
        cls, label: str, bounds: Tuple[float, float, float, float], payload: Any = None
    ) -> "IndexedPrimitive":
        """Build from shapely-style (minx, miny, maxx, maxy) bounds."""
        minx, miny, maxx, maxy = bounds
        return cls(label=label, lower=(minx, miny), upper=(maxx, maxy), payload=payload)

    def contains_point(self, point: Point2D) -> bool:
        """Inclusive containment: points on an edge are inside."""
        x, y = point
        return (
            self.lower[0] <= x <= self.upper[0]
            and self.lower[1] <= y <= self.upper[1]
        )

    def distance_2(self, point: Point2D) -> float:
        """Squared Euclidean distance from point to box, 0 inside."""
        x, y = point
        dx = max(self.lower[0] - x, 0.0, x - self.upper[0])
        dy = max(self.lower[1] - y, 0.0, y - self.upper[1])
        return dx * dx + dy * dy

    def to_geometry(self) -> BaseGeometry:
        """Shapely geometry for the box; collapsed boxes become points or lines."""
        (minx, miny), (maxx, maxy) = self.lower, self.upper
        if minx == maxx and miny == maxy:
            return Point(minx, miny)
        if minx == maxx or miny == maxy:
            return LineString([(minx, miny), (maxx, maxy)])
        return box(minx, miny, maxx, maxy)


class SpatialIndex:
    """
    Immutable bounding-volume tree over IndexedPrimitives.

    Use SpatialIndex.bulk_load() to build it. Queries never modify the tree.
    An empty index answers every query with an empty result.
    """

    def __init__(self, primitives: Sequence[IndexedPrimitive], node_capacity: Optional[int] = None):
        self._primitives: Tuple[IndexedPrimitive, ...] = tuple(primitives)
        capacity = node_capacity or settings.index.node_capacity
        self._tree = STRtree(
            [primitive.to_geometry() for primitive in self._primitives],
            node_capacity=capacity,
        )
        logger.debug(f"Bulk-loaded spatial index with {len(self._primitives)} primitive(s)")

    @classmethod
    def bulk_load(
        cls, primitives: Sequence[IndexedPrimitive], node_capacity: Optional[int] = None
    ) -> "SpatialIndex":
        """Build the index from the complete set of primitives."""
        return cls(primitives, node_capacity=node_capacity)

    def __len__(self) -> int:
        return len(self._primitives)

    @property
    def primitives(self) -> Tuple[IndexedPrimitive, ...]:
        return self._primitives

    def locate_all_at_point(self, point: Point2D) -> Iterator[IndexedPrimitive]:
        """
        Yield every primitive whose box contains ``point``.

        Edges count as inside. Results come in insertion order; calling again
        re-walks the tree.
        """
        if not self._primitives:
            return
        hits = self._tree.query(Point(point), predicate="intersects")
        for i in np.sort(hits):
            primitive = self._primitives[int(i)]
            if primitive.contains_point(point):
                yield primitive

    def nearest_with_distance(
        self, point: Point2D
    ) -> Optional[Tuple[IndexedPrimitive, float]]:
        """
        Nearest primitive and its squared distance.

        Among equidistant primitives the one inserted first wins.

        Returns:
            (primitive, squared distance) or None for an empty index
        """
        if not self._primitives:
            return None
        hits = self._tree.query_nearest(Point(point), all_matches=True)
        if len(hits) == 0:
            return None
        candidates = [self._primitives[int(i)] for i in np.sort(hits)]
        best = min(candidates, key=lambda p: p.distance_2(point))
        return best, best.distance_2(point)

    def nearest(self, point: Point2D) -> Optional[IndexedPrimitive]:
        """Nearest primitive by squared distance to its box, or None if empty."""
        found = self.nearest_with_distance(point)
        return found[0] if found is not None else None


def bulk_load(primitives: Sequence[IndexedPrimitive]) -> SpatialIndex:
    """Module-level shortcut for SpatialIndex.bulk_load()."""
    return SpatialIndex.bulk_load(primitives)


def primitives_from_tuples(
    items: Sequence[Tuple[str, Point2D, Point2D]]
) -> List[IndexedPrimitive]:
    """Convert (label, lower corner, upper corner) tuples to primitives."""
    return [IndexedPrimitive.from_corners(label, lower, upper) for label, lower, upper in items]
