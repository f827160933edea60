"""
Boundary locator.

Answers "which boundary is this point in" by filtering boundaries through
the bounding-box index and confirming candidates with exact polygon
containment.
"""

from typing import List, Optional, Sequence

from shapely.geometry import Point
from shapely.prepared import prep

from config.logging_config import get_logger
from src.boundaries.models import BoundaryMultiPolygon
from src.spatial.index import IndexedPrimitive, SpatialIndex

logger = get_logger(__name__)


class BoundaryLocator:
    """
    Point lookups over a fixed set of boundaries.

    Example:
        >>> locator = BoundaryLocator(boundaries)
        >>> [b.name for b in locator.locate(8.80, 53.07)]
        ['Mitte']
    """

    def __init__(self, boundaries: Sequence[BoundaryMultiPolygon]):
        self.boundaries = list(boundaries)
        self.index = SpatialIndex.bulk_load(
            [
                IndexedPrimitive.from_bounds(b.name, b.bounds, payload=i)
                for i, b in enumerate(self.boundaries)
            ]
        )
        self._shapes = [prep(b.to_shapely()) for b in self.boundaries]

        logger.debug(f"Initialized BoundaryLocator with {len(self.boundaries)} boundaries")

    def locate(self, lon: float, lat: float) -> List[BoundaryMultiPolygon]:
        """
        Boundaries whose area covers the point (edges included).

        Args:
            lon: Longitude (x)
            lat: Latitude (y)

        Returns:
            Matching boundaries in input order, possibly empty
        """
        point = Point(lon, lat)
        return [
            self.boundaries[candidate.payload]
            for candidate in self.index.locate_all_at_point((lon, lat))
            if self._shapes[candidate.payload].covers(point)
        ]

    def nearest(self, lon: float, lat: float) -> Optional[BoundaryMultiPolygon]:
        """Boundary with the nearest bounding box, or None when there are none."""
        primitive = self.index.nearest((lon, lat))
        if primitive is None:
            return None
        return self.boundaries[primitive.payload]
